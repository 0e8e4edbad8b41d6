"""Repository for the CustomerSupplierAssociation aggregate."""

from protean.exceptions import ObjectNotFoundError

from wholesale.association.association import CustomerSupplierAssociation, association_id
from wholesale.domain import wholesale


@wholesale.repository(part_of=CustomerSupplierAssociation)
class AssociationRepository:
    def for_pair(self, customer_id, supplier_id) -> CustomerSupplierAssociation | None:
        try:
            return self.get(association_id(customer_id, supplier_id))
        except ObjectNotFoundError:
            return None

    def for_customer(self, customer_id, active_only=True) -> list[CustomerSupplierAssociation]:
        query = self._dao.query.filter(customer_id=str(customer_id))
        if active_only:
            query = query.filter(is_active=True)
        return query.order_by("created_at").limit(1000).all().items

    def for_supplier(self, supplier_id, active_only=True) -> list[CustomerSupplierAssociation]:
        query = self._dao.query.filter(supplier_id=str(supplier_id))
        if active_only:
            query = query.filter(is_active=True)
        return query.order_by("created_at").limit(1000).all().items

    def everything(self) -> list[CustomerSupplierAssociation]:
        return self._dao.query.order_by("-created_at").limit(10000).all().items
