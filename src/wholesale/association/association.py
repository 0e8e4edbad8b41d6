"""CustomerSupplierAssociation aggregate — who may order from whom.

The identity of an association is derived from its (customer, supplier) pair,
so the store's primary key doubles as the pair's uniqueness constraint.
"""

from datetime import UTC, datetime
from uuid import NAMESPACE_URL, uuid5

from protean.fields import Boolean, DateTime, Identifier, String

from wholesale.association.events import AssociationActivated, AssociationCreated, AssociationDeactivated
from wholesale.domain import wholesale


def association_id(customer_id, supplier_id) -> str:
    return str(uuid5(NAMESPACE_URL, f"wholesale:association:{customer_id}:{supplier_id}"))


@wholesale.aggregate
class CustomerSupplierAssociation:
    customer_id = Identifier(required=True)
    customer_name = String(max_length=255)
    supplier_id = Identifier(required=True)
    supplier_name = String(max_length=255)
    is_active = Boolean(default=True)
    notes = String(max_length=1000)
    created_by = Identifier()
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def create(cls, customer_id, supplier_id, customer_name=None, supplier_name=None, notes=None, created_by=None):
        now = datetime.now(UTC)
        association = cls(
            id=association_id(customer_id, supplier_id),
            customer_id=customer_id,
            customer_name=customer_name,
            supplier_id=supplier_id,
            supplier_name=supplier_name,
            is_active=True,
            notes=notes,
            created_by=created_by,
            created_at=now,
            updated_at=now,
        )
        association.raise_(
            AssociationCreated(
                association_id=str(association.id),
                customer_id=str(customer_id),
                supplier_id=str(supplier_id),
                created_by=created_by,
                created_at=now,
            )
        )
        return association

    def activate(self):
        """Returns False when the association was already active."""
        if self.is_active:
            return False

        now = datetime.now(UTC)
        self.is_active = True
        self.updated_at = now
        self.raise_(
            AssociationActivated(
                association_id=str(self.id),
                customer_id=str(self.customer_id),
                supplier_id=str(self.supplier_id),
                activated_at=now,
            )
        )
        return True

    def deactivate(self, reason=None):
        """Returns False when the association was already inactive."""
        if not self.is_active:
            return False

        now = datetime.now(UTC)
        self.is_active = False
        self.updated_at = now
        self.raise_(
            AssociationDeactivated(
                association_id=str(self.id),
                customer_id=str(self.customer_id),
                supplier_id=str(self.supplier_id),
                reason=reason,
                deactivated_at=now,
            )
        )
        return True
