"""Repository for the PriceList aggregate."""

from wholesale.domain import wholesale
from wholesale.price_list.price_list import PriceList, PriceListStatus


@wholesale.repository(part_of=PriceList)
class PriceListRepository:
    """Supplier-scoped lookups on top of the standard add/get."""

    def active_for_supplier(self, supplier_id) -> list[PriceList]:
        """Every ACTIVE list of the supplier (at most one when consistent)."""
        return (
            self._dao.query.filter(supplier_id=str(supplier_id), status=PriceListStatus.ACTIVE.value)
            .limit(1000)
            .all()
            .items
        )

    def for_supplier(self, supplier_id) -> list[PriceList]:
        """All lists of the supplier, newest delivery window first."""
        return self._dao.query.filter(supplier_id=str(supplier_id)).order_by("-effective_date").limit(1000).all().items

    def with_status(self, status) -> list[PriceList]:
        return self._dao.query.filter(status=status).order_by("-effective_date").limit(1000).all().items
