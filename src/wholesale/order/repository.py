"""Repository for the Order aggregate."""

from wholesale.domain import wholesale
from wholesale.order.order import Order

_PAGE_SIZE = 1000


@wholesale.repository(part_of=Order)
class OrderRepository:
    """Order lookups, newest first. Supplier visibility is applied by the callers.

    Listings read the store page by page, so they are never cut short.
    """

    def _every(self, query) -> list[Order]:
        orders, offset = [], 0
        while True:
            page = query.offset(offset).limit(_PAGE_SIZE).all().items
            orders.extend(page)
            if len(page) < _PAGE_SIZE:
                return orders
            offset += _PAGE_SIZE

    def with_number(self, order_number) -> list[Order]:
        return self._dao.query.filter(order_number=order_number).all().items

    def for_customer(self, customer_id) -> list[Order]:
        return self._every(self._dao.query.filter(customer_id=str(customer_id)).order_by("-order_date"))

    def for_supplier(self, supplier_id) -> list[Order]:
        return self._every(self._dao.query.filter(supplier_id=str(supplier_id)).order_by("-order_date"))

    def with_status(self, status) -> list[Order]:
        return self._every(self._dao.query.filter(status=status).order_by("-order_date"))

    def placed_between(self, start, end) -> list[Order]:
        """Orders with ``start <= order_date < end``."""
        return self._every(self._dao.query.filter(order_date__gte=start, order_date__lt=end).order_by("-order_date"))

    def everything(self) -> list[Order]:
        return self._every(self._dao.query.order_by("-order_date"))
