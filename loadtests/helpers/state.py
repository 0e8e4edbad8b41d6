"""Per-user state tracking for Locust load test scenarios.

Each Locust user instance maintains its own state. State tracks the ids
returned by creation endpoints so follow-up operations can reference them.
"""

from dataclasses import dataclass, field


@dataclass
class TradingState:
    """One supplier/customer pair trading through a single price list."""

    admin_id: str
    supplier_id: str
    supplier_name: str
    customer_id: str
    customer_name: str
    category_id: str | None = None
    product_ids: list[str] = field(default_factory=list)
    price_list_id: str | None = None
    order_id: str | None = None
    order_status: str = "pending_approval"


@dataclass
class PriceListState:
    """A supplier rolling price lists forward week by week."""

    admin_id: str
    supplier_id: str
    supplier_name: str
    price_list_ids: list[str] = field(default_factory=list)
    weeks_ahead: int = 1
