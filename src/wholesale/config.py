"""Runtime settings for the Wholesale domain.

Values come from environment variables and are read on every call, so a
deployment (or a test) can change them without re-importing the domain.
"""

import os
from dataclasses import dataclass


def _flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    admin_ids: tuple[str, ...]
    currency: str
    price_list_self_activation: bool
    approval_notifications: bool
    order_number_attempts: int


def load_settings() -> Settings:
    admin_ids = tuple(part.strip() for part in os.getenv("WHOLESALE_ADMIN_IDS", "").split(",") if part.strip())
    return Settings(
        admin_ids=admin_ids,
        currency=os.getenv("WHOLESALE_CURRENCY", "EUR"),
        price_list_self_activation=_flag("WHOLESALE_PRICE_LIST_SELF_ACTIVATION", True),
        approval_notifications=_flag("WHOLESALE_APPROVAL_NOTIFICATIONS", True),
        order_number_attempts=int(os.getenv("WHOLESALE_ORDER_NUMBER_ATTEMPTS", "10")),
    )
