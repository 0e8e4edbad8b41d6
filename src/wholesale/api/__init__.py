"""Wholesale domain API package."""

from wholesale.api.routes import (
    association_router,
    catalogue_router,
    notification_router,
    order_router,
    price_list_router,
)

__all__ = [
    "association_router",
    "catalogue_router",
    "notification_router",
    "order_router",
    "price_list_router",
]
