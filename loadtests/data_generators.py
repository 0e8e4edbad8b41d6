"""Faker-based data generators for Locust load test scenarios.

Each generator produces payloads that pass the domain's validation rules and
match the field names expected by the API's Pydantic request schemas.
"""

import random
import uuid
from datetime import date, timedelta

from faker import Faker

fake = Faker()

FISH = ["Sea Bream", "Sea Bass", "Turbot", "Sole", "Hake", "Cod", "Mackerel", "Monkfish"]


def user_id(role: str) -> str:
    """Generate unique user ids like 'sup-LT-a1b2c3d4'."""
    return f"{role[:4]}-LT-{uuid.uuid4().hex[:8]}"


def identity_headers(user: str, role: str, name: str = "") -> dict:
    """Headers the identity provider in front of the API would set."""
    return {"X-User-Id": user, "X-User-Role": role, "X-User-Name": name}


def business_name() -> str:
    return fake.company()[:255]


# ---------- Catalogue ----------


def category_data(supplier_id: str, vac: bool = True) -> dict:
    """Generate CreateCategoryRequest payload."""
    return {
        "supplier_id": supplier_id,
        "name": f"{fake.word().capitalize()} Fish"[:255],
        "enable_vac_pricing": vac,
        "unit_of_measure": random.choice(["box", "kg"]),
    }


def product_data(supplier_id: str, category_id: str) -> dict:
    """Generate CreateProductRequest payload."""
    return {
        "supplier_id": supplier_id,
        "category_id": category_id,
        "name": f"{random.choice(FISH)} {uuid.uuid4().hex[:4].upper()}",
    }


# ---------- Price Lists ----------


def delivery_window(weeks_ahead: int = 1) -> tuple[str, str]:
    """A Monday-to-Sunday delivery window, as ISO dates."""
    today = date.today()
    start = today + timedelta(days=7 * weeks_ahead - today.weekday())
    return start.isoformat(), (start + timedelta(days=6)).isoformat()


def price_list_data(supplier_id: str, supplier_name: str, weeks_ahead: int = 1) -> dict:
    """Generate CreatePriceListRequest payload."""
    effective, expiry = delivery_window(weeks_ahead)
    return {
        "supplier_id": supplier_id,
        "supplier_name": supplier_name,
        "effective_date": effective,
        "expiry_date": expiry,
        "notes": fake.sentence()[:1000],
    }


def price_item_data() -> dict:
    """Generate SetPriceListItemRequest payload."""
    return {"price_box": round(random.uniform(4.0, 45.0), 2), "min_quantity": 1, "max_quantity": 50}


def surcharge_data() -> dict:
    return {"surcharge": round(random.uniform(0.5, 2.5), 2)}


# ---------- Orders ----------


def order_lines(product_ids: list[str], vac: bool = True) -> list[dict]:
    """Generate OrderLineRequest payloads, one per product."""
    return [
        {
            "product_id": product_id,
            "quantity_regular": random.randint(1, 10),
            "quantity_vac": random.randint(0, 5) if vac else 0,
        }
        for product_id in product_ids
    ]


def order_data(supplier_id: str, price_list_id: str, product_ids: list[str]) -> dict:
    """Generate PlaceOrderRequest payload."""
    return {
        "supplier_id": supplier_id,
        "price_list_id": price_list_id,
        "items": order_lines(product_ids),
        "customer_notes": fake.sentence()[:2000],
    }
