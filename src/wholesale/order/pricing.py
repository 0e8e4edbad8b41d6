"""Pricing snapshot — freezes order line prices at the moment of ordering.

Everything here is a pure function of its arguments. The surcharge map is
copied on entry and never read again, so edits made to a price list after an
order is placed cannot reach the order's lines.

VAC (vacuum-packed) quantities are recorded with the surcharge in effect, but
they never contribute to a line total: the supplier settles the surcharge
against the actual shipped weight.
"""

from collections.abc import Mapping
from dataclasses import asdict, dataclass

from protean.exceptions import ValidationError


@dataclass(frozen=True)
class PricedLine:
    product_id: str
    product_name: str
    category_id: str
    category_name: str
    quantity_regular: float
    quantity_vac: float
    unit_price: float
    vac_surcharge_at_order: float | None
    total: float

    def as_dict(self) -> dict:
        return asdict(self)


def line_quantity(line, key, product_id) -> float:
    value = line.get(key) or 0
    if not isinstance(value, int | float) or isinstance(value, bool):
        raise ValidationError({key: [f"Quantity for product {product_id} must be a number"]})
    if value < 0:
        raise ValidationError({key: [f"Quantity for product {product_id} cannot be negative"]})
    return value


def snapshot_lines(cart: Mapping, vac_surcharges: Mapping | None, catalogue: Mapping) -> tuple[PricedLine, ...]:
    """Price every cart line against the given surcharges and catalogue.

    Args:
        cart: product id → {"quantity_regular", "quantity_vac", "unit_price"},
            in the order the lines should appear on the order.
        vac_surcharges: category id → surcharge per kg. A missing category
            means no surcharge is configured.
        catalogue: product id → ``CatalogueEntry`` (name, category, VAC flag).

    Returns:
        A tuple of ``PricedLine`` values in cart order.
    """
    if not cart:
        raise ValidationError({"items": ["An order needs at least one line"]})
    surcharges = dict(vac_surcharges or {})

    lines = []
    for product_id, line in cart.items():
        entry = catalogue.get(str(product_id))
        if entry is None:
            raise ValidationError({"items": [f"Unknown product {product_id}"]})

        quantity_regular = line_quantity(line, "quantity_regular", product_id)
        quantity_vac = line_quantity(line, "quantity_vac", product_id)
        if quantity_regular == 0 and quantity_vac == 0:
            raise ValidationError({"items": [f"Line for {entry.product_name} orders nothing"]})
        if quantity_vac and not entry.vac_enabled:
            raise ValidationError({"quantity_vac": [f"{entry.category_name} does not offer VAC packaging"]})

        unit_price = line.get("unit_price")
        if unit_price is None or unit_price < 0:
            raise ValidationError({"unit_price": [f"Missing or negative price for {entry.product_name}"]})

        surcharge = surcharges.get(entry.category_id)
        lines.append(
            PricedLine(
                product_id=str(product_id),
                product_name=entry.product_name,
                category_id=entry.category_id,
                category_name=entry.category_name,
                quantity_regular=quantity_regular,
                quantity_vac=quantity_vac,
                unit_price=float(unit_price),
                vac_surcharge_at_order=float(surcharge) if surcharge is not None else None,
                total=round(quantity_regular * unit_price, 2),
            )
        )
    return tuple(lines)


def order_total(lines) -> float:
    """Sum of regular quantity × unit price over the lines, to the cent."""
    return round(sum(line.quantity_regular * line.unit_price for line in lines), 2)
