"""Domain events for the PriceList aggregate."""

from protean.fields import Boolean, Date, DateTime, Float, Identifier, String

from wholesale.domain import wholesale


@wholesale.event(part_of="PriceList")
class PriceListCreated:
    """A supplier opened a new draft price list."""

    __version__ = 1

    price_list_id: Identifier(required=True)
    supplier_id: Identifier(required=True)
    name: String(required=True)
    effective_date: Date(required=True)
    expiry_date: Date(required=True)
    currency: String(max_length=3)
    duplicated_from: Identifier()
    created_at: DateTime(required=True)


@wholesale.event(part_of="PriceList")
class PriceListItemSet:
    """A product price was added to or changed on a price list."""

    __version__ = 1

    price_list_id: Identifier(required=True)
    product_id: Identifier(required=True)
    price_box: Float(required=True)
    previous_price_box: Float()
    is_available: Boolean(default=True)


@wholesale.event(part_of="PriceList")
class PriceListItemRemoved:
    __version__ = 1

    price_list_id: Identifier(required=True)
    product_id: Identifier(required=True)


@wholesale.event(part_of="PriceList")
class VacSurchargeSet:
    """The per-kilogram VAC surcharge of a category changed (None clears it)."""

    __version__ = 1

    price_list_id: Identifier(required=True)
    category_id: Identifier(required=True)
    surcharge: Float()
    previous_surcharge: Float()


@wholesale.event(part_of="PriceList")
class PriceListRescheduled:
    __version__ = 1

    price_list_id: Identifier(required=True)
    name: String(required=True)
    effective_date: Date(required=True)
    expiry_date: Date(required=True)


@wholesale.event(part_of="PriceList")
class PriceListSubmitted:
    """The supplier asked an admin to approve the price list."""

    __version__ = 1

    price_list_id: Identifier(required=True)
    supplier_id: Identifier(required=True)
    supplier_name: String()
    name: String(required=True)
    submitted_at: DateTime(required=True)


@wholesale.event(part_of="PriceList")
class PriceListActivated:
    __version__ = 1

    price_list_id: Identifier(required=True)
    supplier_id: Identifier(required=True)
    previous_status: String(required=True)
    activated_at: DateTime(required=True)


@wholesale.event(part_of="PriceList")
class PriceListArchived:
    """Superseded by another active price list of the same supplier."""

    __version__ = 1

    price_list_id: Identifier(required=True)
    supplier_id: Identifier(required=True)
    superseded_by: Identifier()
    archived_at: DateTime(required=True)


@wholesale.event(part_of="PriceList")
class PriceListReturnedToDraft:
    """An approval request was rejected or withdrawn."""

    __version__ = 1

    price_list_id: Identifier(required=True)
    supplier_id: Identifier(required=True)
    returned_at: DateTime(required=True)
