"""PriceList aggregate (CQRS) — a supplier's prices for one delivery window.

State Machine (4 states):
    DRAFT → PENDING_APPROVAL → ACTIVE → ARCHIVED
    DRAFT → ACTIVE                       (supplier self-activation)
    PENDING_APPROVAL → DRAFT             (rejected or withdrawn)

A supplier has at most one ACTIVE list. Activating a list archives the one it
replaces; ARCHIVED is terminal. Items and VAC surcharges can be edited while
the list is DRAFT or ACTIVE.
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import Boolean, Date, DateTime, Float, HasMany, Identifier, Integer, String, Text

from wholesale.domain import wholesale
from wholesale.price_list.events import (
    PriceListActivated,
    PriceListArchived,
    PriceListCreated,
    PriceListItemRemoved,
    PriceListItemSet,
    PriceListRescheduled,
    PriceListReturnedToDraft,
    PriceListSubmitted,
    VacSurchargeSet,
)
from wholesale.shared.exceptions import ConflictError, InvalidTransitionError


class PriceListStatus(Enum):
    DRAFT = "draft"
    PENDING_APPROVAL = "pending_approval"
    ACTIVE = "active"
    ARCHIVED = "archived"


_VALID_TRANSITIONS = {
    PriceListStatus.DRAFT: {PriceListStatus.PENDING_APPROVAL, PriceListStatus.ACTIVE},
    PriceListStatus.PENDING_APPROVAL: {PriceListStatus.ACTIVE, PriceListStatus.DRAFT},
    PriceListStatus.ACTIVE: {PriceListStatus.ARCHIVED},
    PriceListStatus.ARCHIVED: set(),  # Terminal
}

_EDITABLE_STATES = {PriceListStatus.DRAFT, PriceListStatus.ACTIVE}

_DAY_NAMES = ["MON", "TUE", "WED", "THU", "FRI", "SAT", "SUN"]


def price_list_name(effective_date, expiry_date):
    """Derive the display name from the delivery window.

    >>> price_list_name(date(2025, 11, 11), date(2025, 11, 12))
    'PRICES ETA TUE/WED 12-11-2025'
    """
    start_day = _DAY_NAMES[effective_date.weekday()]
    end_day = _DAY_NAMES[expiry_date.weekday()]
    return f"PRICES ETA {start_day}/{end_day} {expiry_date.strftime('%d-%m-%Y')}"


def _validate_window(effective_date, expiry_date):
    if effective_date is None or expiry_date is None:
        raise ValidationError({"effective_date": ["Delivery start and end dates are required"]})
    if expiry_date < effective_date:
        raise ValidationError({"expiry_date": ["Delivery end date cannot be before the start date"]})


def _validate_amount(field, value):
    if value is not None and value < 0:
        raise ValidationError({field: ["Amount cannot be negative"]})


def normalize_currency(code):
    """Upper-case ISO 4217 style code; any three-letter code is accepted."""
    normalized = (code or "").strip().upper()
    if len(normalized) != 3 or not normalized.isalpha():
        raise ValidationError({"currency": [f"Not a three-letter currency code: {code}"]})
    return normalized


@wholesale.entity(part_of="PriceList")
class PriceListItem:
    """One product's price within a price list."""

    product_id = Identifier(required=True)
    price_box = Float(required=True, min_value=0.0)
    price_box_vac = Float(min_value=0.0)
    vac_surcharge = Float(min_value=0.0)
    currency = String(max_length=3)
    min_quantity = Integer(min_value=0)
    max_quantity = Integer(min_value=0)
    is_available = Boolean(default=True)
    notes = String(max_length=500)


@wholesale.aggregate
class PriceList:
    supplier_id = Identifier(required=True)
    supplier_name = String(required=True, max_length=255)
    name = String(required=True, max_length=255)
    effective_date = Date(required=True)
    expiry_date = Date(required=True)
    currency = String(required=True, max_length=3)
    status = String(choices=PriceListStatus, default=PriceListStatus.DRAFT.value)
    is_default = Boolean(default=False)
    notes = String(max_length=1000)
    vac_surcharges = Text()  # JSON object: category id -> surcharge per kg in the list currency
    items = HasMany(PriceListItem)
    created_by = Identifier(required=True)
    submitted_at = DateTime()
    activated_at = DateTime()
    archived_at = DateTime()
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(
        cls,
        supplier_id,
        supplier_name,
        effective_date,
        expiry_date,
        created_by,
        currency,
        notes=None,
        vac_surcharges=None,
        duplicated_from=None,
    ):
        """Open a new DRAFT price list for the given delivery window.

        Every item on the list is priced in ``currency``.
        """
        _validate_window(effective_date, expiry_date)
        currency = normalize_currency(currency)
        for amount in (vac_surcharges or {}).values():
            _validate_amount("vac_surcharges", amount)

        now = datetime.now(UTC)
        name = price_list_name(effective_date, expiry_date)
        price_list = cls(
            supplier_id=supplier_id,
            supplier_name=supplier_name,
            name=name,
            effective_date=effective_date,
            expiry_date=expiry_date,
            currency=currency,
            status=PriceListStatus.DRAFT.value,
            is_default=False,
            notes=notes,
            vac_surcharges=json.dumps(dict(vac_surcharges or {})),
            created_by=created_by,
            created_at=now,
            updated_at=now,
        )
        price_list.raise_(
            PriceListCreated(
                price_list_id=str(price_list.id),
                supplier_id=str(supplier_id),
                name=name,
                effective_date=effective_date,
                expiry_date=expiry_date,
                currency=currency,
                duplicated_from=duplicated_from,
                created_at=now,
            )
        )
        return price_list

    # -------------------------------------------------------------------
    # Guards
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target_status):
        current = PriceListStatus(self.status)
        if target_status not in _VALID_TRANSITIONS.get(current, set()):
            raise InvalidTransitionError("price list", current.value, target_status.value)

    def _assert_editable(self):
        if PriceListStatus(self.status) not in _EDITABLE_STATES:
            raise ConflictError(f"Price list {self.name} cannot be edited while {self.status}")

    # -------------------------------------------------------------------
    # Pricing content
    # -------------------------------------------------------------------
    def item_for(self, product_id):
        return next((i for i in self.items if str(i.product_id) == str(product_id)), None)

    def surcharge_map(self):
        """A fresh copy of the category → VAC surcharge map."""
        return dict(json.loads(self.vac_surcharges)) if self.vac_surcharges else {}

    def set_item(
        self,
        product_id,
        price_box,
        price_box_vac=None,
        vac_surcharge=None,
        currency=None,
        min_quantity=None,
        max_quantity=None,
        is_available=True,
        notes=None,
    ):
        """Add a product price, or replace the existing price for that product.

        An explicit ``currency`` must match the list currency.
        """
        self._assert_editable()
        if currency is not None and normalize_currency(currency) != self.currency:
            raise ValidationError({"currency": [f"Price list {self.name} is priced in {self.currency}"]})
        if price_box is None:
            raise ValidationError({"price_box": ["Price is required"]})
        for field, value in (("price_box", price_box), ("price_box_vac", price_box_vac), ("vac_surcharge", vac_surcharge)):
            _validate_amount(field, value)
        if min_quantity is not None and max_quantity is not None and max_quantity < min_quantity:
            raise ValidationError({"max_quantity": ["Maximum quantity cannot be below the minimum"]})

        existing = self.item_for(product_id)
        previous_price = existing.price_box if existing else None
        if existing:
            existing.price_box = price_box
            existing.price_box_vac = price_box_vac
            existing.vac_surcharge = vac_surcharge
            existing.currency = self.currency
            existing.min_quantity = min_quantity
            existing.max_quantity = max_quantity
            existing.is_available = is_available
            existing.notes = notes
        else:
            self.add_items(
                PriceListItem(
                    product_id=product_id,
                    price_box=price_box,
                    price_box_vac=price_box_vac,
                    vac_surcharge=vac_surcharge,
                    currency=self.currency,
                    min_quantity=min_quantity,
                    max_quantity=max_quantity,
                    is_available=is_available,
                    notes=notes,
                )
            )
        self.updated_at = datetime.now(UTC)

        self.raise_(
            PriceListItemSet(
                price_list_id=str(self.id),
                product_id=str(product_id),
                price_box=price_box,
                previous_price_box=previous_price,
                is_available=is_available,
            )
        )

    def remove_item(self, product_id):
        self._assert_editable()
        item = self.item_for(product_id)
        if item is None:
            raise ValidationError({"product_id": ["Product is not on this price list"]})

        self.remove_items(item)
        self.updated_at = datetime.now(UTC)
        self.raise_(PriceListItemRemoved(price_list_id=str(self.id), product_id=str(product_id)))

    def set_vac_surcharge(self, category_id, surcharge):
        self._assert_editable()
        _validate_amount("surcharge", surcharge)

        surcharges = self.surcharge_map()
        previous = surcharges.get(str(category_id))
        if surcharge is None:
            surcharges.pop(str(category_id), None)
        else:
            surcharges[str(category_id)] = surcharge
        self.vac_surcharges = json.dumps(surcharges)
        self.updated_at = datetime.now(UTC)

        self.raise_(
            VacSurchargeSet(
                price_list_id=str(self.id),
                category_id=str(category_id),
                surcharge=surcharge,
                previous_surcharge=previous,
            )
        )

    def reschedule(self, effective_date=None, expiry_date=None, notes=None):
        """Move the delivery window (the name follows the dates) or change notes."""
        self._assert_editable()
        effective_date = effective_date or self.effective_date
        expiry_date = expiry_date or self.expiry_date
        _validate_window(effective_date, expiry_date)

        self.effective_date = effective_date
        self.expiry_date = expiry_date
        self.name = price_list_name(effective_date, expiry_date)
        if notes is not None:
            self.notes = notes
        self.updated_at = datetime.now(UTC)

        self.raise_(
            PriceListRescheduled(
                price_list_id=str(self.id),
                name=self.name,
                effective_date=effective_date,
                expiry_date=expiry_date,
            )
        )

    # -------------------------------------------------------------------
    # Lifecycle transitions
    # -------------------------------------------------------------------
    def submit_for_approval(self):
        self._assert_can_transition(PriceListStatus.PENDING_APPROVAL)

        now = datetime.now(UTC)
        self.status = PriceListStatus.PENDING_APPROVAL.value
        self.submitted_at = now
        self.updated_at = now

        self.raise_(
            PriceListSubmitted(
                price_list_id=str(self.id),
                supplier_id=str(self.supplier_id),
                supplier_name=self.supplier_name,
                name=self.name,
                submitted_at=now,
            )
        )

    def activate(self):
        """Make this the supplier's active list. Returns False when it already was."""
        current = PriceListStatus(self.status)
        if current == PriceListStatus.ACTIVE:
            return False
        self._assert_can_transition(PriceListStatus.ACTIVE)

        now = datetime.now(UTC)
        self.status = PriceListStatus.ACTIVE.value
        self.activated_at = now
        self.updated_at = now

        self.raise_(
            PriceListActivated(
                price_list_id=str(self.id),
                supplier_id=str(self.supplier_id),
                previous_status=current.value,
                activated_at=now,
            )
        )
        return True

    def archive(self, superseded_by=None):
        self._assert_can_transition(PriceListStatus.ARCHIVED)

        now = datetime.now(UTC)
        self.status = PriceListStatus.ARCHIVED.value
        self.archived_at = now
        self.updated_at = now

        self.raise_(
            PriceListArchived(
                price_list_id=str(self.id),
                supplier_id=str(self.supplier_id),
                superseded_by=superseded_by,
                archived_at=now,
            )
        )

    def return_to_draft(self):
        """Send a pending list back to the supplier. Returns False when already a draft."""
        if PriceListStatus(self.status) == PriceListStatus.DRAFT:
            return False
        if PriceListStatus(self.status) != PriceListStatus.PENDING_APPROVAL:
            raise InvalidTransitionError("price list", self.status, PriceListStatus.DRAFT.value)

        now = datetime.now(UTC)
        self.status = PriceListStatus.DRAFT.value
        self.submitted_at = None
        self.updated_at = now

        self.raise_(
            PriceListReturnedToDraft(
                price_list_id=str(self.id),
                supplier_id=str(self.supplier_id),
                returned_at=now,
            )
        )
        return True
