"""Pydantic request/response schemas for the Wholesale API.

These are external contracts (anti-corruption layer) — separate from
internal Protean commands. The acting user travels in headers, never in
request bodies.
"""

from datetime import date

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Shared
# ---------------------------------------------------------------------------
class StatusResponse(BaseModel):
    status: str = "ok"


class ChangedResponse(BaseModel):
    changed: bool


class IdResponse(BaseModel):
    id: str


# ---------------------------------------------------------------------------
# Catalogue
# ---------------------------------------------------------------------------
class CreateCategoryRequest(BaseModel):
    supplier_id: str
    name: str = Field(min_length=1, max_length=255)
    enable_vac_pricing: bool = False
    unit_of_measure: str | None = None
    display_order: int = Field(ge=0, default=0)
    description: str | None = None


class UpdateCategoryRequest(BaseModel):
    name: str | None = None
    enable_vac_pricing: bool | None = None
    unit_of_measure: str | None = None
    description: str | None = None


class CreateProductRequest(BaseModel):
    supplier_id: str
    category_id: str
    name: str = Field(min_length=1, max_length=255)
    unit_of_measure: str | None = None
    display_order: int = Field(ge=0, default=0)


class UpdateProductRequest(BaseModel):
    name: str | None = None
    category_id: str | None = None
    unit_of_measure: str | None = None
    display_order: int | None = Field(ge=0, default=None)


# ---------------------------------------------------------------------------
# Price lists
# ---------------------------------------------------------------------------
class CreatePriceListRequest(BaseModel):
    supplier_id: str
    supplier_name: str
    effective_date: date
    expiry_date: date
    notes: str | None = None
    currency: str | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "supplier_id": "sup-001",
                    "supplier_name": "Fresh Fish Co",
                    "effective_date": "2024-01-08",
                    "expiry_date": "2024-01-14",
                }
            ]
        }
    }


class SetPriceListItemRequest(BaseModel):
    price_box: float = Field(ge=0)
    price_box_vac: float | None = Field(ge=0, default=None)
    vac_surcharge: float | None = Field(ge=0, default=None)
    currency: str | None = None
    min_quantity: int | None = Field(ge=0, default=None)
    max_quantity: int | None = Field(ge=0, default=None)
    is_available: bool = True
    notes: str | None = None


class SetVacSurchargeRequest(BaseModel):
    surcharge: float | None = Field(ge=0, default=None)


class UpdatePriceListRequest(BaseModel):
    effective_date: date | None = None
    expiry_date: date | None = None
    notes: str | None = None


class DuplicatePriceListRequest(BaseModel):
    new_effective_date: date
    new_expiry_date: date | None = None


# ---------------------------------------------------------------------------
# Associations
# ---------------------------------------------------------------------------
class CreateAssociationRequest(BaseModel):
    customer_id: str
    customer_name: str | None = None
    supplier_id: str
    supplier_name: str | None = None
    notes: str | None = None


class SupplierRef(BaseModel):
    supplier_id: str
    supplier_name: str | None = None


class AssignSuppliersRequest(BaseModel):
    customer_id: str
    customer_name: str | None = None
    suppliers: list[SupplierRef] = Field(min_length=1)
    notes: str | None = None


class SyncSuppliersRequest(BaseModel):
    customer_name: str | None = None
    suppliers: list[SupplierRef]


class AssignmentResponse(BaseModel):
    created: list[str]
    reactivated: list[str]
    skipped: list[str]
    summary: str


class SyncResponse(BaseModel):
    added: list[str]
    removed: list[str]
    reactivated: list[str]


class PurgeRequest(BaseModel):
    known_customer_ids: list[str]


class PurgeResponse(BaseModel):
    deleted: int


class DeactivateRequest(BaseModel):
    reason: str | None = None


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
class OrderLineRequest(BaseModel):
    product_id: str
    quantity_regular: float = Field(ge=0, default=0)
    quantity_vac: float = Field(ge=0, default=0)


class PlaceOrderRequest(BaseModel):
    supplier_id: str
    price_list_id: str
    items: list[OrderLineRequest] = Field(min_length=1)
    requested_delivery_date: date | None = None
    customer_notes: str | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "supplier_id": "sup-001",
                    "price_list_id": "pl-001",
                    "items": [{"product_id": "prod-001", "quantity_regular": 3, "quantity_vac": 2}],
                }
            ]
        }
    }


class UpdateOrderStatusRequest(BaseModel):
    status: str


class AddOrderNoteRequest(BaseModel):
    note_type: str
    text: str = Field(min_length=1)
