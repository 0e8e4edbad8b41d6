"""FastAPI routes for the Wholesale domain.

Write endpoints translate request bodies into commands (or approval
workflows); read endpoints return detached dict copies of the read models.
"""

import json

from fastapi import APIRouter, Depends
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain

from wholesale import approvals
from wholesale.api.dependencies import current_actor
from wholesale.api.schemas import (
    AddOrderNoteRequest,
    AssignmentResponse,
    AssignSuppliersRequest,
    ChangedResponse,
    CreateAssociationRequest,
    CreateCategoryRequest,
    CreatePriceListRequest,
    CreateProductRequest,
    DeactivateRequest,
    DuplicatePriceListRequest,
    IdResponse,
    PlaceOrderRequest,
    PurgeRequest,
    PurgeResponse,
    SetPriceListItemRequest,
    SetVacSurchargeRequest,
    StatusResponse,
    SyncResponse,
    SyncSuppliersRequest,
    UpdateCategoryRequest,
    UpdateOrderStatusRequest,
    UpdatePriceListRequest,
    UpdateProductRequest,
)
from wholesale.association import queries as association_queries
from wholesale.association.batch import AssignSuppliers, PurgeOrphanedAssociations, SyncCustomerSuppliers
from wholesale.association.management import (
    ActivateAssociation,
    CreateAssociation,
    DeactivateAssociation,
    DeleteAssociation,
)
from wholesale.catalogue import queries as catalogue_queries
from wholesale.catalogue.management import (
    CreateCategory,
    CreateProduct,
    DeactivateCategory,
    DeactivateProduct,
    UpdateCategory,
    UpdateProduct,
)
from wholesale.notification import queries as notification_queries
from wholesale.notification.routing import MarkNotificationRead
from wholesale.order import queries as order_queries
from wholesale.order.status import AddOrderNote
from wholesale.price_list import queries as price_list_queries
from wholesale.price_list.drafting import (
    CreatePriceList,
    RemovePriceListItem,
    SetPriceListItem,
    SetVacSurcharge,
    UpdatePriceListDetails,
)
from wholesale.price_list.lifecycle import ActivatePriceList, DeletePriceList, DuplicatePriceList
from wholesale.shared.exceptions import AuthorizationError
from wholesale.shared.identity import Actor, Role, actor_fields, require_role, require_supplier_or_admin


def _process(command):
    return current_domain.process(command, asynchronous=False)


# ---------------------------------------------------------------------------
# Catalogue Router
# ---------------------------------------------------------------------------
catalogue_router = APIRouter(tags=["catalogue"])


@catalogue_router.post("/categories", status_code=201, response_model=IdResponse)
async def create_category(body: CreateCategoryRequest, actor: Actor = Depends(current_actor)) -> IdResponse:
    category_id = _process(CreateCategory(**body.model_dump(), **actor_fields(actor)))
    return IdResponse(id=category_id)


@catalogue_router.put("/categories/{category_id}", response_model=StatusResponse)
async def update_category(
    category_id: str, body: UpdateCategoryRequest, actor: Actor = Depends(current_actor)
) -> StatusResponse:
    _process(UpdateCategory(category_id=category_id, **body.model_dump(), **actor_fields(actor)))
    return StatusResponse()


@catalogue_router.put("/categories/{category_id}/deactivate", response_model=StatusResponse)
async def deactivate_category(category_id: str, actor: Actor = Depends(current_actor)) -> StatusResponse:
    _process(DeactivateCategory(category_id=category_id, **actor_fields(actor)))
    return StatusResponse()


@catalogue_router.post("/products", status_code=201, response_model=IdResponse)
async def create_product(body: CreateProductRequest, actor: Actor = Depends(current_actor)) -> IdResponse:
    product_id = _process(CreateProduct(**body.model_dump(), **actor_fields(actor)))
    return IdResponse(id=product_id)


@catalogue_router.put("/products/{product_id}", response_model=StatusResponse)
async def update_product(
    product_id: str, body: UpdateProductRequest, actor: Actor = Depends(current_actor)
) -> StatusResponse:
    _process(UpdateProduct(product_id=product_id, **body.model_dump(), **actor_fields(actor)))
    return StatusResponse()


@catalogue_router.put("/products/{product_id}/deactivate", response_model=StatusResponse)
async def deactivate_product(product_id: str, actor: Actor = Depends(current_actor)) -> StatusResponse:
    _process(DeactivateProduct(product_id=product_id, **actor_fields(actor)))
    return StatusResponse()


@catalogue_router.get("/suppliers/{supplier_id}/categories")
async def list_categories(supplier_id: str, actor: Actor = Depends(current_actor)):  # noqa: ARG001
    return [c.to_dict() for c in catalogue_queries.categories_for_supplier(supplier_id)]


@catalogue_router.get("/suppliers/{supplier_id}/products")
async def list_products(supplier_id: str, actor: Actor = Depends(current_actor)):  # noqa: ARG001
    return [p.to_dict() for p in catalogue_queries.products_for_supplier(supplier_id)]


# ---------------------------------------------------------------------------
# Price List Router
# ---------------------------------------------------------------------------
price_list_router = APIRouter(prefix="/price-lists", tags=["price-lists"])


@price_list_router.post("", status_code=201, response_model=IdResponse)
async def create_price_list(body: CreatePriceListRequest, actor: Actor = Depends(current_actor)) -> IdResponse:
    price_list_id = _process(CreatePriceList(**body.model_dump(), **actor_fields(actor)))
    return IdResponse(id=price_list_id)


@price_list_router.get("/supplier/{supplier_id}")
async def list_supplier_price_lists(supplier_id: str, actor: Actor = Depends(current_actor)):  # noqa: ARG001
    return price_list_queries.get_by_supplier(supplier_id)


@price_list_router.get("/supplier/{supplier_id}/active")
async def active_supplier_price_list(supplier_id: str, actor: Actor = Depends(current_actor)):  # noqa: ARG001
    active = price_list_queries.get_active_by_supplier(supplier_id)
    if active is None:
        raise ObjectNotFoundError(f"Supplier {supplier_id} has no active price list")
    return active


@price_list_router.get("/{price_list_id}")
async def get_price_list(price_list_id: str, actor: Actor = Depends(current_actor)):  # noqa: ARG001
    return price_list_queries.get_with_items(price_list_id)


@price_list_router.put("/{price_list_id}", response_model=StatusResponse)
async def update_price_list(
    price_list_id: str, body: UpdatePriceListRequest, actor: Actor = Depends(current_actor)
) -> StatusResponse:
    _process(UpdatePriceListDetails(price_list_id=price_list_id, **body.model_dump(), **actor_fields(actor)))
    return StatusResponse()


@price_list_router.put("/{price_list_id}/items/{product_id}", response_model=StatusResponse)
async def set_price_list_item(
    price_list_id: str, product_id: str, body: SetPriceListItemRequest, actor: Actor = Depends(current_actor)
) -> StatusResponse:
    _process(
        SetPriceListItem(
            price_list_id=price_list_id,
            product_id=product_id,
            **body.model_dump(),
            **actor_fields(actor),
        )
    )
    return StatusResponse()


@price_list_router.delete("/{price_list_id}/items/{product_id}", response_model=StatusResponse)
async def remove_price_list_item(
    price_list_id: str, product_id: str, actor: Actor = Depends(current_actor)
) -> StatusResponse:
    _process(RemovePriceListItem(price_list_id=price_list_id, product_id=product_id, **actor_fields(actor)))
    return StatusResponse()


@price_list_router.put("/{price_list_id}/surcharges/{category_id}", response_model=StatusResponse)
async def set_vac_surcharge(
    price_list_id: str, category_id: str, body: SetVacSurchargeRequest, actor: Actor = Depends(current_actor)
) -> StatusResponse:
    _process(
        SetVacSurcharge(
            price_list_id=price_list_id,
            category_id=category_id,
            surcharge=body.surcharge,
            **actor_fields(actor),
        )
    )
    return StatusResponse()


@price_list_router.post("/{price_list_id}/submit", response_model=StatusResponse)
async def submit_price_list(price_list_id: str, actor: Actor = Depends(current_actor)) -> StatusResponse:
    approvals.submit_price_list(actor, price_list_id)
    return StatusResponse()


@price_list_router.post("/{price_list_id}/activate", response_model=ChangedResponse)
async def activate_price_list(price_list_id: str, actor: Actor = Depends(current_actor)) -> ChangedResponse:
    changed = _process(ActivatePriceList(price_list_id=price_list_id, **actor_fields(actor)))
    return ChangedResponse(changed=changed)


@price_list_router.post("/{price_list_id}/approve", response_model=ChangedResponse)
async def approve_price_list(price_list_id: str, actor: Actor = Depends(current_actor)) -> ChangedResponse:
    return ChangedResponse(changed=approvals.approve_price_list(actor, price_list_id))


@price_list_router.post("/{price_list_id}/reject", response_model=ChangedResponse)
async def reject_price_list(price_list_id: str, actor: Actor = Depends(current_actor)) -> ChangedResponse:
    return ChangedResponse(changed=approvals.reject_price_list(actor, price_list_id))


@price_list_router.post("/{price_list_id}/duplicate", status_code=201, response_model=IdResponse)
async def duplicate_price_list(
    price_list_id: str, body: DuplicatePriceListRequest, actor: Actor = Depends(current_actor)
) -> IdResponse:
    new_id = _process(DuplicatePriceList(price_list_id=price_list_id, **body.model_dump(), **actor_fields(actor)))
    return IdResponse(id=new_id)


@price_list_router.delete("/{price_list_id}", response_model=StatusResponse)
async def delete_price_list(price_list_id: str, actor: Actor = Depends(current_actor)) -> StatusResponse:
    _process(DeletePriceList(price_list_id=price_list_id, **actor_fields(actor)))
    return StatusResponse()


# ---------------------------------------------------------------------------
# Association Router
# ---------------------------------------------------------------------------
association_router = APIRouter(prefix="/associations", tags=["associations"])


@association_router.post("", status_code=201, response_model=IdResponse)
async def create_association(body: CreateAssociationRequest, actor: Actor = Depends(current_actor)) -> IdResponse:
    association_id = _process(CreateAssociation(**body.model_dump(), **actor_fields(actor)))
    return IdResponse(id=association_id)


@association_router.post("/assign", response_model=AssignmentResponse)
async def assign_suppliers(body: AssignSuppliersRequest, actor: Actor = Depends(current_actor)) -> AssignmentResponse:
    result = _process(
        AssignSuppliers(
            customer_id=body.customer_id,
            customer_name=body.customer_name,
            suppliers=json.dumps([s.model_dump() for s in body.suppliers]),
            notes=body.notes,
            **actor_fields(actor),
        )
    )
    return AssignmentResponse(
        created=list(result.created),
        reactivated=list(result.reactivated),
        skipped=list(result.skipped),
        summary=result.summary(),
    )


@association_router.put("/customers/{customer_id}/suppliers", response_model=SyncResponse)
async def sync_customer_suppliers(
    customer_id: str, body: SyncSuppliersRequest, actor: Actor = Depends(current_actor)
) -> SyncResponse:
    result = _process(
        SyncCustomerSuppliers(
            customer_id=customer_id,
            customer_name=body.customer_name,
            suppliers=json.dumps([s.model_dump() for s in body.suppliers]),
            **actor_fields(actor),
        )
    )
    return SyncResponse(added=list(result.added), removed=list(result.removed), reactivated=list(result.reactivated))


@association_router.post("/purge", response_model=PurgeResponse)
async def purge_orphaned(body: PurgeRequest, actor: Actor = Depends(current_actor)) -> PurgeResponse:
    deleted = _process(
        PurgeOrphanedAssociations(known_customer_ids=json.dumps(body.known_customer_ids), **actor_fields(actor))
    )
    return PurgeResponse(deleted=deleted)


@association_router.get("")
async def list_associations(actor: Actor = Depends(current_actor)):
    require_role(actor, Role.ADMIN)
    return association_queries.get_all()


@association_router.get("/customers/{customer_id}")
async def customer_associations(customer_id: str, actor: Actor = Depends(current_actor)):
    if not actor.is_admin and actor.user_id != customer_id:
        raise AuthorizationError(f"User {actor.user_id} may not view associations of customer {customer_id}")
    return association_queries.get_by_customer(customer_id)


@association_router.get("/suppliers/{supplier_id}")
async def supplier_associations(supplier_id: str, actor: Actor = Depends(current_actor)):
    require_supplier_or_admin(actor, supplier_id)
    return association_queries.get_by_supplier(supplier_id)


@association_router.put("/{association_id}/activate", response_model=StatusResponse)
async def activate_association(association_id: str, actor: Actor = Depends(current_actor)) -> StatusResponse:
    _process(ActivateAssociation(association_id=association_id, **actor_fields(actor)))
    return StatusResponse()


@association_router.put("/{association_id}/deactivate", response_model=StatusResponse)
async def deactivate_association(
    association_id: str, body: DeactivateRequest, actor: Actor = Depends(current_actor)
) -> StatusResponse:
    _process(DeactivateAssociation(association_id=association_id, reason=body.reason, **actor_fields(actor)))
    return StatusResponse()


@association_router.delete("/{association_id}", response_model=StatusResponse)
async def delete_association(association_id: str, actor: Actor = Depends(current_actor)) -> StatusResponse:
    _process(DeleteAssociation(association_id=association_id, **actor_fields(actor)))
    return StatusResponse()


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.post("", status_code=201, response_model=IdResponse)
async def place_order(body: PlaceOrderRequest, actor: Actor = Depends(current_actor)) -> IdResponse:
    order_id = approvals.place_order(
        actor,
        supplier_id=body.supplier_id,
        price_list_id=body.price_list_id,
        items=[line.model_dump() for line in body.items],
        requested_delivery_date=body.requested_delivery_date,
        customer_notes=body.customer_notes,
    )
    return IdResponse(id=order_id)


@order_router.get("")
async def list_orders(view: str | None = None, actor: Actor = Depends(current_actor)):
    """Orders scoped to the caller: all for admins, own for customers, visible for suppliers."""
    if actor.is_admin:
        return order_queries.get_by_status(view) if view else order_queries.get_all()
    if actor.role == Role.CUSTOMER.value:
        return order_queries.get_by_customer(actor.user_id)
    if view == "active":
        return order_queries.supplier_active_orders(actor.user_id)
    if view == "history":
        return order_queries.supplier_order_history(actor.user_id)
    if view is not None:
        raise ValidationError({"view": ["Suppliers can list 'active' or 'history' orders"]})
    return order_queries.get_by_supplier(actor.user_id)


@order_router.get("/stats")
async def order_stats(actor: Actor = Depends(current_actor)):
    require_role(actor, Role.ADMIN)
    return order_queries.order_stats()


@order_router.get("/{order_id}")
async def get_order(order_id: str, actor: Actor = Depends(current_actor)):
    if actor.role == Role.SUPPLIER.value:
        return order_queries.get_order_for_supplier(order_id, actor.user_id)
    order = order_queries.get_order(order_id)
    if actor.role == Role.CUSTOMER.value and order["customer_id"] != actor.user_id:
        raise ObjectNotFoundError(f"Order {order_id} not found")
    return order


@order_router.put("/{order_id}/status", response_model=ChangedResponse)
async def update_order_status(
    order_id: str, body: UpdateOrderStatusRequest, actor: Actor = Depends(current_actor)
) -> ChangedResponse:
    return ChangedResponse(changed=approvals.update_order_status(actor, order_id, body.status))


@order_router.post("/{order_id}/approve", response_model=ChangedResponse)
async def approve_order(order_id: str, actor: Actor = Depends(current_actor)) -> ChangedResponse:
    return ChangedResponse(changed=approvals.approve_order(actor, order_id))


@order_router.post("/{order_id}/reject", response_model=ChangedResponse)
async def reject_order(order_id: str, actor: Actor = Depends(current_actor)) -> ChangedResponse:
    return ChangedResponse(changed=approvals.reject_order(actor, order_id))


@order_router.post("/{order_id}/notes", response_model=StatusResponse)
async def add_order_note(
    order_id: str, body: AddOrderNoteRequest, actor: Actor = Depends(current_actor)
) -> StatusResponse:
    _process(AddOrderNote(order_id=order_id, note_type=body.note_type, text=body.text, **actor_fields(actor)))
    return StatusResponse()


# ---------------------------------------------------------------------------
# Notification Router
# ---------------------------------------------------------------------------
notification_router = APIRouter(prefix="/notifications", tags=["notifications"])


@notification_router.get("")
async def list_notifications(unread: bool = True, actor: Actor = Depends(current_actor)):
    require_role(actor, Role.ADMIN)
    if unread:
        return notification_queries.list_unread(actor.user_id)
    return notification_queries.list_all(actor.user_id)


@notification_router.put("/{notification_id}/read", response_model=ChangedResponse)
async def mark_notification_read(notification_id: str, actor: Actor = Depends(current_actor)) -> ChangedResponse:
    changed = _process(MarkNotificationRead(notification_id=notification_id, **actor_fields(actor)))
    return ChangedResponse(changed=changed)


@notification_router.post("/{notification_id}/approve", response_model=ChangedResponse)
async def approve_from_notification(
    notification_id: str, actor: Actor = Depends(current_actor)
) -> ChangedResponse:
    return ChangedResponse(changed=approvals.resolve_notification(actor, notification_id, approvals.Decision.APPROVE))


@notification_router.post("/{notification_id}/reject", response_model=ChangedResponse)
async def reject_from_notification(notification_id: str, actor: Actor = Depends(current_actor)) -> ChangedResponse:
    return ChangedResponse(changed=approvals.resolve_notification(actor, notification_id, approvals.Decision.REJECT))
