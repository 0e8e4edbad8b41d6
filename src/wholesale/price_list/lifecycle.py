"""Price list lifecycle — submission, activation, rejection, duplication, deletion.

Activation saves the target list and every list it supersedes in the same
unit of work: a supplier has at most one ACTIVE list.
"""

import structlog
from protean import handle
from protean.fields import Date, Identifier, String
from protean.utils.globals import current_domain

from wholesale.config import load_settings
from wholesale.domain import wholesale
from wholesale.notification.notification import ApprovalNotification
from wholesale.price_list.price_list import PriceList, PriceListStatus
from wholesale.shared.exceptions import AuthorizationError, ConflictError
from wholesale.shared.identity import Role, actor_from, require_role, require_supplier_or_admin

logger = structlog.get_logger(__name__)


@wholesale.command(part_of="PriceList")
class SubmitPriceList:
    price_list_id: Identifier(required=True)
    actor_id: Identifier(required=True)
    actor_role: String(required=True)
    actor_name: String()


@wholesale.command(part_of="PriceList")
class ActivatePriceList:
    price_list_id: Identifier(required=True)
    actor_id: Identifier(required=True)
    actor_role: String(required=True)
    actor_name: String()


@wholesale.command(part_of="PriceList")
class RejectPriceList:
    price_list_id: Identifier(required=True)
    actor_id: Identifier(required=True)
    actor_role: String(required=True)
    actor_name: String()


@wholesale.command(part_of="PriceList")
class DuplicatePriceList:
    price_list_id: Identifier(required=True)
    new_effective_date: Date(required=True)
    new_expiry_date: Date()
    actor_id: Identifier(required=True)
    actor_role: String(required=True)
    actor_name: String()


@wholesale.command(part_of="PriceList")
class DeletePriceList:
    price_list_id: Identifier(required=True)
    actor_id: Identifier(required=True)
    actor_role: String(required=True)
    actor_name: String()


def _authorize_activation(actor, price_list):
    """Admins activate anything; suppliers may only self-activate their own drafts."""
    if actor.is_admin:
        return
    require_supplier_or_admin(actor, price_list.supplier_id)
    if not load_settings().price_list_self_activation:
        raise AuthorizationError("Price lists must be approved by an administrator")
    if PriceListStatus(price_list.status) == PriceListStatus.PENDING_APPROVAL:
        raise AuthorizationError("A price list awaiting approval can only be activated by an administrator")


def _settle_approval_requests(actor, price_list):
    """Mark the admin inbox entries for a list read once an admin has decided on it."""
    repo = current_domain.repository_for(ApprovalNotification)
    for notification in repo.for_related_item(price_list.id):
        if notification.mark_read(read_by=actor.user_id):
            repo.add(notification)


@wholesale.command_handler(part_of=PriceList)
class PriceListLifecycleHandler:
    @handle(SubmitPriceList)
    def submit_price_list(self, command):
        repo = current_domain.repository_for(PriceList)
        price_list = repo.get(command.price_list_id)
        require_supplier_or_admin(actor_from(command), price_list.supplier_id)

        price_list.submit_for_approval()
        repo.add(price_list)

    @handle(ActivatePriceList)
    def activate_price_list(self, command):
        """Activate the list and archive whatever it supersedes.

        Returns True when the list changed state, False when it was already
        the supplier's active list.
        """
        repo = current_domain.repository_for(PriceList)
        price_list = repo.get(command.price_list_id)
        if PriceListStatus(price_list.status) == PriceListStatus.ACTIVE:
            return False
        actor = actor_from(command)
        _authorize_activation(actor, price_list)

        was_pending = PriceListStatus(price_list.status) == PriceListStatus.PENDING_APPROVAL
        price_list.activate()
        if was_pending:
            _settle_approval_requests(actor, price_list)

        superseded = [pl for pl in repo.active_for_supplier(price_list.supplier_id) if str(pl.id) != str(price_list.id)]
        for previous in superseded:
            previous.archive(superseded_by=str(price_list.id))
            repo.add(previous)
        repo.add(price_list)

        logger.info(
            "Price list activated",
            price_list_id=str(price_list.id),
            supplier_id=str(price_list.supplier_id),
            archived=[str(pl.id) for pl in superseded],
        )
        return True

    @handle(RejectPriceList)
    def reject_price_list(self, command):
        """Return a pending list to its supplier. Returns False if it was already a draft."""
        actor = actor_from(command)
        require_role(actor, Role.ADMIN)

        repo = current_domain.repository_for(PriceList)
        price_list = repo.get(command.price_list_id)
        changed = price_list.return_to_draft()
        if changed:
            _settle_approval_requests(actor, price_list)
            repo.add(price_list)
        return changed

    @handle(DuplicatePriceList)
    def duplicate_price_list(self, command):
        """Copy a list into a new draft for another delivery window.

        Without an explicit expiry date the new window keeps the source
        window's length.
        """
        actor = actor_from(command)
        repo = current_domain.repository_for(PriceList)
        source = repo.get(command.price_list_id)
        require_supplier_or_admin(actor, source.supplier_id)

        new_expiry = command.new_expiry_date or command.new_effective_date + (source.expiry_date - source.effective_date)
        duplicate = PriceList.create(
            supplier_id=source.supplier_id,
            supplier_name=source.supplier_name,
            effective_date=command.new_effective_date,
            expiry_date=new_expiry,
            created_by=actor.user_id,
            currency=source.currency,
            notes=source.notes,
            vac_surcharges=source.surcharge_map(),
            duplicated_from=str(source.id),
        )
        for item in source.items:
            duplicate.set_item(
                product_id=item.product_id,
                price_box=item.price_box,
                price_box_vac=item.price_box_vac,
                vac_surcharge=item.vac_surcharge,
                min_quantity=item.min_quantity,
                max_quantity=item.max_quantity,
                is_available=item.is_available,
                notes=item.notes,
            )
        repo.add(duplicate)

        logger.info(
            "Price list duplicated",
            source_id=str(source.id),
            price_list_id=str(duplicate.id),
            items=len(source.items),
        )
        return str(duplicate.id)

    @handle(DeletePriceList)
    def delete_price_list(self, command):
        repo = current_domain.repository_for(PriceList)
        price_list = repo.get(command.price_list_id)
        require_supplier_or_admin(actor_from(command), price_list.supplier_id)
        if PriceListStatus(price_list.status) != PriceListStatus.DRAFT:
            raise ConflictError(f"Only draft price lists can be deleted; {price_list.name} is {price_list.status}")

        repo._dao.delete(price_list)
        logger.info("Price list deleted", price_list_id=str(price_list.id))
