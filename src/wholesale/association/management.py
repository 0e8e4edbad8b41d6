"""Association management — single-row commands, all admin-only."""

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from wholesale.association.association import CustomerSupplierAssociation
from wholesale.domain import wholesale
from wholesale.shared.exceptions import ConflictError
from wholesale.shared.identity import Role, actor_from, require_role

logger = structlog.get_logger(__name__)


@wholesale.command(part_of="CustomerSupplierAssociation")
class CreateAssociation:
    customer_id: Identifier(required=True)
    customer_name: String(max_length=255)
    supplier_id: Identifier(required=True)
    supplier_name: String(max_length=255)
    notes: String(max_length=1000)
    actor_id: Identifier(required=True)
    actor_role: String(required=True)
    actor_name: String()


@wholesale.command(part_of="CustomerSupplierAssociation")
class ActivateAssociation:
    association_id: Identifier(required=True)
    actor_id: Identifier(required=True)
    actor_role: String(required=True)
    actor_name: String()


@wholesale.command(part_of="CustomerSupplierAssociation")
class DeactivateAssociation:
    association_id: Identifier(required=True)
    reason: String(max_length=500)
    actor_id: Identifier(required=True)
    actor_role: String(required=True)
    actor_name: String()


@wholesale.command(part_of="CustomerSupplierAssociation")
class DeleteAssociation:
    association_id: Identifier(required=True)
    actor_id: Identifier(required=True)
    actor_role: String(required=True)
    actor_name: String()


@wholesale.command_handler(part_of=CustomerSupplierAssociation)
class ManageAssociationHandler:
    @handle(CreateAssociation)
    def create_association(self, command):
        actor = actor_from(command)
        require_role(actor, Role.ADMIN)

        repo = current_domain.repository_for(CustomerSupplierAssociation)
        existing = repo.for_pair(command.customer_id, command.supplier_id)
        if existing is not None:
            if existing.is_active:
                raise ConflictError("Association already exists for this customer and supplier")
            raise ConflictError("An inactive association exists for this customer and supplier; reactivate it instead")

        association = CustomerSupplierAssociation.create(
            customer_id=command.customer_id,
            supplier_id=command.supplier_id,
            customer_name=command.customer_name,
            supplier_name=command.supplier_name,
            notes=command.notes,
            created_by=actor.user_id,
        )
        repo.add(association)
        return str(association.id)

    @handle(ActivateAssociation)
    def activate_association(self, command):
        require_role(actor_from(command), Role.ADMIN)

        repo = current_domain.repository_for(CustomerSupplierAssociation)
        association = repo.get(command.association_id)
        if association.activate():
            repo.add(association)

    @handle(DeactivateAssociation)
    def deactivate_association(self, command):
        require_role(actor_from(command), Role.ADMIN)

        repo = current_domain.repository_for(CustomerSupplierAssociation)
        association = repo.get(command.association_id)
        if association.deactivate(reason=command.reason):
            repo.add(association)

    @handle(DeleteAssociation)
    def delete_association(self, command):
        actor = actor_from(command)
        require_role(actor, Role.ADMIN)

        repo = current_domain.repository_for(CustomerSupplierAssociation)
        association = repo.get(command.association_id)
        repo._dao.delete(association)

        logger.info(
            "Association deleted",
            association_id=str(association.id),
            customer_id=str(association.customer_id),
            supplier_id=str(association.supplier_id),
            deleted_by=actor.user_id,
        )
