"""Batch association edits made from the admin console.

``AssignSuppliers`` adds suppliers to a customer without touching the others;
``SyncCustomerSuppliers`` makes a customer's active suppliers equal a target
set. Neither ever deletes a row: removal is a deactivation, and rows are only
deleted explicitly (``DeleteAssociation``) or by ``PurgeOrphanedAssociations``.
"""

import json
from dataclasses import dataclass, field

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from wholesale.association.association import CustomerSupplierAssociation
from wholesale.domain import wholesale
from wholesale.shared.identity import Role, actor_from, require_role

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class AssignmentResult:
    created: tuple[str, ...] = field(default_factory=tuple)
    reactivated: tuple[str, ...] = field(default_factory=tuple)
    skipped: tuple[str, ...] = field(default_factory=tuple)

    def summary(self) -> str:
        """Human-readable outcome, e.g. ``"1 created, 1 already existed"``."""
        parts = []
        if self.created:
            parts.append(f"{len(self.created)} created")
        if self.reactivated:
            parts.append(f"{len(self.reactivated)} reactivated")
        if self.skipped:
            parts.append(f"{len(self.skipped)} already existed")
        return ", ".join(parts) or "nothing to do"


@dataclass(frozen=True)
class SyncResult:
    added: tuple[str, ...] = field(default_factory=tuple)
    removed: tuple[str, ...] = field(default_factory=tuple)
    reactivated: tuple[str, ...] = field(default_factory=tuple)


@wholesale.command(part_of="CustomerSupplierAssociation")
class AssignSuppliers:
    customer_id: Identifier(required=True)
    customer_name: String(max_length=255)
    suppliers: Text(required=True)  # JSON: list of {"supplier_id", "supplier_name"}
    notes: String(max_length=1000)
    actor_id: Identifier(required=True)
    actor_role: String(required=True)
    actor_name: String()


@wholesale.command(part_of="CustomerSupplierAssociation")
class SyncCustomerSuppliers:
    customer_id: Identifier(required=True)
    customer_name: String(max_length=255)
    suppliers: Text(required=True)  # JSON: the complete target list of {"supplier_id", "supplier_name"}
    actor_id: Identifier(required=True)
    actor_role: String(required=True)
    actor_name: String()


@wholesale.command(part_of="CustomerSupplierAssociation")
class PurgeOrphanedAssociations:
    known_customer_ids: Text(required=True)  # JSON: list of customer ids that still exist
    actor_id: Identifier(required=True)
    actor_role: String(required=True)
    actor_name: String()


def _supplier_names(raw) -> dict[str, str | None]:
    """Parse the suppliers payload into an ordered supplier id → name map."""
    suppliers = json.loads(raw) if isinstance(raw, str) else raw
    if not isinstance(suppliers, list):
        raise ValidationError({"suppliers": ["Expected a list of suppliers"]})

    names = {}
    for entry in suppliers:
        supplier_id = entry.get("supplier_id") if isinstance(entry, dict) else entry
        if not supplier_id:
            raise ValidationError({"suppliers": ["Every supplier needs a supplier_id"]})
        names[str(supplier_id)] = entry.get("supplier_name") if isinstance(entry, dict) else None
    return names


@wholesale.command_handler(part_of=CustomerSupplierAssociation)
class BatchAssociationHandler:
    @handle(AssignSuppliers)
    def assign_suppliers(self, command):
        actor = actor_from(command)
        require_role(actor, Role.ADMIN)
        targets = _supplier_names(command.suppliers)
        if not targets:
            raise ValidationError({"suppliers": ["Select at least one supplier"]})

        repo = current_domain.repository_for(CustomerSupplierAssociation)
        created, reactivated, skipped = [], [], []
        for supplier_id, supplier_name in targets.items():
            existing = repo.for_pair(command.customer_id, supplier_id)
            if existing is None:
                repo.add(
                    CustomerSupplierAssociation.create(
                        customer_id=command.customer_id,
                        supplier_id=supplier_id,
                        customer_name=command.customer_name,
                        supplier_name=supplier_name,
                        notes=command.notes,
                        created_by=actor.user_id,
                    )
                )
                created.append(supplier_id)
            elif existing.activate():
                repo.add(existing)
                reactivated.append(supplier_id)
            else:
                skipped.append(supplier_id)

        result = AssignmentResult(created=tuple(created), reactivated=tuple(reactivated), skipped=tuple(skipped))
        logger.info(
            "Suppliers assigned",
            customer_id=str(command.customer_id),
            outcome=result.summary(),
        )
        return result

    @handle(SyncCustomerSuppliers)
    def sync_customer_suppliers(self, command):
        actor = actor_from(command)
        require_role(actor, Role.ADMIN)
        targets = _supplier_names(command.suppliers)

        repo = current_domain.repository_for(CustomerSupplierAssociation)
        current = {str(a.supplier_id): a for a in repo.for_customer(command.customer_id, active_only=False)}

        added = [s for s in targets if s not in current]
        for supplier_id in added:
            repo.add(
                CustomerSupplierAssociation.create(
                    customer_id=command.customer_id,
                    supplier_id=supplier_id,
                    customer_name=command.customer_name,
                    supplier_name=targets[supplier_id],
                    created_by=actor.user_id,
                )
            )

        removed = []
        reactivated = []
        for supplier_id, association in current.items():
            if supplier_id not in targets:
                if association.deactivate(reason="Removed from customer's supplier set"):
                    repo.add(association)
                    removed.append(supplier_id)
            elif association.activate():
                repo.add(association)
                reactivated.append(supplier_id)

        logger.info(
            "Customer suppliers synchronised",
            customer_id=str(command.customer_id),
            added=len(added),
            removed=len(removed),
            reactivated=len(reactivated),
        )
        return SyncResult(added=tuple(added), removed=tuple(removed), reactivated=tuple(reactivated))

    @handle(PurgeOrphanedAssociations)
    def purge_orphaned(self, command):
        """Delete associations whose customer is no longer a known user."""
        require_role(actor_from(command), Role.ADMIN)
        raw = command.known_customer_ids
        known = {str(c) for c in (json.loads(raw) if isinstance(raw, str) else raw)}

        repo = current_domain.repository_for(CustomerSupplierAssociation)
        orphans = [a for a in repo.everything() if str(a.customer_id) not in known]
        for association in orphans:
            repo._dao.delete(association)

        logger.warning("Orphaned associations purged", count=len(orphans))
        return len(orphans)
