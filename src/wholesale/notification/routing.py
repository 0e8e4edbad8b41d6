"""Notification routing — emitting approval requests and resolving them.

An approval request fans out into one notification per configured admin, or
a single shared-inbox notification when no admins are configured. Marking
read is idempotent so a retried approve/reject never fails on it.
"""

import json

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from wholesale.config import load_settings
from wholesale.domain import wholesale
from wholesale.notification.notification import ApprovalNotification, NotificationType
from wholesale.shared.exceptions import AuthorizationError
from wholesale.shared.identity import Role, actor_from, require_role

logger = structlog.get_logger(__name__)


@wholesale.command(part_of="ApprovalNotification")
class EmitApprovalNotification:
    notification_type: String(required=True, max_length=64)
    related_item_id: Identifier(required=True)
    message: String(required=True, max_length=1000)
    target_ids: Text()  # JSON list; defaults to the configured admins
    actor_id: Identifier(required=True)
    actor_role: String(required=True)
    actor_name: String()


@wholesale.command(part_of="ApprovalNotification")
class MarkNotificationRead:
    notification_id: Identifier(required=True)
    actor_id: Identifier(required=True)
    actor_role: String(required=True)
    actor_name: String()


@wholesale.command(part_of="ApprovalNotification")
class MarkRelatedNotificationsRead:
    related_item_id: Identifier(required=True)
    actor_id: Identifier(required=True)
    actor_role: String(required=True)
    actor_name: String()


def _recipients(raw_target_ids):
    if raw_target_ids:
        targets = json.loads(raw_target_ids) if isinstance(raw_target_ids, str) else raw_target_ids
        return [str(t) for t in targets] or [None]
    return list(load_settings().admin_ids) or [None]


@wholesale.command_handler(part_of=ApprovalNotification)
class NotificationRoutingHandler:
    @handle(EmitApprovalNotification)
    def emit(self, command):
        """Create the notifications and return their ids."""
        try:
            notification_type = NotificationType(command.notification_type)
        except ValueError:
            raise ValidationError(
                {"notification_type": [f"Unknown notification type: {command.notification_type}"]}
            ) from None
        actor = actor_from(command)

        repo = current_domain.repository_for(ApprovalNotification)
        ids = []
        for target_id in _recipients(command.target_ids):
            notification = ApprovalNotification.create(
                notification_type=notification_type,
                related_item_id=command.related_item_id,
                message=command.message,
                created_by_id=actor.user_id,
                created_by_name=actor.display_name,
                target_id=target_id,
            )
            repo.add(notification)
            ids.append(str(notification.id))

        logger.info(
            "Approval requested",
            notification_type=notification_type.value,
            related_item_id=str(command.related_item_id),
            recipients=len(ids),
        )
        return ids

    @handle(MarkNotificationRead)
    def mark_read(self, command):
        actor = actor_from(command)
        repo = current_domain.repository_for(ApprovalNotification)
        notification = repo.get(command.notification_id)
        if not actor.is_admin and str(notification.target_id) != str(actor.user_id):
            raise AuthorizationError(f"Notification {notification.id} is not addressed to {actor.user_id}")

        changed = notification.mark_read(read_by=actor.user_id)
        if changed:
            repo.add(notification)
        return changed

    @handle(MarkRelatedNotificationsRead)
    def mark_related_read(self, command):
        """Mark every copy of an approval request read. Returns how many changed."""
        actor = actor_from(command)
        require_role(actor, Role.ADMIN)

        repo = current_domain.repository_for(ApprovalNotification)
        changed = 0
        for notification in repo.for_related_item(command.related_item_id):
            if notification.mark_read(read_by=actor.user_id):
                repo.add(notification)
                changed += 1
        return changed
