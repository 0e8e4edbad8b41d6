"""ApprovalNotification aggregate — an item waiting in the admin approval inbox.

A notification with no ``target_id`` sits in the shared admin inbox and is
visible to every admin. Notifications are resolved by being marked read,
never by deletion.
"""

from datetime import UTC, datetime
from enum import Enum

from protean.fields import Boolean, DateTime, Identifier, String

from wholesale.domain import wholesale
from wholesale.notification.events import ApprovalRequested, NotificationRead


class NotificationType(Enum):
    PRICE_LIST_PENDING_APPROVAL = "price_list_pending_approval"
    ORDER_PENDING_APPROVAL = "order_pending_approval"


@wholesale.aggregate
class ApprovalNotification:
    notification_type = String(required=True, choices=NotificationType)
    related_item_id = Identifier(required=True)
    message = String(required=True, max_length=1000)
    created_by_id = Identifier()
    created_by_name = String(max_length=255)
    target_id = Identifier()
    is_read = Boolean(default=False)
    read_at = DateTime()
    read_by = Identifier()
    created_at = DateTime()

    @classmethod
    def create(cls, notification_type, related_item_id, message, created_by_id=None, created_by_name=None, target_id=None):
        now = datetime.now(UTC)
        notification = cls(
            notification_type=notification_type.value,
            related_item_id=related_item_id,
            message=message,
            created_by_id=created_by_id,
            created_by_name=created_by_name,
            target_id=target_id,
            is_read=False,
            created_at=now,
        )
        notification.raise_(
            ApprovalRequested(
                notification_id=str(notification.id),
                notification_type=notification_type.value,
                related_item_id=str(related_item_id),
                target_id=target_id,
                created_at=now,
            )
        )
        return notification

    def is_addressed_to(self, recipient_id) -> bool:
        return self.target_id is None or str(self.target_id) == str(recipient_id)

    def mark_read(self, read_by=None):
        """Returns False when the notification had already been read."""
        if self.is_read:
            return False

        now = datetime.now(UTC)
        self.is_read = True
        self.read_at = now
        self.read_by = read_by
        self.raise_(
            NotificationRead(
                notification_id=str(self.id),
                related_item_id=str(self.related_item_id),
                read_by=read_by,
                read_at=now,
            )
        )
        return True
