"""Domain events for ApprovalNotification."""

from protean.fields import DateTime, Identifier, String

from wholesale.domain import wholesale


@wholesale.event(part_of="ApprovalNotification")
class ApprovalRequested:
    __version__ = 1

    notification_id: Identifier(required=True)
    notification_type: String(required=True)
    related_item_id: Identifier(required=True)
    target_id: Identifier()
    created_at: DateTime(required=True)


@wholesale.event(part_of="ApprovalNotification")
class NotificationRead:
    __version__ = 1

    notification_id: Identifier(required=True)
    related_item_id: Identifier(required=True)
    read_by: Identifier()
    read_at: DateTime(required=True)
