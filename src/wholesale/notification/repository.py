"""Repository for the ApprovalNotification aggregate."""

from wholesale.domain import wholesale
from wholesale.notification.notification import ApprovalNotification


@wholesale.repository(part_of=ApprovalNotification)
class ApprovalNotificationRepository:
    def unread(self) -> list[ApprovalNotification]:
        return self._dao.query.filter(is_read=False).order_by("-created_at").limit(1000).all().items

    def for_related_item(self, related_item_id) -> list[ApprovalNotification]:
        return self._dao.query.filter(related_item_id=str(related_item_id)).limit(1000).all().items

    def everything(self) -> list[ApprovalNotification]:
        return self._dao.query.order_by("-created_at").limit(1000).all().items
