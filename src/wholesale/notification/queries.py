"""Read accessors for the approval inbox."""

from protean.utils.globals import current_domain

from wholesale.notification.notification import ApprovalNotification


def list_unread(recipient_id=None):
    """Unread notifications for a recipient, including the shared inbox.

    Without a recipient every unread notification is returned.
    """
    notifications = current_domain.repository_for(ApprovalNotification).unread()
    if recipient_id is not None:
        notifications = [n for n in notifications if n.is_addressed_to(recipient_id)]
    return [n.to_dict() for n in notifications]


def list_all(recipient_id=None):
    notifications = current_domain.repository_for(ApprovalNotification).everything()
    if recipient_id is not None:
        notifications = [n for n in notifications if n.is_addressed_to(recipient_id)]
    return [n.to_dict() for n in notifications]


def unread_count(recipient_id=None) -> int:
    return len(list_unread(recipient_id))
