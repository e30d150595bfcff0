"""
Notification Dispatcher.

Append-only per-user event log with read/unread state.
"""

import logging
from typing import List, Optional

from src.models.enums import NotificationType
from src.models.notification import Notification
from src.store.record_store import RecordStore

logger = logging.getLogger(__name__)


class NotificationDispatcher:
    """Creates and queries notifications addressed by recipient email."""

    def __init__(self, store: RecordStore):
        self.store = store

    def create(
        self,
        recipient: str,
        notification_type: NotificationType,
        title: str,
        message: str,
        suggestion_id: Optional[str] = None
    ) -> Notification:
        """
        Append an unread notification.

        Args:
            recipient: Recipient user key (email)
            notification_type: status_change, comment, vote or mention
            title: Short heading
            message: Body text
            suggestion_id: Related suggestion, if any

        Returns:
            The stored notification
        """
        notification = self.store.notifications.create({
            "user_id": recipient,
            "type": NotificationType(notification_type),
            "title": title,
            "message": message,
            "suggestion_id": suggestion_id,
            "read": False,
        })
        logger.info(f"Notified {recipient}: {notification.type.value} ({title})")
        return notification

    def list_for(self, recipient: str) -> List[Notification]:
        """All notifications of one recipient, newest first."""
        notifications = self.store.notifications.find(lambda n: n.user_id == recipient)
        # Stored in creation order; reversed first so same-millisecond entries stay newest first
        return sorted(reversed(notifications), key=lambda n: n.created_at, reverse=True)

    def unread_count(self, recipient: str) -> int:
        return sum(1 for n in self.list_for(recipient) if not n.read)

    def mark_read(self, notification_id: str) -> bool:
        """Mark one notification read. Returns False if it does not exist."""
        return self.store.notifications.update(notification_id, {"read": True}) is not None

    def mark_all_read(self, recipient: str) -> int:
        """
        Mark every unread notification of a recipient read.

        Returns:
            Number of notifications changed
        """
        notifications = self.store.notifications.get_all()
        changed = 0
        for notification in notifications:
            if notification.user_id == recipient and not notification.read:
                notification.read = True
                changed += 1

        self.store.notifications.replace_all(notifications)
        logger.debug(f"Marked {changed} notifications read for {recipient}")
        return changed
