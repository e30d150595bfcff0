"""
Notification data model.

Per-user event log entry. Append-only apart from the read flag.
"""

from dataclasses import dataclass
from typing import Optional

from src.models.enums import NotificationType


@dataclass
class Notification:
    id: str
    user_id: str  # Recipient email
    type: NotificationType
    title: str
    message: str
    suggestion_id: Optional[str] = None
    read: bool = False
    created_at: str = ""

    def __post_init__(self):
        self.type = NotificationType(self.type)

    @classmethod
    def from_dict(cls, data: dict) -> "Notification":
        """Create Notification from JSON dict."""
        return cls(
            id=data["id"],
            user_id=data.get("userId", ""),
            type=data["type"],
            title=data.get("title", ""),
            message=data.get("message", ""),
            suggestion_id=data.get("suggestionId"),
            read=bool(data.get("read", False)),
            created_at=data.get("createdAt", "")
        )

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict."""
        data = {
            "id": self.id,
            "userId": self.user_id,
            "type": self.type.value,
            "title": self.title,
            "message": self.message,
            "read": self.read,
            "createdAt": self.created_at
        }
        if self.suggestion_id is not None:
            data["suggestionId"] = self.suggestion_id
        return data
