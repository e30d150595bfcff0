"""
Per-profile display and notification preferences.
"""

from dataclasses import dataclass

from src.models.enums import Theme


@dataclass
class UserSettings:
    theme: Theme = Theme.SYSTEM
    notifications: bool = True
    email_notifications: bool = True
    language: str = "en"

    def __post_init__(self):
        self.theme = Theme(self.theme)

    @classmethod
    def from_dict(cls, data: dict) -> "UserSettings":
        """Create UserSettings from JSON dict, filling defaults for missing keys."""
        return cls(
            theme=data.get("theme", Theme.SYSTEM.value),
            notifications=bool(data.get("notifications", True)),
            email_notifications=bool(data.get("emailNotifications", True)),
            language=data.get("language", "en")
        )

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict."""
        return {
            "theme": self.theme.value,
            "notifications": self.notifications,
            "emailNotifications": self.email_notifications,
            "language": self.language
        }
