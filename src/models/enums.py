"""
Closed enumerations shared by all record types.

Status, sentiment, role, notification type and theme values are persisted
as their plain string values.
"""

from enum import Enum


class Status(str, Enum):
    """Review status of a suggestion."""
    PENDING = "pending"
    REVIEW_PENDING = "review_pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    IMPLEMENTED = "implemented"

    @property
    def points(self) -> int:
        """Points the author holds for a suggestion in this status."""
        return STATUS_POINTS[self]

    @property
    def label(self) -> str:
        """Human-readable label used in notification messages."""
        return self.value.replace("_", " ", 1)


# Point table for status changes; every status has an entry
STATUS_POINTS = {
    Status.PENDING: 0,
    Status.REVIEW_PENDING: 0,
    Status.APPROVED: 30,
    Status.REJECTED: 0,
    Status.IMPLEMENTED: 60,
}

# Statuses counted as "reviewed" in the analytics funnel
REVIEWED_STATUSES = frozenset({
    Status.APPROVED,
    Status.REJECTED,
    Status.IMPLEMENTED,
    Status.REVIEW_PENDING,
})

# Author gain per vote received; also the voter's own balance change per vote
VOTE_POINTS = 5


class Sentiment(str, Enum):
    POSITIVE = "positive"
    NEUTRAL = "neutral"
    NEGATIVE = "negative"


class Role(str, Enum):
    USER = "user"
    ADMIN = "admin"


class NotificationType(str, Enum):
    STATUS_CHANGE = "status_change"
    COMMENT = "comment"
    VOTE = "vote"
    MENTION = "mention"


class Theme(str, Enum):
    LIGHT = "light"
    DARK = "dark"
    SYSTEM = "system"
