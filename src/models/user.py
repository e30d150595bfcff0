"""
User data model.

Represents both registered users and users inferred from suggestion authorship.
"""

from dataclasses import dataclass, replace
from typing import Optional

from src.models.enums import Role
from src.models.suggestion import Author


@dataclass
class User:
    """
    A participant in the suggestion box.
    The email is the identity key used across all collections.
    """
    id: str
    name: str
    email: str
    department: str = ""
    points: int = 0
    suggestions_count: int = 0
    implementations_count: int = 0
    role: Role = Role.USER
    avatar: Optional[str] = None
    password: Optional[str] = None  # Plaintext; only present on stored records

    def __post_init__(self):
        self.role = Role(self.role)

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN

    def without_password(self) -> "User":
        """Copy of this user safe to keep as the session snapshot."""
        return replace(self, password=None)

    def as_author(self) -> Author:
        """Snapshot used on suggestions and comments."""
        return Author(
            name=self.name,
            email=self.email,
            department=self.department,
            avatar=self.avatar
        )

    @classmethod
    def from_dict(cls, data: dict) -> "User":
        """Create User from JSON dict."""
        return cls(
            id=data.get("id", data.get("email", "")),
            name=data.get("name", ""),
            email=data.get("email", ""),
            department=data.get("department", ""),
            points=data.get("points", 0) or 0,
            suggestions_count=data.get("suggestionsCount", 0) or 0,
            implementations_count=data.get("implementationsCount", 0) or 0,
            role=data.get("role") or Role.USER.value,
            avatar=data.get("avatar"),
            password=data.get("password")
        )

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict."""
        data = {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "department": self.department,
            "points": self.points,
            "suggestionsCount": self.suggestions_count,
            "implementationsCount": self.implementations_count,
            "role": self.role.value
        }
        if self.avatar is not None:
            data["avatar"] = self.avatar
        if self.password is not None:
            data["password"] = self.password
        return data
