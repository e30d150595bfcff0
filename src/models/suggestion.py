"""
Suggestion data model.

Represents a submitted improvement idea and the author snapshot taken at
submission time.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from src.models.enums import Sentiment, Status


@dataclass
class Author:
    """
    Denormalized author snapshot.
    Copied onto suggestions and comments; never a live reference to a User.
    """
    name: str
    email: str  # Identity key of the author
    department: str = ""
    avatar: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> "Author":
        """Create Author from JSON dict."""
        return cls(
            name=data.get("name", ""),
            email=data.get("email", ""),
            department=data.get("department", ""),
            avatar=data.get("avatar")
        )

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict."""
        data = {
            "name": self.name,
            "email": self.email,
            "department": self.department
        }
        if self.avatar is not None:
            data["avatar"] = self.avatar
        return data


@dataclass
class Suggestion:
    """
    A submitted improvement idea with its review status.

    Invariants kept by the lifecycle manager:
    - votes == len(voted_by)
    - comments == number of Comment records pointing at this suggestion
    """
    id: str
    title: str
    problem: str
    solution: str
    author: Author
    category: str
    status: Status = Status.PENDING
    sentiment: Sentiment = Sentiment.NEUTRAL
    cause: Optional[str] = None
    benefit: Optional[str] = None
    votes: int = 0
    voted_by: List[str] = field(default_factory=list)  # Voter identity keys (emails)
    comments: int = 0
    created_at: str = ""  # ISO-8601 UTC
    updated_at: str = ""  # ISO-8601 UTC, never earlier than created_at
    tags: List[str] = field(default_factory=list)
    language: str = "en"
    admin_remark: Optional[str] = None

    def __post_init__(self):
        if isinstance(self.author, dict):
            self.author = Author.from_dict(self.author)

        # Raises ValueError for unknown values
        self.status = Status(self.status)
        self.sentiment = Sentiment(self.sentiment)

        if self.votes < 0:
            raise ValueError(f"Invalid votes: {self.votes}. Must be >= 0")
        if self.comments < 0:
            raise ValueError(f"Invalid comments: {self.comments}. Must be >= 0")

    @classmethod
    def from_dict(cls, data: dict) -> "Suggestion":
        """Create Suggestion from JSON dict."""
        return cls(
            id=data["id"],
            title=data.get("title", ""),
            problem=data.get("problem", ""),
            solution=data.get("solution", ""),
            author=Author.from_dict(data.get("author", {})),
            category=data.get("category", ""),
            status=data.get("status", Status.PENDING.value),
            sentiment=data.get("sentiment", Sentiment.NEUTRAL.value),
            cause=data.get("cause"),
            benefit=data.get("benefit"),
            votes=data.get("votes", 0),
            voted_by=list(data.get("votedBy", [])),
            comments=data.get("comments", 0),
            created_at=data.get("createdAt", ""),
            updated_at=data.get("updatedAt", ""),
            tags=list(data.get("tags", [])),
            language=data.get("language", "en"),
            admin_remark=data.get("adminRemark")
        )

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict (camelCase keys, optional fields omitted when unset)."""
        data = {
            "id": self.id,
            "title": self.title,
            "problem": self.problem,
            "solution": self.solution,
            "author": self.author.to_dict(),
            "status": self.status.value,
            "category": self.category,
            "sentiment": self.sentiment.value,
            "votes": self.votes,
            "votedBy": list(self.voted_by),
            "comments": self.comments,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
            "tags": list(self.tags),
            "language": self.language
        }
        if self.cause is not None:
            data["cause"] = self.cause
        if self.benefit is not None:
            data["benefit"] = self.benefit
        if self.admin_remark is not None:
            data["adminRemark"] = self.admin_remark
        return data
