"""
Comment data model.
"""

from dataclasses import dataclass

from src.models.suggestion import Author


@dataclass
class Comment:
    """A comment left on a suggestion. Linked by suggestion_id only."""
    id: str
    suggestion_id: str
    author: Author
    content: str
    created_at: str = ""

    def __post_init__(self):
        if isinstance(self.author, dict):
            self.author = Author.from_dict(self.author)

    @classmethod
    def from_dict(cls, data: dict) -> "Comment":
        """Create Comment from JSON dict."""
        return cls(
            id=data["id"],
            suggestion_id=data["suggestionId"],
            author=Author.from_dict(data.get("author", {})),
            content=data.get("content", ""),
            created_at=data.get("createdAt", "")
        )

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict."""
        return {
            "id": self.id,
            "suggestionId": self.suggestion_id,
            "author": self.author.to_dict(),
            "content": self.content,
            "createdAt": self.created_at
        }
