"""
Suggestion Lifecycle Manager.

Submit, vote, comment, status changes and deletion of suggestions,
including the notification and point side effects of each action.
"""

import dataclasses
import logging
from dataclasses import dataclass, field
from typing import Callable, Iterable, List, Optional

import config.settings as settings
from src.engine.sentiment import classify
from src.models.comment import Comment
from src.models.enums import NotificationType, Sentiment, Status, VOTE_POINTS
from src.models.suggestion import Author, Suggestion
from src.models.user import User
from src.services.errors import NoCurrentUserError, ValidationError
from src.services.notifications import NotificationDispatcher
from src.services.seeding import seed_demo
from src.store.record_store import RecordStore
from src.utils.timeutils import to_timestamp

logger = logging.getLogger(__name__)

BROWSE_SORT_KEYS = ("recent", "popular", "commented")


@dataclass
class SubmissionForm:
    """Fields a user fills in when submitting an idea."""
    title: str
    problem: str
    solution: str
    category: str
    cause: Optional[str] = None
    benefit: Optional[str] = None
    tags: List[str] = field(default_factory=list)
    language: str = "en"

    def missing_fields(self) -> List[str]:
        """Names of required fields left blank."""
        required = {
            "title": self.title,
            "problem": self.problem,
            "solution": self.solution,
            "category": self.category,
        }
        return [name for name, value in required.items() if not (value or "").strip()]


@dataclass
class VoteResult:
    success: bool
    votes: int
    voted: bool = False  # True if the voter now has a vote on the suggestion


class SuggestionService:
    """
    Applies user and admin actions to suggestions.

    Keeps votes == len(voted_by) and comments == number of stored comments
    for every suggestion it touches.
    """

    def __init__(
        self,
        store: RecordStore,
        notifier: NotificationDispatcher,
        classifier: Callable[[str, str, Optional[str]], Sentiment] = classify
    ):
        """
        Initialize suggestion service.

        Args:
            store: Record store holding suggestions, comments and users
            notifier: Dispatcher for vote/comment/status notifications
            classifier: Sentiment classifier applied at submission
        """
        self.store = store
        self.notifier = notifier
        self.classifier = classifier

    # Queries

    def get(self, suggestion_id: str) -> Optional[Suggestion]:
        return self.store.suggestions.get_by_id(suggestion_id)

    def browse(
        self,
        query: str = "",
        status: Optional[Status] = None,
        category: Optional[str] = None,
        sort_by: str = "recent"
    ) -> List[Suggestion]:
        """
        Dashboard listing.

        Args:
            query: Case-insensitive text searched in title, problem and solution
            status: Only this status
            category: Only this category
            sort_by: "recent" (newest first), "popular" (most votes) or
                "commented" (most comments)

        Raises:
            ValueError: If sort_by is unknown
        """
        if sort_by not in BROWSE_SORT_KEYS:
            raise ValueError(f"Invalid sort key: {sort_by}. Must be one of {', '.join(BROWSE_SORT_KEYS)}")

        needle = query.lower()
        status = Status(status) if status is not None else None

        def matches(s: Suggestion) -> bool:
            if needle and not (
                needle in s.title.lower()
                or needle in s.problem.lower()
                or needle in s.solution.lower()
            ):
                return False
            if status is not None and s.status is not status:
                return False
            if category is not None and s.category != category:
                return False
            return True

        selected = self.store.suggestions.find(matches)

        if sort_by == "popular":
            return sorted(selected, key=lambda s: s.votes, reverse=True)
        if sort_by == "commented":
            return sorted(selected, key=lambda s: s.comments, reverse=True)
        return sorted(selected, key=lambda s: s.created_at, reverse=True)

    def review_queue(self, query: str = "", status: Optional[Status] = None) -> List[Suggestion]:
        """Admin listing: search in title and problem, newest first."""
        needle = query.lower()
        status = Status(status) if status is not None else None

        selected = self.store.suggestions.find(
            lambda s: (needle in s.title.lower() or needle in s.problem.lower())
            and (status is None or s.status is status)
        )
        return sorted(selected, key=lambda s: s.created_at, reverse=True)

    def comments_for(self, suggestion_id: str) -> List[Comment]:
        return self.store.comments.find(lambda c: c.suggestion_id == suggestion_id)

    # User actions

    def submit(self, form: SubmissionForm) -> Suggestion:
        """
        Create a pending suggestion authored by the session user.

        Args:
            form: Submitted fields

        Returns:
            The stored suggestion

        Raises:
            ValidationError: If title, problem, solution or category is blank
            NoCurrentUserError: If nobody is logged in
        """
        missing = form.missing_fields()
        if missing:
            raise ValidationError(
                "Please fill in all required fields (Title, Problem, Solution, and Category). "
                f"Missing: {', '.join(missing)}"
            )

        current_user = self._require_session_user()
        sentiment = self.classifier(form.problem, form.solution, form.benefit or "")

        suggestion = self.store.suggestions.create({
            "title": form.title,
            "problem": form.problem,
            "cause": form.cause or None,
            "solution": form.solution,
            "benefit": form.benefit or None,
            "category": form.category,
            "language": form.language,
            "tags": list(form.tags),
            "author": current_user.as_author(),
            "status": Status.PENDING,
            "sentiment": sentiment,
        })

        self.store.session.update({"suggestions_count": current_user.suggestions_count + 1})

        logger.info(
            f"Submitted suggestion {suggestion.id} by {current_user.email} "
            f"(category={suggestion.category}, sentiment={sentiment.value})"
        )
        return suggestion

    def vote(self, suggestion_id: str, voter_key: str) -> VoteResult:
        """
        Toggle a vote.

        A voter already in voted_by is removed, otherwise added. A new vote by
        someone other than the author notifies the author.

        Returns:
            VoteResult; success is False if the suggestion does not exist
        """
        suggestion = self.store.suggestions.get_by_id(suggestion_id)
        if suggestion is None:
            return VoteResult(success=False, votes=0)

        has_voted = voter_key in suggestion.voted_by
        if has_voted:
            voted_by = [voter for voter in suggestion.voted_by if voter != voter_key]
        else:
            voted_by = suggestion.voted_by + [voter_key]

        updated = self.store.suggestions.update(suggestion_id, {
            "voted_by": voted_by,
            "votes": len(voted_by),
        })

        if not has_voted and suggestion.author.email != voter_key:
            self.notifier.create(
                recipient=suggestion.author.email,
                notification_type=NotificationType.VOTE,
                title="New Vote",
                message=f'Someone voted on your suggestion: "{suggestion.title}"',
                suggestion_id=suggestion_id
            )

        logger.info(
            f"{'Removed' if has_voted else 'Added'} vote of {voter_key} on {suggestion_id} "
            f"({updated.votes} votes)"
        )
        return VoteResult(success=True, votes=updated.votes, voted=not has_voted)

    def vote_as_current_user(self, suggestion_id: str) -> VoteResult:
        """
        Toggle the session user's vote and move their own balance by 5 points.

        Raises:
            NoCurrentUserError: If nobody is logged in
        """
        current_user = self._require_session_user()
        result = self.vote(suggestion_id, current_user.email)

        if result.success:
            delta = VOTE_POINTS if result.voted else -VOTE_POINTS
            self.store.session.update({"points": current_user.points + delta})
        return result

    def comment(self, suggestion_id: str, author: Author, content: str) -> Optional[Comment]:
        """
        Add a comment and refresh the suggestion's comment count.

        Args:
            suggestion_id: Commented suggestion
            author: Commenter snapshot
            content: Comment text (surrounding whitespace is dropped)

        Returns:
            The stored comment, or None if the suggestion does not exist

        Raises:
            ValidationError: If content is blank
        """
        text = (content or "").strip()
        if not text:
            raise ValidationError("Comment content must not be empty")

        suggestion = self.store.suggestions.get_by_id(suggestion_id)
        if suggestion is None:
            logger.warning(f"Comment rejected, suggestion {suggestion_id} not found")
            return None

        comment = self.store.comments.create({
            "suggestion_id": suggestion_id,
            "author": author,
            "content": text,
        })
        self._refresh_comment_count(suggestion_id)

        if suggestion.author.email != author.email:
            self.notifier.create(
                recipient=suggestion.author.email,
                notification_type=NotificationType.COMMENT,
                title="New Comment",
                message=f'{author.name} commented on your suggestion: "{suggestion.title}"',
                suggestion_id=suggestion_id
            )

        logger.info(f"Comment {comment.id} by {author.email} on {suggestion_id}")
        return comment

    def comment_as_current_user(self, suggestion_id: str, content: str) -> Optional[Comment]:
        """Comment with the session user as author. Raises NoCurrentUserError when logged out."""
        current_user = self._require_session_user()
        return self.comment(suggestion_id, current_user.as_author(), content)

    def delete_comment(self, comment_id: str) -> bool:
        """Remove a comment and refresh the owning suggestion's count."""
        comment = self.store.comments.get_by_id(comment_id)
        if comment is None:
            return False
        self.store.comments.delete(comment_id)
        self._refresh_comment_count(comment.suggestion_id)
        return True

    # Admin actions

    def set_status(
        self,
        suggestion_id: str,
        new_status: Status,
        remark: Optional[str] = None
    ) -> Optional[Suggestion]:
        """
        Change the status of one suggestion.

        Any status may follow any other. The author's stored points move by
        the difference of the status point values (never below 0), and the
        author is notified.

        Args:
            suggestion_id: Target suggestion
            new_status: Status to set
            remark: Admin remark; a blank remark clears the previous one

        Returns:
            Updated suggestion, or None if it does not exist
        """
        new_status = Status(new_status)
        return self._change_status(suggestion_id, new_status, {"admin_remark": remark or None})

    def bulk_set_status(self, suggestion_ids: Iterable[str], new_status: Status) -> List[Suggestion]:
        """
        Apply set_status (without remark) to each id. Missing ids are skipped.

        Returns:
            The updated suggestions
        """
        new_status = Status(new_status)
        updated = []
        for suggestion_id in suggestion_ids:
            suggestion = self._change_status(suggestion_id, new_status, {})
            if suggestion is not None:
                updated.append(suggestion)

        logger.info(f"Bulk status change to {new_status.value}: {len(updated)} suggestions")
        return updated

    def seed_demo(self, count: int = settings.DEMO_SEED_COUNT) -> int:
        """Append synthetic demo suggestions. Returns the number added."""
        return seed_demo(self.store, count)

    def delete(self, suggestion_id: str) -> bool:
        """Delete one suggestion. Its comments and notifications are kept."""
        return self.store.suggestions.delete(suggestion_id)

    def delete_all(self) -> int:
        """
        Delete every suggestion and reset stored users' points and counters.

        Comments and notifications are left in place.

        Returns:
            Number of suggestions removed
        """
        removed = self.store.suggestions.count()
        self.store.suggestions.replace_all([])

        users = [
            dataclasses.replace(user, points=0, suggestions_count=0, implementations_count=0)
            for user in self.store.users.get_all()
        ]
        self.store.users.replace_all(users)

        logger.warning(f"Deleted {removed} suggestions and reset stats of {len(users)} users")
        return removed

    def recompute_all_sentiments(self) -> int:
        """
        Re-classify every stored suggestion.

        Returns:
            Number of suggestions whose sentiment changed
        """
        stamp = to_timestamp(self.store.now())
        changed = 0
        suggestions = []

        for suggestion in self.store.suggestions.get_all():
            computed = self.classifier(suggestion.problem, suggestion.solution, suggestion.benefit)
            if computed != suggestion.sentiment:
                changed += 1
                suggestion = dataclasses.replace(
                    suggestion,
                    sentiment=computed,
                    updated_at=max(stamp, suggestion.created_at)
                )
            suggestions.append(suggestion)

        self.store.suggestions.replace_all(suggestions)
        logger.info(f"Recomputed sentiments: {changed} of {len(suggestions)} changed")
        return changed

    # Internals

    def _require_session_user(self) -> User:
        current_user = self.store.session.get()
        if current_user is None:
            raise NoCurrentUserError("No current user")
        return current_user

    def _refresh_comment_count(self, suggestion_id: str) -> None:
        count = len(self.comments_for(suggestion_id))
        self.store.suggestions.update(suggestion_id, {"comments": count})

    def _change_status(self, suggestion_id: str, new_status: Status, extra: dict) -> Optional[Suggestion]:
        suggestion = self.store.suggestions.get_by_id(suggestion_id)
        if suggestion is None:
            logger.warning(f"Status change skipped, suggestion {suggestion_id} not found")
            return None

        old_status = suggestion.status
        updated = self.store.suggestions.update(suggestion_id, {"status": new_status, **extra})

        self._apply_status_points(suggestion.author.email, old_status, new_status)

        self.notifier.create(
            recipient=suggestion.author.email,
            notification_type=NotificationType.STATUS_CHANGE,
            title="Status Updated",
            message=(
                f'Your suggestion "{suggestion.title}" status has been changed to {new_status.label}'
            ),
            suggestion_id=suggestion_id
        )

        logger.info(f"Suggestion {suggestion_id}: {old_status.value} -> {new_status.value}")
        return updated

    def _apply_status_points(self, email: str, old_status: Status, new_status: Status) -> Optional[int]:
        """
        Move the stored author's points by new_status.points - old_status.points.

        Returns:
            The author's new point total, or None if the author is not a stored user
        """
        author = next((u for u in self.store.users.get_all() if u.email == email), None)
        if author is None:
            return None

        points = max(0, (author.points or 0) + new_status.points - old_status.points)
        self.store.users.update(author.id, {"points": points})
        return points
