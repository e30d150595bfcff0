"""
User Aggregation and Leaderboard.

Derives effective users (registered + inferred from authorship), their
points and counts, rankings, badges and department totals by rescanning
the raw suggestion list on every call.
"""

import dataclasses
import logging
import threading
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import pandas as pd

import config.settings as settings
from src.models.enums import Role, Status, VOTE_POINTS
from src.models.suggestion import Suggestion
from src.models.user import User
from src.store.record_store import RecordStore

logger = logging.getLogger(__name__)

LEADERBOARD_SORT_KEYS = ("rank", "ideas", "implemented", "points", "name")


@dataclass
class LeaderboardEntry:
    user_id: str
    name: str
    email: str
    department: str
    points: int
    suggestions: int
    implementations: int
    rank: int  # Position in the unfiltered ranking, 1-based
    avatar: Optional[str] = None
    badges: List[str] = field(default_factory=list)


@dataclass
class Achievement:
    title: str
    description: str
    progress: float  # 0-100


def badges_for(points: int, suggestions: int, implementations: int) -> List[str]:
    """Badges earned by a contributor, in display order."""
    badges = []
    if implementations >= 5:
        badges.append("Innovation Expert")
    if suggestions >= 10:
        badges.append("Top Contributor")
    if points >= 1000:
        badges.append("Problem Solver")
    if implementations >= 3:
        badges.append("Efficiency Master")
    if suggestions >= 5:
        badges.append("Team Player")
    return badges


def aggregate_users(stored_users: List[User], suggestions: List[Suggestion]) -> List[User]:
    """
    Merge stored users with suggestion authors and layer derived stats on top.

    Pure function of its inputs: the same lists always give the same result.

    Args:
        stored_users: Registered users (their stored points/counts are the base)
        suggestions: Every suggestion to scan

    Returns:
        Effective users sorted by points descending; ties keep first-seen order
    """
    users_by_email: Dict[str, User] = {}

    # Stored users first; copies so the caller's records are never mutated
    for user in stored_users:
        users_by_email[user.email] = dataclasses.replace(user)

    for suggestion in suggestions:
        author = suggestion.author
        user = users_by_email.get(author.email)
        if user is None:
            user = User(
                id=author.email,
                name=author.name,
                email=author.email,
                department=author.department,
                avatar=author.avatar,
                role=Role.USER
            )
            users_by_email[author.email] = user

        user.suggestions_count += 1
        if suggestion.status is Status.IMPLEMENTED:
            user.implementations_count += 1
            user.points += Status.IMPLEMENTED.points
        elif suggestion.status is Status.APPROVED:
            user.points += Status.APPROVED.points
        user.points += suggestion.votes * VOTE_POINTS

    # sorted() is stable, so equal scores keep insertion order
    return sorted(users_by_email.values(), key=lambda u: u.points, reverse=True)


class UserAggregator:
    """
    Computes effective users and rankings from a record store.

    With caching enabled the aggregate is kept until the store reports a
    write to the suggestions or users collection.
    """

    def __init__(self, store: RecordStore, use_cache: bool = False):
        """
        Initialize aggregator.

        Args:
            store: Record store to read suggestions and users from
            use_cache: Keep the last aggregate until a relevant write happens
        """
        self.store = store
        self.use_cache = use_cache
        self._cached: Optional[List[User]] = None
        # Bumped on every relevant write; a result is cached only if no write happened during its scan
        self._generation = 0
        self._lock = threading.Lock()
        self._unsubscribe = None

        if use_cache:
            self._unsubscribe = store.subscribe(self._on_store_change)

    def _on_store_change(self, key: str) -> None:
        if key in (settings.SUGGESTIONS_KEY, settings.USERS_KEY):
            with self._lock:
                self._generation += 1
                self._cached = None

    def close(self) -> None:
        """Stop listening to store writes."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        with self._lock:
            self._cached = None
            self.use_cache = False

    def effective_users(self, fresh: bool = False) -> List[User]:
        """
        Stored users plus implicit authors, sorted by points descending.

        Args:
            fresh: Rescan the store even if a cached aggregate exists

        Returns:
            Copies of the effective users
        """
        with self._lock:
            if self.use_cache and not fresh and self._cached is not None:
                return [dataclasses.replace(user) for user in self._cached]
            generation = self._generation

        users = aggregate_users(self.store.users.get_all(), self.store.suggestions.get_all())
        logger.debug(f"Aggregated {len(users)} effective users")

        with self._lock:
            if self.use_cache and self._generation == generation:
                self._cached = [dataclasses.replace(user) for user in users]
        return users

    def find_user(self, email: str) -> Optional[User]:
        for user in self.effective_users():
            if user.email == email:
                return user
        return None

    def leaderboard(
        self,
        department: Optional[str] = None,
        query: str = "",
        sort_by: str = "rank",
        descending: bool = False
    ) -> List[LeaderboardEntry]:
        """
        Ranked contributor list.

        Args:
            department: Only keep contributors of this department
            query: Case-insensitive substring of the contributor name
            sort_by: "rank", "ideas", "implemented", "points" or "name"
            descending: Reverse the sort direction

        Returns:
            Leaderboard entries; rank always reflects the unfiltered points order

        Raises:
            ValueError: If sort_by is unknown
        """
        if sort_by not in LEADERBOARD_SORT_KEYS:
            raise ValueError(
                f"Invalid sort key: {sort_by}. Must be one of {', '.join(LEADERBOARD_SORT_KEYS)}"
            )

        entries = [
            LeaderboardEntry(
                user_id=user.id,
                name=user.name,
                email=user.email,
                department=user.department,
                points=user.points,
                suggestions=user.suggestions_count,
                implementations=user.implementations_count,
                rank=index + 1,
                avatar=user.avatar,
                badges=badges_for(user.points, user.suggestions_count, user.implementations_count)
            )
            for index, user in enumerate(self.effective_users())
        ]

        if department:
            entries = [e for e in entries if e.department == department]
        if query.strip():
            needle = query.lower()
            entries = [e for e in entries if needle in e.name.lower()]

        sort_keys = {
            "rank": lambda e: e.rank,
            "ideas": lambda e: e.suggestions,
            "implemented": lambda e: e.implementations,
            "points": lambda e: e.points,
            "name": lambda e: e.name.casefold(),
        }
        return sorted(entries, key=sort_keys[sort_by], reverse=descending)

    def department_points(self) -> pd.DataFrame:
        """
        Points and contributor count per department.

        Returns:
            DataFrame with columns department, points, contributors,
            sorted by points descending
        """
        users = self.effective_users()
        frame = pd.DataFrame(
            [{"department": u.department, "points": u.points} for u in users],
            columns=["department", "points"]
        )

        if frame.empty:
            return pd.DataFrame(columns=["department", "points", "contributors"])

        table = (
            frame.groupby("department", sort=False)
            .agg(points=("points", "sum"), contributors=("points", "size"))
            .reset_index()
        )
        table = table.sort_values("points", ascending=False, kind="stable")
        return table.reset_index(drop=True)

    def achievements(self, user: User) -> List[Achievement]:
        """
        Progress of one user towards the fixed achievements.

        Uses the given user's own counters (typically the session snapshot)
        and the votes received on suggestions they authored.
        """
        votes_received = sum(
            s.votes for s in self.store.suggestions.get_all() if s.author.email == user.email
        )

        return [
            Achievement(
                title="First Suggestion",
                description="Submit your first idea",
                progress=100 if user.suggestions_count > 0 else 0
            ),
            Achievement(
                title="Team Player",
                description="Get 10 votes on your suggestions",
                progress=min(votes_received / 10 * 100, 100)
            ),
            Achievement(
                title="Innovation Champion",
                description="Have 5 suggestions implemented",
                progress=min(user.implementations_count / 5 * 100, 100)
            ),
        ]
