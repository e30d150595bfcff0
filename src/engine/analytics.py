"""
Suggestion Analytics.

Sentiment mix, category distribution, submission time series, status
funnel, top tags and department participation over a filtered subset of
suggestions. Every figure is recomputed from the raw records.
"""

import logging
import math
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Dict, List, Optional

import pandas as pd

import config.settings as settings
from src.engine.aggregation import UserAggregator
from src.models.enums import REVIEWED_STATUSES, Sentiment, Status
from src.models.suggestion import Suggestion
from src.models.user import User
from src.store.record_store import RecordStore
from src.utils.timeutils import parse_timestamp

logger = logging.getLogger(__name__)

TIME_WINDOW_DAYS = {
    "7days": 7,
    "30days": 30,
    "90days": 90,
    "1year": 365,
}

FRAME_COLUMNS = ["id", "category", "status", "sentiment", "department", "author_email", "created_at", "tags"]


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives (2.5 -> 3)."""
    return int(math.floor(value + 0.5))


def percent(part: float, whole: float) -> int:
    """Integer percentage of part in whole; 0 when whole is 0."""
    if not whole:
        return 0
    return round_half_up((part / whole) * 100)


def created_at_of(suggestion: Suggestion) -> Optional[datetime]:
    """Parsed creation time, or None when the stored value is missing or malformed."""
    try:
        return parse_timestamp(suggestion.created_at)
    except ValueError:
        logger.debug(f"Unparseable createdAt on suggestion {suggestion.id}: {suggestion.created_at!r}")
        return None


def _created_since(suggestion: Suggestion, start: datetime) -> bool:
    created = created_at_of(suggestion)
    return created is not None and created >= start


@dataclass
class SuggestionFilter:
    """
    Explicit analytics filter.

    None (or "all") for category/status/department means no restriction.
    Unknown time windows fall back to 30 days.
    """
    time_window: str = settings.DEFAULT_TIME_WINDOW
    category: Optional[str] = None
    status: Optional[Status] = None
    department: Optional[str] = None

    def __post_init__(self):
        if self.category == "all":
            self.category = None
        if self.department == "all":
            self.department = None
        if self.status == "all":
            self.status = None
        if self.status is not None:
            self.status = Status(self.status)

    @property
    def window_days(self) -> int:
        return TIME_WINDOW_DAYS.get(self.time_window, 30)

    def apply(self, suggestions: List[Suggestion], now: datetime) -> List[Suggestion]:
        """Return the suggestions inside the window that match every criterion."""
        cutoff = now - timedelta(days=self.window_days)
        # Rows without a valid creation time fall outside every window
        selected = [s for s in suggestions if _created_since(s, cutoff)]

        if self.category is not None:
            selected = [s for s in selected if s.category == self.category]
        if self.status is not None:
            selected = [s for s in selected if s.status is self.status]
        if self.department is not None:
            selected = [s for s in selected if s.author.department == self.department]
        return selected


def to_frame(suggestions: List[Suggestion]) -> pd.DataFrame:
    """One row per suggestion with the columns analytics groups on."""
    rows = [
        {
            "id": s.id,
            "category": s.category,
            "status": s.status.value,
            "sentiment": s.sentiment.value,
            "department": s.author.department,
            "author_email": s.author.email,
            "created_at": s.created_at,
            "tags": list(s.tags),
        }
        for s in suggestions
    ]
    return pd.DataFrame(rows, columns=FRAME_COLUMNS)


def _ranked_counts(values: pd.Series) -> pd.Series:
    """Occurrence counts, most frequent first; ties keep first-seen order."""
    values = values.reset_index(drop=True)
    counts = values.groupby(values, sort=False).size()
    return counts.sort_values(ascending=False, kind="stable")


def sentiment_breakdown(suggestions: List[Suggestion]) -> Dict[str, int]:
    """Percentage of each sentiment label."""
    total = len(suggestions)
    counts = Counter(s.sentiment for s in suggestions)
    return {
        sentiment.value: percent(counts.get(sentiment, 0), total)
        for sentiment in (Sentiment.POSITIVE, Sentiment.NEUTRAL, Sentiment.NEGATIVE)
    }


def category_distribution(suggestions: List[Suggestion]) -> List[Dict]:
    """Count and percentage per category, most frequent first."""
    frame = to_frame(suggestions)
    total = len(frame)
    if total == 0:
        return []

    counts = _ranked_counts(frame["category"])
    return [
        {"category": category, "count": int(count), "percentage": percent(count, total)}
        for category, count in counts.items()
    ]


def submission_series(suggestions: List[Suggestion]) -> List[Dict]:
    """Submissions per UTC calendar day, ascending by date. Days without submissions are omitted."""
    frame = to_frame(suggestions)
    if frame.empty:
        return []

    created = pd.to_datetime(frame["created_at"], utc=True, format="ISO8601", errors="coerce")
    days = created.dropna().dt.strftime("%Y-%m-%d")
    counts = days.value_counts().sort_index()
    return [{"date": day, "submissions": int(count)} for day, count in counts.items()]


def status_funnel(suggestions: List[Suggestion]) -> List[Dict]:
    """Submitted -> Reviewed -> Implemented counts."""
    frame = to_frame(suggestions)
    reviewed_values = [status.value for status in REVIEWED_STATUSES]

    reviewed = int(frame["status"].isin(reviewed_values).sum())
    implemented = int((frame["status"] == Status.IMPLEMENTED.value).sum())

    return [
        {"stage": "Submitted", "count": len(frame)},
        {"stage": "Reviewed", "count": reviewed},
        {"stage": "Implemented", "count": implemented},
    ]


def top_tags(suggestions: List[Suggestion], limit: int = settings.TOP_TAGS_LIMIT) -> List[Dict]:
    """Most used tags, most frequent first."""
    frame = to_frame(suggestions)
    tags = frame["tags"].explode().dropna()
    if tags.empty:
        return []

    counts = _ranked_counts(tags).head(limit)
    return [{"tag": tag, "count": int(count)} for tag, count in counts.items()]


def department_engagement(
    suggestions: List[Suggestion],
    users: List[User],
    departments: List[str] = settings.DEPARTMENTS
) -> List[Dict]:
    """
    Participation per department.

    Args:
        suggestions: Filtered suggestions
        users: Effective users (denominator of participation)
        departments: Departments to report, in display order

    Returns:
        One row per department: participation = unique submitters / users in
        the department (percent), submissions = suggestion count
    """
    users_per_department = Counter(u.department for u in users)
    frame = to_frame(suggestions)
    submitters = frame.groupby("department")["author_email"].nunique()
    submissions = frame.groupby("department").size()

    rows = []
    for department in departments:
        total_users = users_per_department.get(department, 0)
        unique_submitters = int(submitters.get(department, 0))
        rows.append({
            "department": department,
            "participation": percent(unique_submitters, total_users),
            "submissions": int(submissions.get(department, 0)),
        })
    return rows


def average_age_days(suggestions: List[Suggestion], now: datetime) -> float:
    """Mean age in days of the given suggestions; 0 when none has a valid creation time."""
    created = [c for c in (created_at_of(s) for s in suggestions) if c is not None]
    if not created:
        return 0.0
    ages = [(now - c).total_seconds() / 86400 for c in created]
    return sum(ages) / len(ages)


def top_contributors(users: List[User], limit: int = settings.TOP_CONTRIBUTORS_LIMIT) -> List[Dict]:
    """First users of the ranking with their implementation success score."""
    return [
        {
            "name": user.name,
            "department": user.department,
            "submissions": user.suggestions_count,
            "score": (
                percent(user.implementations_count, user.suggestions_count)
                if user.implementations_count > 0 else 0
            ),
        }
        for user in users[:limit]
    ]


@dataclass
class AnalyticsReport:
    total_suggestions: int
    active_users: int
    implementation_rate: int
    avg_response_days: float
    sentiment_breakdown: Dict[str, int]
    category_distribution: List[Dict] = field(default_factory=list)
    series: List[Dict] = field(default_factory=list)
    status_funnel: List[Dict] = field(default_factory=list)
    top_tags: List[Dict] = field(default_factory=list)
    top_contributors: List[Dict] = field(default_factory=list)
    department_engagement: List[Dict] = field(default_factory=list)

    @property
    def avg_response_time(self) -> str:
        return f"{self.avg_response_days:.1f} days"

    def tables(self) -> Dict[str, List[Dict]]:
        """Row lists suitable for CSV export, keyed by export name."""
        return {
            "category_distribution": self.category_distribution,
            "submissions_over_time": self.series,
            "status_funnel": self.status_funnel,
            "top_tags": self.top_tags,
            "department_engagement": self.department_engagement,
        }

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict."""
        return {
            "totalSuggestions": self.total_suggestions,
            "activeUsers": self.active_users,
            "implementationRate": self.implementation_rate,
            "avgResponseTime": self.avg_response_time,
            "sentimentBreakdown": self.sentiment_breakdown,
            "categoryDistribution": self.category_distribution,
            "series": self.series,
            "statusFunnel": self.status_funnel,
            "topTags": self.top_tags,
            "topContributors": self.top_contributors,
            "departmentEngagement": self.department_engagement,
        }


@dataclass
class DashboardStats:
    total_suggestions: int
    active_contributors: int
    implementation_rate: int
    points_earned: int


@dataclass
class AdminKpis:
    review_pending_count: int
    approved_this_week: int
    implemented_this_month: int
    avg_pending_age_days: int


class AnalyticsEngine:
    """
    Builds analytics reports and dashboard figures from a record store.
    """

    def __init__(self, store: RecordStore, aggregator: UserAggregator):
        """
        Initialize analytics engine.

        Args:
            store: Record store holding the raw suggestions
            aggregator: Source of effective users
        """
        self.store = store
        self.aggregator = aggregator

    def filter_suggestions(self, suggestion_filter: SuggestionFilter) -> List[Suggestion]:
        return suggestion_filter.apply(self.store.suggestions.get_all(), self.store.now())

    def report(self, suggestion_filter: Optional[SuggestionFilter] = None) -> AnalyticsReport:
        """
        Compute the full analytics report.

        Args:
            suggestion_filter: Subset to analyze (default: last 30 days, no other criteria)

        Returns:
            AnalyticsReport for the filtered suggestions
        """
        suggestion_filter = suggestion_filter or SuggestionFilter()
        suggestions = self.filter_suggestions(suggestion_filter)
        users = self.aggregator.effective_users()
        now = self.store.now()

        total = len(suggestions)
        implemented = sum(1 for s in suggestions if s.status is Status.IMPLEMENTED)
        pending = [s for s in suggestions if s.status is Status.PENDING]

        report = AnalyticsReport(
            total_suggestions=total,
            active_users=len(users),
            implementation_rate=percent(implemented, total),
            avg_response_days=average_age_days(pending, now),
            sentiment_breakdown=sentiment_breakdown(suggestions),
            category_distribution=category_distribution(suggestions),
            series=submission_series(suggestions),
            status_funnel=status_funnel(suggestions),
            top_tags=top_tags(suggestions),
            top_contributors=top_contributors(users),
            department_engagement=department_engagement(suggestions, users)
        )

        logger.info(
            f"Analytics report: {total} suggestions in {suggestion_filter.time_window}, "
            f"{len(users)} users, implementation rate {report.implementation_rate}%"
        )
        return report

    def dashboard_stats(self, current_user: Optional[User] = None) -> DashboardStats:
        """Headline numbers for the dashboard over all suggestions."""
        suggestions = self.store.suggestions.get_all()
        users = self.aggregator.effective_users()
        implemented = sum(1 for s in suggestions if s.status is Status.IMPLEMENTED)

        return DashboardStats(
            total_suggestions=len(suggestions),
            active_contributors=len(users),
            implementation_rate=percent(implemented, len(suggestions)),
            points_earned=current_user.points if current_user else 0
        )

    def admin_kpis(self) -> AdminKpis:
        """Review queue indicators for administrators."""
        suggestions = self.store.suggestions.get_all()
        now = self.store.now()
        week_start = now - timedelta(days=7)
        month_start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)

        awaiting = [s for s in suggestions if s.status in (Status.PENDING, Status.REVIEW_PENDING)]

        return AdminKpis(
            review_pending_count=sum(1 for s in suggestions if s.status is Status.REVIEW_PENDING),
            approved_this_week=sum(
                1 for s in suggestions
                if s.status is Status.APPROVED and _created_since(s, week_start)
            ),
            implemented_this_month=sum(
                1 for s in suggestions
                if s.status is Status.IMPLEMENTED and _created_since(s, month_start)
            ),
            avg_pending_age_days=round_half_up(average_age_days(awaiting, now))
        )
