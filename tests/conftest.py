"""
Shared fixtures: an in-memory record store driven by a controllable clock.
"""

from datetime import datetime, timedelta, timezone

import pytest

from src.models.enums import Sentiment, Status
from src.models.suggestion import Author, Suggestion
from src.store.backends import MemoryBackend
from src.store.record_store import RecordStore
from src.utils.timeutils import to_timestamp

FIXED_NOW = datetime(2024, 6, 15, 12, 0, 0, tzinfo=timezone.utc)


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime = FIXED_NOW):
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> None:
        self.current += timedelta(**kwargs)


def make_suggestion(
    suggestion_id: str,
    email: str = "alice@company.com",
    name: str = "Alice",
    department: str = "Logistics",
    status: Status = Status.PENDING,
    votes: int = 0,
    days_ago: float = 1,
    category: str = "Technology",
    tags=None,
    now: datetime = FIXED_NOW,
    **overrides
) -> Suggestion:
    stamp = to_timestamp(now - timedelta(days=days_ago))
    values = dict(
        id=suggestion_id,
        title=f"Suggestion {suggestion_id}",
        problem="Manual reporting takes too long",
        solution="Automate the weekly report",
        author=Author(name=name, email=email, department=department),
        category=category,
        status=status,
        sentiment=Sentiment.NEUTRAL,
        votes=votes,
        voted_by=[f"voter{n}@company.com" for n in range(votes)],
        created_at=stamp,
        updated_at=stamp,
        tags=list(tags or []),
    )
    values.update(overrides)
    return Suggestion(**values)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(clock):
    """Opened, empty store (no default content)."""
    record_store = RecordStore(MemoryBackend(), clock=clock)
    record_store.open()
    record_store.initialize(seed_defaults=False)
    yield record_store
    record_store.close()
