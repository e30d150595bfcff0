"""
Demo data generator.

Appends synthetic suggestions spread over the last few months so the
dashboards and analytics have something to show.
"""

import logging
import random
from datetime import timedelta
from typing import Optional

import config.settings as settings
from src.engine.sentiment import classify
from src.models.enums import Status
from src.models.suggestion import Author, Suggestion
from src.store.defaults import seed_voters
from src.store.record_store import RecordStore
from src.utils.ids import new_record_id
from src.utils.timeutils import to_timestamp

logger = logging.getLogger(__name__)

DEMO_AUTHORS = ["Aarav Sharma", "Priya Patel", "Rohan Gupta", "Neha Verma", "Vikram Singh"]
DEMO_EMAIL_POOL = 7
DEMO_STATUS_CYCLE = [
    Status.PENDING,
    Status.REVIEW_PENDING,
    Status.APPROVED,
    Status.IMPLEMENTED,
    Status.REJECTED,
]
DEMO_MAX_VOTES = 25


def seed_demo(
    store: RecordStore,
    count: int = settings.DEMO_SEED_COUNT,
    rng: Optional[random.Random] = None
) -> int:
    """
    Append `count` demo suggestions to the store.

    Departments, categories, authors and statuses cycle with the index;
    creation dates and vote counts are random.

    Args:
        store: Target record store
        count: Number of suggestions to add
        rng: Random source (pass a seeded Random for repeatable data)

    Returns:
        Number of suggestions added
    """
    rng = rng or random.Random()
    existing = store.suggestions.get_all()
    now = store.now()
    created = []

    for i in range(count):
        department = settings.DEPARTMENTS[i % len(settings.DEPARTMENTS)]
        category = settings.CATEGORIES[i % len(settings.CATEGORIES)]
        days_ago = rng.randrange(settings.DEMO_SEED_WINDOW_DAYS)
        stamp = to_timestamp(now - timedelta(days=days_ago))

        # Cycle text variants so the sentiment mix is not uniform
        if i % 5 == 0:
            problem = "Process is slow and causes delay and waste. Worst cases seen in peak hours."
        else:
            problem = "Opportunity to improve efficiency and reduce cost with better workflow."
        if i % 3 == 0:
            solution = "Implement automation to streamline steps and reduce wait time."
        else:
            solution = "Introduce checklists and training to improve quality and reduce errors."
        if i % 2 == 0:
            benefit = "Expect to save 10% time and improve quality."
        else:
            benefit = "Better customer experience with faster response."

        votes = rng.randrange(DEMO_MAX_VOTES)

        created.append(Suggestion(
            id=new_record_id("suggestion", now),
            title=f"Demo Suggestion #{len(existing) + len(created) + 1}",
            problem=problem,
            solution=solution,
            benefit=benefit,
            author=Author(
                name=DEMO_AUTHORS[i % len(DEMO_AUTHORS)],
                email=f"user{i % DEMO_EMAIL_POOL}@company.com",
                department=department
            ),
            category=category,
            status=DEMO_STATUS_CYCLE[i % len(DEMO_STATUS_CYCLE)],
            sentiment=classify(problem, solution, benefit),
            votes=votes,
            voted_by=seed_voters(votes),
            comments=0,
            created_at=stamp,
            updated_at=stamp,
            tags=["demo", department.lower().split(" ")[0], category.lower().split(" ")[0]],
            language="en"
        ))

    store.suggestions.replace_all(existing + created)
    logger.info(f"Seeded {len(created)} demo suggestions")
    return len(created)
