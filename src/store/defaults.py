"""
Default content written by RecordStore.initialize() into an empty store.
"""

from datetime import datetime, timedelta
from typing import List

from src.models.enums import Role, Sentiment, Status
from src.models.suggestion import Author, Suggestion
from src.models.user import User
from src.utils.timeutils import to_timestamp


def seed_voters(count: int) -> List[str]:
    """Placeholder voter keys so seeded vote counts match their voter sets."""
    return [f"colleague{n}@company.com" for n in range(1, count + 1)]


def default_suggestions(now: datetime) -> List[Suggestion]:
    """The three showcase suggestions of a fresh installation."""
    two_days_ago = to_timestamp(now - timedelta(days=2))
    one_day_ago = to_timestamp(now - timedelta(days=1))
    week_ago = to_timestamp(now - timedelta(days=7))

    return [
        Suggestion(
            id="1",
            title="Automated Customer Feedback System",
            problem=(
                "Customer feedback is currently collected manually through forms, "
                "leading to delays and inconsistent data collection."
            ),
            solution=(
                "Implement an AI-powered chatbot that can collect, categorize, "
                "and analyze customer feedback in real-time."
            ),
            author=Author(
                name="Aarav Sharma",
                email="aarav@company.com",
                department="Sales & Client Relations",
                avatar="/placeholder-avatar-1.jpg"
            ),
            category="Customer Experience",
            status=Status.APPROVED,
            sentiment=Sentiment.POSITIVE,
            votes=24,
            voted_by=seed_voters(24),
            created_at=two_days_ago,
            updated_at=two_days_ago,
            tags=["AI", "Automation", "Customer Service"]
        ),
        Suggestion(
            id="2",
            title="Green Office Initiative",
            problem=(
                "High energy consumption and waste in office operations are "
                "increasing operational costs and environmental impact."
            ),
            solution=(
                "Introduce smart lighting systems, paperless workflows, and "
                "recycling programs to reduce our carbon footprint."
            ),
            author=Author(
                name="Priya Patel",
                email="priya@company.com",
                department="Manufacturing",
                avatar="/placeholder-avatar-2.jpg"
            ),
            category="Environment",
            status=Status.PENDING,
            sentiment=Sentiment.POSITIVE,
            votes=18,
            voted_by=seed_voters(18),
            created_at=one_day_ago,
            updated_at=one_day_ago,
            tags=["Sustainability", "Cost Reduction", "Environment"]
        ),
        Suggestion(
            id="3",
            title="Remote Work Productivity Tools",
            problem=(
                "Remote team members struggle with collaboration and maintaining "
                "productivity without proper digital tools."
            ),
            solution=(
                "Deploy integrated project management and communication platforms "
                "with AI-powered productivity insights."
            ),
            author=Author(
                name="Rohan Gupta",
                email="rohan@company.com",
                department="Quality Control",
                avatar="/placeholder-avatar-3.jpg"
            ),
            category="Technology",
            status=Status.IMPLEMENTED,
            sentiment=Sentiment.POSITIVE,
            votes=32,
            voted_by=seed_voters(32),
            created_at=week_ago,
            updated_at=week_ago,
            tags=["Remote Work", "Productivity", "Communication"]
        ),
    ]


def default_users() -> List[User]:
    """Built-in accounts: one administrator and one regular user."""
    return [
        User(
            id="admin_1",
            name="Admin User",
            email="admin@company.com",
            department="Manufacturing",
            role=Role.ADMIN,
            password="admin123"
        ),
        User(
            id="user_1",
            name="John Doe",
            email="john.doe@company.com",
            department="Quality Control",
            role=Role.USER,
            password="user123"
        ),
    ]
