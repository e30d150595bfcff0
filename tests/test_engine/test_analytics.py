"""
Tests for analytics reports, dashboard figures and admin KPIs.
"""

import pytest

import config.settings as settings
from conftest import FIXED_NOW, make_suggestion
from src.engine.aggregation import UserAggregator
from src.engine.analytics import (
    AnalyticsEngine,
    SuggestionFilter,
    average_age_days,
    percent,
    round_half_up,
)
from src.models.enums import Sentiment, Status
from src.models.user import User


@pytest.fixture
def engine(store):
    store.suggestions.replace_all([
        make_suggestion("1", status=Status.IMPLEMENTED, days_ago=1, tags=["ai", "automation"],
                        sentiment=Sentiment.POSITIVE),
        make_suggestion("2", email="bob@company.com", name="Bob", department="Marketing",
                        days_ago=2, tags=["ai"], sentiment=Sentiment.NEGATIVE),
        make_suggestion("3", status=Status.APPROVED, days_ago=2, category="Safety"),
        make_suggestion("4", email="cara@company.com", name="Cara", status=Status.REVIEW_PENDING,
                        days_ago=10, category="Safety"),
        make_suggestion("5", status=Status.REJECTED, days_ago=45, category="Training"),
    ])
    return AnalyticsEngine(store, UserAggregator(store))


def test_round_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(0.5) == 1
    assert round_half_up(2.4) == 2


def test_percent():
    assert percent(1, 3) == 33
    assert percent(2, 3) == 67
    assert percent(1, 8) == 13
    assert percent(5, 0) == 0


def test_filter_normalizes_all():
    suggestion_filter = SuggestionFilter(category="all", status="all", department="all")

    assert suggestion_filter.category is None
    assert suggestion_filter.status is None
    assert suggestion_filter.department is None
    assert SuggestionFilter(time_window="2weeks").window_days == 30
    assert SuggestionFilter(status="approved").status is Status.APPROVED


def test_filter_rejects_unknown_status():
    with pytest.raises(ValueError):
        SuggestionFilter(status="archived")


def test_report_headline_figures(engine):
    report = engine.report()

    assert report.total_suggestions == 4
    assert report.active_users == 3
    assert report.implementation_rate == 25
    assert report.avg_response_time == "2.0 days"
    assert report.sentiment_breakdown == {"positive": 25, "neutral": 50, "negative": 25}


def test_report_tables(engine):
    report = engine.report()

    assert report.category_distribution == [
        {"category": "Technology", "count": 2, "percentage": 50},
        {"category": "Safety", "count": 2, "percentage": 50},
    ]
    assert report.series == [
        {"date": "2024-06-05", "submissions": 1},
        {"date": "2024-06-13", "submissions": 2},
        {"date": "2024-06-14", "submissions": 1},
    ]
    assert report.status_funnel == [
        {"stage": "Submitted", "count": 4},
        {"stage": "Reviewed", "count": 3},
        {"stage": "Implemented", "count": 1},
    ]
    assert report.top_tags == [{"tag": "ai", "count": 2}, {"tag": "automation", "count": 1}]


def test_department_engagement(engine):
    rows = {row["department"]: row for row in engine.report().department_engagement}

    assert rows["Logistics"] == {"department": "Logistics", "participation": 100, "submissions": 3}
    assert rows["Marketing"]["submissions"] == 1
    assert rows["Quality Control"] == {"department": "Quality Control", "participation": 0, "submissions": 0}


def test_report_filters(engine):
    assert engine.report(SuggestionFilter(time_window="7days")).total_suggestions == 3
    assert engine.report(SuggestionFilter(time_window="90days")).total_suggestions == 5
    assert engine.report(SuggestionFilter(department="Logistics")).total_suggestions == 3
    assert engine.report(SuggestionFilter(category="Safety")).total_suggestions == 2
    assert engine.report(SuggestionFilter(status=Status.APPROVED)).total_suggestions == 1


def test_empty_report(store):
    report = AnalyticsEngine(store, UserAggregator(store)).report()

    assert report.total_suggestions == 0
    assert report.implementation_rate == 0
    assert report.avg_response_time == "0.0 days"
    assert report.sentiment_breakdown == {"positive": 0, "neutral": 0, "negative": 0}
    assert report.category_distribution == []
    assert report.series == []
    assert report.top_tags == []


def test_report_to_dict_uses_camel_case(engine):
    data = engine.report().to_dict()

    assert data["totalSuggestions"] == 4
    assert data["avgResponseTime"] == "2.0 days"
    assert "departmentEngagement" in data
    assert set(engine.report().tables()) == {
        "category_distribution",
        "submissions_over_time",
        "status_funnel",
        "top_tags",
        "department_engagement",
    }


def test_dashboard_stats(engine):
    current_user = User(id="u1", name="Alice", email="alice@company.com", points=45)

    stats = engine.dashboard_stats(current_user)

    assert stats.total_suggestions == 5
    assert stats.active_contributors == 3
    assert stats.implementation_rate == 20
    assert stats.points_earned == 45
    assert engine.dashboard_stats().points_earned == 0


def test_admin_kpis(engine):
    kpis = engine.admin_kpis()

    assert kpis.review_pending_count == 1
    assert kpis.approved_this_week == 1
    assert kpis.implemented_this_month == 1
    # Pending (2 days) and review pending (10 days)
    assert kpis.avg_pending_age_days == 6


def test_rows_without_creation_time_are_skipped(engine):
    documents = [s.to_dict() for s in engine.store.suggestions.get_all()]
    undated = make_suggestion("6", status=Status.IMPLEMENTED).to_dict()
    del undated["createdAt"]
    malformed = make_suggestion("7", status=Status.APPROVED, created_at="last tuesday").to_dict()
    engine.store.write_json(settings.SUGGESTIONS_KEY, documents + [undated, malformed])

    report = engine.report(SuggestionFilter(time_window="1year"))
    assert report.total_suggestions == 5
    assert sum(day["submissions"] for day in report.series) == 5

    kpis = engine.admin_kpis()
    assert kpis.approved_this_week == 1
    assert kpis.implemented_this_month == 1

    # Still counted where no date is needed
    assert engine.dashboard_stats().total_suggestions == 7


def test_average_age_ignores_unparseable_dates():
    suggestions = [
        make_suggestion("1", days_ago=4),
        make_suggestion("2", created_at=""),
    ]

    assert average_age_days(suggestions, FIXED_NOW) == pytest.approx(4.0)
    assert average_age_days(suggestions[1:], FIXED_NOW) == 0.0
