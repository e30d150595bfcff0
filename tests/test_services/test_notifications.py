"""
Tests for the notification dispatcher.
"""

import pytest

from src.models.enums import NotificationType
from src.services.notifications import NotificationDispatcher


@pytest.fixture
def dispatcher(store):
    return NotificationDispatcher(store)


def test_create_appends_unread_notification(dispatcher):
    notification = dispatcher.create(
        recipient="ann@company.com",
        notification_type=NotificationType.VOTE,
        title="New Vote",
        message="Someone voted",
        suggestion_id="s1"
    )

    assert notification.id.startswith("notif_")
    assert notification.read is False
    assert notification.user_id == "ann@company.com"
    assert dispatcher.unread_count("ann@company.com") == 1


def test_create_rejects_unknown_type(dispatcher):
    with pytest.raises(ValueError):
        dispatcher.create("ann@company.com", "reminder", "Title", "Message")


def test_list_for_is_newest_first_and_per_recipient(dispatcher, clock):
    dispatcher.create("ann@company.com", NotificationType.VOTE, "First", "m")
    clock.advance(minutes=5)
    dispatcher.create("bob@company.com", NotificationType.COMMENT, "Other", "m")
    clock.advance(minutes=5)
    dispatcher.create("ann@company.com", NotificationType.STATUS_CHANGE, "Second", "m")

    titles = [n.title for n in dispatcher.list_for("ann@company.com")]

    assert titles == ["Second", "First"]
    assert dispatcher.list_for("nobody@company.com") == []


def test_mark_read(dispatcher):
    notification = dispatcher.create("ann@company.com", NotificationType.MENTION, "Hi", "m")

    assert dispatcher.mark_read(notification.id) is True
    assert dispatcher.unread_count("ann@company.com") == 0
    assert dispatcher.mark_read("missing") is False


def test_mark_all_read_only_touches_recipient(dispatcher):
    dispatcher.create("ann@company.com", NotificationType.VOTE, "One", "m")
    dispatcher.create("ann@company.com", NotificationType.VOTE, "Two", "m")
    dispatcher.create("bob@company.com", NotificationType.VOTE, "Three", "m")

    assert dispatcher.mark_all_read("ann@company.com") == 2
    assert dispatcher.mark_all_read("ann@company.com") == 0
    assert dispatcher.unread_count("bob@company.com") == 1
