"""
Application wiring.

Builds the record store, engines and services once and hands the same
instances to every caller (CLI commands, refresh loop, tests).
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional

import config.settings as settings
from src.engine.aggregation import LeaderboardEntry, UserAggregator
from src.engine.analytics import AnalyticsEngine, DashboardStats
from src.models.notification import Notification
from src.models.suggestion import Suggestion
from src.models.user import User
from src.services.auth import AuthService
from src.services.lifecycle import SuggestionService
from src.services.notifications import NotificationDispatcher
from src.store.backends import JsonDirectoryBackend, StorageBackend
from src.store.record_store import RecordStore
from src.utils.scheduler import PollingScheduler

logger = logging.getLogger(__name__)


@dataclass
class DashboardSnapshot:
    """Everything a dashboard refresh re-reads."""
    current_user: Optional[User]
    suggestions: List[Suggestion]
    stats: DashboardStats
    leaderboard: List[LeaderboardEntry]
    notifications: List[Notification] = field(default_factory=list)
    unread_notifications: int = 0


class SuggestionBoxApp:
    """
    Composition root of the suggestion box.

    Owns one RecordStore and wires:
    store -> aggregator -> analytics, notifications -> suggestions, auth
    """

    def __init__(
        self,
        backend: Optional[StorageBackend] = None,
        data_root: str = str(settings.DATA_ROOT),
        seed_defaults: bool = True,
        use_cache: bool = False,
        poll_interval: float = settings.POLL_INTERVAL_SECONDS
    ):
        """
        Initialize application.

        Args:
            backend: Storage backend (default: JSON files under data_root)
            data_root: Directory for the default JSON backend
            seed_defaults: Seed default suggestions and accounts into an empty store
            use_cache: Cache aggregated users until this process writes
                suggestions or users. Leave off when other processes share
                the data directory.
            poll_interval: Seconds between dashboard refreshes
        """
        logger.info("Initializing suggestion box components...")

        self.store = RecordStore(backend or JsonDirectoryBackend(data_root))
        self.store.open()
        self.store.initialize(seed_defaults=seed_defaults)

        self.aggregator = UserAggregator(self.store, use_cache=use_cache)
        self.analytics = AnalyticsEngine(self.store, self.aggregator)
        self.notifications = NotificationDispatcher(self.store)
        self.suggestions = SuggestionService(self.store, self.notifications)
        self.auth = AuthService(self.store, self.aggregator)

        self.poll_interval = poll_interval
        self._scheduler: Optional[PollingScheduler] = None

        logger.info("Suggestion box initialized successfully")

    def snapshot(self) -> DashboardSnapshot:
        """Re-read every dashboard figure from the store."""
        current_user = self.auth.current_user()
        notifications = []
        unread = 0
        if current_user is not None:
            notifications = self.notifications.list_for(current_user.email)
            unread = sum(1 for n in notifications if not n.read)

        return DashboardSnapshot(
            current_user=current_user,
            suggestions=self.suggestions.browse(),
            stats=self.analytics.dashboard_stats(current_user),
            leaderboard=self.aggregator.leaderboard(),
            notifications=notifications,
            unread_notifications=unread
        )

    def start_refresh(
        self,
        on_refresh: Callable[[DashboardSnapshot], None],
        timer_factory=None
    ) -> PollingScheduler:
        """
        Re-read the dashboard periodically and hand each snapshot to on_refresh.

        Returns:
            The running scheduler
        """
        self.stop_refresh()

        kwargs = {"timer_factory": timer_factory} if timer_factory is not None else {}
        self._scheduler = PollingScheduler(
            lambda: on_refresh(self.snapshot()),
            interval=self.poll_interval,
            **kwargs
        )
        self._scheduler.start()
        return self._scheduler

    def stop_refresh(self) -> None:
        if self._scheduler is not None:
            self._scheduler.stop()
            self._scheduler = None

    def close(self) -> None:
        self.stop_refresh()
        self.aggregator.close()
        self.store.close()

    def __enter__(self) -> "SuggestionBoxApp":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
