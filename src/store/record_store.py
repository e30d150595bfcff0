"""
Record Store - owner of every persisted entity.

Each collection is a JSON list stored under one backend key. Every write is
a whole-collection read-modify-write: read the list, change it in memory,
write it back. Singletons (settings, current session) are one JSON object
per key.
"""

import dataclasses
import json
import logging
from datetime import datetime
from typing import Any, Callable, Dict, Generic, List, Optional, Type, TypeVar

import config.settings as settings
from src.models.comment import Comment
from src.models.notification import Notification
from src.models.suggestion import Suggestion
from src.models.user import User
from src.models.user_settings import UserSettings
from src.store.backends import StorageBackend
from src.store.defaults import default_suggestions, default_users
from src.utils.ids import new_record_id
from src.utils.timeutils import to_timestamp, utc_now

logger = logging.getLogger(__name__)

T = TypeVar("T")

ChangeListener = Callable[[str], None]


class Collection(Generic[T]):
    """
    A keyed list of records of one model type.

    Records are matched on their `id` attribute.
    """

    def __init__(self, store: "RecordStore", key: str, model: Type[T], id_prefix: str):
        """
        Initialize collection.

        Args:
            store: Owning record store (backend access, clock, change feed)
            key: Backend key holding the JSON list
            model: Dataclass with from_dict() / to_dict()
            id_prefix: Prefix for generated ids
        """
        self.store = store
        self.key = key
        self.model = model
        self.id_prefix = id_prefix
        self._field_names = {f.name for f in dataclasses.fields(model)}

    def get_all(self) -> List[T]:
        """Return every record, in stored order."""
        raw = self.store.read_json(self.key)
        if not raw:
            return []
        return [self.model.from_dict(item) for item in raw]

    def get_by_id(self, record_id: str) -> Optional[T]:
        """Retrieve record by id. Returns None if not found."""
        for record in self.get_all():
            if record.id == record_id:
                return record
        return None

    def find(self, predicate: Callable[[T], bool]) -> List[T]:
        """Return the records matching predicate, in stored order."""
        return [record for record in self.get_all() if predicate(record)]

    def create(self, fields: Dict[str, Any]) -> T:
        """
        Append a new record.

        Args:
            fields: Model fields except id and timestamps

        Returns:
            The stored record, with a fresh id and created/updated timestamps

        Raises:
            TypeError / ValueError: If fields do not build a valid record
        """
        now = self.store.now()
        values = dict(fields)
        values["id"] = new_record_id(self.id_prefix, now)
        stamp = to_timestamp(now)
        if "created_at" in self._field_names:
            values["created_at"] = stamp
        if "updated_at" in self._field_names:
            values["updated_at"] = stamp

        # Build before reading so an invalid record never reaches storage
        record = self.model(**values)

        records = self.get_all()
        records.append(record)
        self._write(records)

        logger.debug(f"Created {self.id_prefix} {record.id}")
        return record

    def update(self, record_id: str, changes: Dict[str, Any]) -> Optional[T]:
        """
        Apply changes to one record.

        Args:
            record_id: Target record id
            changes: Field values to overwrite

        Returns:
            Updated record, or None if no record has this id
        """
        records = self.get_all()
        for index, record in enumerate(records):
            if record.id != record_id:
                continue

            values = dict(changes)
            values.pop("id", None)
            if "updated_at" in self._field_names:
                values["updated_at"] = self._updated_stamp(record)

            updated = dataclasses.replace(record, **values)
            records[index] = updated
            self._write(records)
            return updated

        logger.debug(f"Update skipped, {self.id_prefix} {record_id} not found")
        return None

    def delete(self, record_id: str) -> bool:
        """Remove one record. Returns False if no record has this id."""
        records = self.get_all()
        remaining = [record for record in records if record.id != record_id]
        if len(remaining) == len(records):
            return False
        self._write(remaining)
        logger.info(f"Deleted {self.id_prefix} {record_id}")
        return True

    def replace_all(self, records: List[T]) -> None:
        """Overwrite the whole collection."""
        self._write(list(records))

    def count(self) -> int:
        return len(self.get_all())

    def _updated_stamp(self, record: T) -> str:
        stamp = to_timestamp(self.store.now())
        created_at = getattr(record, "created_at", "")
        # Lexicographic order matches time order for the fixed timestamp format
        if created_at and stamp < created_at:
            return created_at
        return stamp

    def _write(self, records: List[T]) -> None:
        self.store.write_json(self.key, [record.to_dict() for record in records])


class SingletonDocument(Generic[T]):
    """One JSON object stored under a backend key, or absent."""

    def __init__(self, store: "RecordStore", key: str, model: Type[T]):
        self.store = store
        self.key = key
        self.model = model

    def get(self) -> Optional[T]:
        raw = self.store.read_json(self.key)
        if raw is None:
            return None
        return self.model.from_dict(raw)

    def set(self, value: T) -> T:
        self.store.write_json(self.key, value.to_dict())
        return value

    def update(self, changes: Dict[str, Any]) -> Optional[T]:
        """Apply changes to the stored object. Returns None if nothing is stored."""
        current = self.get()
        if current is None:
            return None
        return self.set(dataclasses.replace(current, **changes))

    def clear(self) -> None:
        self.store.remove(self.key)

    def exists(self) -> bool:
        return self.store.read_json(self.key) is not None


class RecordStore:
    """
    Owns all persisted collections.

    Components receive a RecordStore instead of reaching for module globals.
    Writes publish the touched key to subscribers, so readers can refresh or
    invalidate caches.
    """

    ALL_KEYS = (
        settings.SUGGESTIONS_KEY,
        settings.USERS_KEY,
        settings.CURRENT_USER_KEY,
        settings.SETTINGS_KEY,
        settings.VOTES_KEY,
        settings.COMMENTS_KEY,
        settings.NOTIFICATIONS_KEY,
    )

    def __init__(self, backend: StorageBackend, clock: Callable[[], datetime] = utc_now):
        """
        Initialize record store.

        Args:
            backend: Key-value backend; opened by open()
            clock: Returns the current aware UTC datetime
        """
        self.backend = backend
        self.clock = clock
        self._listeners: List[ChangeListener] = []

        self.suggestions: Collection[Suggestion] = Collection(
            self, settings.SUGGESTIONS_KEY, Suggestion, "suggestion"
        )
        self.users: Collection[User] = Collection(self, settings.USERS_KEY, User, "user")
        self.comments: Collection[Comment] = Collection(
            self, settings.COMMENTS_KEY, Comment, "comment"
        )
        self.notifications: Collection[Notification] = Collection(
            self, settings.NOTIFICATIONS_KEY, Notification, "notif"
        )
        self.settings: SingletonDocument[UserSettings] = SingletonDocument(
            self, settings.SETTINGS_KEY, UserSettings
        )
        self.session: SingletonDocument[User] = SingletonDocument(
            self, settings.CURRENT_USER_KEY, User
        )

    # Lifecycle

    def open(self) -> "RecordStore":
        self.backend.open()
        return self

    def close(self) -> None:
        self.backend.close()

    def __enter__(self) -> "RecordStore":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def now(self) -> datetime:
        return self.clock()

    # Raw document access

    def read_json(self, key: str) -> Any:
        text = self.backend.read(key)
        if text is None:
            return None
        return json.loads(text)

    def write_json(self, key: str, value: Any) -> None:
        self.backend.write(key, json.dumps(value, ensure_ascii=False))
        self._publish(key)

    def remove(self, key: str) -> None:
        self.backend.remove(key)
        self._publish(key)

    def has(self, key: str) -> bool:
        return self.backend.read(key) is not None

    # Change feed

    def subscribe(self, listener: ChangeListener) -> Callable[[], None]:
        """
        Register a listener called with the key of every write.

        Returns:
            Function that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _publish(self, key: str) -> None:
        for listener in list(self._listeners):
            listener(key)

    # Whole-store operations

    def get_settings(self) -> UserSettings:
        """Stored settings, or defaults when none are stored."""
        return self.settings.get() or UserSettings()

    def update_settings(self, changes: Dict[str, Any]) -> UserSettings:
        updated = dataclasses.replace(self.get_settings(), **changes)
        return self.settings.set(updated)

    def initialize(self, seed_defaults: bool = True) -> None:
        """
        Create any missing collection with its default content.

        Args:
            seed_defaults: If True, absent suggestion/user collections get the
                demo suggestions and default accounts; otherwise they start empty
        """
        now = self.now()

        if not self.has(settings.SUGGESTIONS_KEY):
            seeded = default_suggestions(now) if seed_defaults else []
            self.suggestions.replace_all(seeded)
            logger.info(f"Initialized suggestions with {len(seeded)} records")

        if not self.has(settings.USERS_KEY):
            seeded_users = default_users() if seed_defaults else []
            self.users.replace_all(seeded_users)
            logger.info(f"Initialized users with {len(seeded_users)} records")

        if not self.has(settings.COMMENTS_KEY):
            self.comments.replace_all([])

        if not self.has(settings.NOTIFICATIONS_KEY):
            self.notifications.replace_all([])

        if not self.has(settings.SETTINGS_KEY):
            self.settings.set(UserSettings())

    def full_reset(self) -> None:
        """Remove every key owned by the application."""
        for key in self.ALL_KEYS:
            self.remove(key)
        logger.warning("Full reset: all stored collections removed")
