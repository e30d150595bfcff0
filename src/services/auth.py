"""
Registration, login and the current session.

Passwords are stored and compared in plaintext; this is a local demo
store, not an identity provider.
"""

import dataclasses
import logging
from typing import Any, Dict, Optional

import config.settings as settings
from src.engine.aggregation import UserAggregator
from src.models.enums import Role
from src.models.user import User
from src.services.errors import DuplicateRegistrationError, NoCurrentUserError, ValidationError
from src.store.record_store import RecordStore

logger = logging.getLogger(__name__)


class AuthService:
    """Manages stored accounts and the logged-in user snapshot."""

    def __init__(self, store: RecordStore, aggregator: UserAggregator):
        self.store = store
        self.aggregator = aggregator

    def register(
        self,
        name: str,
        email: str,
        password: str,
        confirm_password: str,
        department: str = "",
        role: Role = Role.USER
    ) -> User:
        """
        Create a stored account.

        Administrators are always placed in the default admin department.

        Returns:
            The stored user (with password)

        Raises:
            ValidationError: If the passwords differ or are too short
            DuplicateRegistrationError: If a stored user has this email,
                compared case-insensitively
        """
        role = Role(role)

        if password != confirm_password:
            raise ValidationError("Passwords do not match")
        if len(password) < settings.MIN_PASSWORD_LENGTH:
            raise ValidationError(
                f"Password must be at least {settings.MIN_PASSWORD_LENGTH} characters"
            )

        wanted = (email or "").lower()
        if any((u.email or "").lower() == wanted for u in self.store.users.get_all()):
            raise DuplicateRegistrationError("User already exists")

        if role is Role.ADMIN:
            department = settings.ADMIN_DEFAULT_DEPARTMENT

        user = self.store.users.create({
            "name": name,
            "email": email,
            "password": password,
            "department": department,
            "role": role,
        })
        logger.info(f"Registered {role.value} {email}")
        return user

    def login(self, email: str, password: str) -> Optional[User]:
        """
        Start a session for matching credentials.

        Matches email and password exactly against the effective users, so
        the session snapshot carries the aggregated points and counts. The
        users are always rescanned from storage, since another process may
        have registered the account.

        Returns:
            The session user without password, or None on bad credentials
        """
        for user in self.aggregator.effective_users(fresh=True):
            if user.email == email and user.password is not None and user.password == password:
                snapshot = user.without_password()
                self.store.session.set(snapshot)
                logger.info(f"Logged in {email}")
                return snapshot

        logger.warning(f"Failed login for {email}")
        return None

    def logout(self) -> None:
        self.store.session.clear()

    def current_user(self) -> Optional[User]:
        return self.store.session.get()

    def update_current_user(self, changes: Dict[str, Any]) -> User:
        """
        Apply changes to the session snapshot.

        Raises:
            NoCurrentUserError: If nobody is logged in
        """
        updated = self.store.session.update(changes)
        if updated is None:
            raise NoCurrentUserError("No current user")
        return updated

    def set_user_role(self, email: str, role: Role) -> Optional[User]:
        """Change a stored user's role. Returns None if no stored user has this email."""
        role = Role(role)
        users = self.store.users.get_all()
        for index, user in enumerate(users):
            if user.email == email:
                users[index] = dataclasses.replace(user, role=role)
                self.store.users.replace_all(users)
                logger.info(f"Role of {email} set to {role.value}")
                return users[index]
        return None

    def delete_all_users(self) -> int:
        """
        Remove every stored account and end the session.

        Returns:
            Number of accounts removed
        """
        removed = self.store.users.count()
        self.store.users.replace_all([])
        self.store.session.clear()
        logger.warning(f"Deleted {removed} stored users")
        return removed
