"""Service for registration, login and the single current-session pointer."""

from __future__ import annotations

import logging

from techmock_app.constants.test_constants import CURRENT_USER_KEY, USERS_KEY
from techmock_app.core.collection_store import CollectionStore, RecordCollection
from techmock_app.core.models import User, UserRole, new_record_id

logger = logging.getLogger(__name__)


class IdentityService:
    """Manages the Users collection and who is currently logged in.

    Passwords are not part of the model and email uniqueness is not enforced:
    registering the same email twice creates two users, and login picks the
    first one in registration order.
    """

    def __init__(self, store: CollectionStore) -> None:
        self._store = store
        self._users = RecordCollection(store, USERS_KEY, User.from_dict)

    def register(self, name: str, email: str, role: UserRole | str = UserRole.STUDENT) -> User:
        """Create a user, persist it and make it the current session."""
        cleaned_name = (name or "").strip()
        cleaned_email = (email or "").strip()
        if not cleaned_name or not cleaned_email:
            raise ValueError("Name and Email are required")
        try:
            user_role = UserRole(role)
        except ValueError as exc:
            raise ValueError(f"Unknown role: {role!r}") from exc

        user = User(id=new_record_id(), name=cleaned_name, email=cleaned_email, role=user_role)
        users = self._users.load()
        users.append(user)
        self._users.save(users)
        self._set_session(user)
        logger.info("Registered %s user %s", user.role.value, user.id)
        return user

    def login(self, email: str) -> User | None:
        """Return the first user whose email matches case-insensitively, or None."""
        wanted = (email or "").strip()
        if not wanted:
            raise ValueError("Email is required")
        wanted = wanted.casefold()
        user = next((u for u in self._users.load() if u.email.casefold() == wanted), None)
        if user is not None:
            self._set_session(user)
        return user

    def logout(self) -> None:
        self._store.remove(CURRENT_USER_KEY)

    def current_user(self) -> User | None:
        data = self._store.read_value(CURRENT_USER_KEY)
        if data is None:
            return None
        try:
            return User.from_dict(data)
        except (KeyError, ValueError) as exc:
            logger.warning("Discarding unreadable session pointer: %r", exc)
            return None

    def list_users(self) -> list[User]:
        return self._users.load()

    def get_user(self, user_id: str) -> User | None:
        return next((u for u in self._users.load() if u.id == user_id), None)

    def _set_session(self, user: User) -> None:
        self._store.write_value(CURRENT_USER_KEY, user.to_dict())
