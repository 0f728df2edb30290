"""
In-memory repository adapter - Implements UserRepository protocol.

Dictionary-backed store for tests and local development. Mirrors the
PostgreSQL adapter's contract: unique email and username across all
users, verified-only login lookups, copies in and out.
"""

import threading
from dataclasses import replace

from src.domain.exceptions import DuplicateKeyError, NotFound
from src.domain.user import User


class InMemoryUserRepository:
    """Implements UserRepository protocol with a dict guarded by a lock."""

    def __init__(self) -> None:
        self._users: dict[str, User] = {}
        self._lock = threading.Lock()

    def register(self, user: User) -> None:
        with self._lock:
            for existing in self._users.values():
                if existing.email == user.email:
                    raise DuplicateKeyError("email")
                if existing.username == user.username:
                    raise DuplicateKeyError("username")
            self._users[user.id] = replace(user)

    def find_user_by_id(self, user_id: str) -> User:
        with self._lock:
            user = self._users.get(user_id)
            if user is None:
                raise NotFound("user not found")
            return replace(user)

    def find_verified_user_by_email(self, email: str) -> User:
        return self._find_verified(lambda u: u.email == email)

    def find_verified_user_by_username(self, username: str) -> User:
        return self._find_verified(lambda u: u.username == username)

    def update(self, user: User) -> None:
        with self._lock:
            if user.id not in self._users:
                raise NotFound("user not found")
            self._users[user.id] = replace(user)

    def _find_verified(self, predicate) -> User:
        with self._lock:
            for user in self._users.values():
                if user.verified_at is not None and predicate(user):
                    return replace(user)
        raise NotFound("user not found")
