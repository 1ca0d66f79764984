"""Placeholder user registry.

Passwords are stored and compared as plain text and tokens are not signed or
verified anywhere. This exists to give the HTTP surface a register/login pair,
not to authenticate anyone.
"""

from __future__ import annotations

import logging

from sandbox_tasks.tasks.rwlock import ReadWriteLock

logger = logging.getLogger(__name__)

TOKEN_PREFIX = "fake-token-"


def issue_token(username: str) -> str:
    return f"{TOKEN_PREFIX}{username}"


class UserStore:
    def __init__(self) -> None:
        self._lock = ReadWriteLock()
        self._users: dict[str, str] = {}

    def __len__(self) -> int:
        with self._lock.read():
            return len(self._users)

    def register(self, username: str, password: str) -> bool:
        """Store the credentials. Returns False if the username is taken."""
        with self._lock.write():
            if username in self._users:
                return False
            self._users[username] = password

        logger.info("User registered", extra={"username": username})
        return True

    def login(self, username: str, password: str) -> bool:
        with self._lock.read():
            stored = self._users.get(username)
        return stored is not None and stored == password
