"""In-memory user and session tables, each guarded by its own lock."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Dict, Optional


@dataclass(frozen=True)
class UserRecord:
    """Public commitment (y1, y2) registered for a user."""

    user_id: str
    y1: int
    y2: int


@dataclass(frozen=True)
class AuthSession:
    """Challenge issued to a user, waiting for a single response."""

    auth_id: str
    user_id: str
    r1: int
    r2: int
    c: int


class UserStore:
    """Registered users keyed by identity. Last write wins."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._users: Dict[str, UserRecord] = {}

    def put(self, record: UserRecord) -> Optional[UserRecord]:
        """Store ``record`` and return the record it replaced, if any."""

        with self._lock:
            previous = self._users.get(record.user_id)
            self._users[record.user_id] = record
        return previous

    def get(self, user_id: str) -> Optional[UserRecord]:
        with self._lock:
            return self._users.get(user_id)

    def __contains__(self, user_id: object) -> bool:
        with self._lock:
            return user_id in self._users

    def __len__(self) -> int:
        with self._lock:
            return len(self._users)


class SessionStore:
    """Pending authentication sessions keyed by auth id."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._sessions: Dict[str, AuthSession] = {}

    def add(self, session: AuthSession) -> None:
        with self._lock:
            if session.auth_id in self._sessions:
                raise KeyError(session.auth_id)
            self._sessions[session.auth_id] = session

    def pop(self, auth_id: str) -> AuthSession:
        """Remove and return a session. The lookup and the removal are atomic."""

        with self._lock:
            session = self._sessions.pop(auth_id, None)
        if session is None:
            raise KeyError(auth_id)
        return session

    def __contains__(self, auth_id: object) -> bool:
        with self._lock:
            return auth_id in self._sessions

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)


__all__ = ["AuthSession", "SessionStore", "UserRecord", "UserStore"]
