"""Admin session handling.

Sessions live server-side, keyed by an opaque id carried in a cookie. A
session is valid for a fixed time after login no matter how active it is.
"""

from __future__ import annotations

import hmac
import logging
import secrets
import threading
from collections.abc import Callable
from datetime import datetime, timedelta, timezone

from livetrack.domain.models import AdminSession

logger = logging.getLogger(__name__)

SESSION_TTL = timedelta(hours=24)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _same(a: str, b: str) -> bool:
    return hmac.compare_digest(a.encode("utf-8"), b.encode("utf-8"))


class AccessGate:
    def __init__(
        self,
        *,
        username: str,
        password: str,
        ttl: timedelta = SESSION_TTL,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._username = username
        self._password = password
        self._ttl = ttl
        self._clock = clock
        self._lock = threading.Lock()
        self._sessions: dict[str, AdminSession] = {}

    @property
    def configured(self) -> bool:
        return bool(self._username and self._password)

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    def login(self, username: str, password: str) -> AdminSession | None:
        """Start a session if the credentials match, else return None."""

        if not self.configured:
            return None
        # Evaluate both comparisons so timing does not reveal which one failed.
        user_ok = _same(username, self._username)
        pass_ok = _same(password, self._password)
        if not (user_ok and pass_ok):
            logger.warning("Rejected admin login for %r", username)
            return None

        self.purge_expired()
        session = AdminSession(
            session_id=secrets.token_urlsafe(32),
            username=username,
            login_time=self._clock(),
        )
        with self._lock:
            self._sessions[session.session_id] = session
        logger.info("Admin %s logged in", username)
        return session

    def authenticate(self, session_id: str | None) -> AdminSession | None:
        """Return the live session for `session_id`, or None.

        Expired sessions are dropped on lookup.
        """

        if not session_id:
            return None
        now = self._clock()
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                return None
            if not session.authenticated or session.is_expired(now, self._ttl):
                del self._sessions[session_id]
                return None
            return session

    def logout(self, session_id: str | None) -> None:
        if not session_id:
            return
        with self._lock:
            session = self._sessions.pop(session_id, None)
        if session is not None:
            logger.info("Admin %s logged out", session.username)

    def purge_expired(self) -> int:
        now = self._clock()
        with self._lock:
            expired = [
                sid for sid, s in self._sessions.items() if s.is_expired(now, self._ttl)
            ]
            for sid in expired:
                del self._sessions[sid]
        return len(expired)
