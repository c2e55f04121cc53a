from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta


@dataclass(frozen=True, slots=True)
class AdminSession:
    session_id: str
    username: str
    login_time: datetime
    authenticated: bool = True

    def is_expired(self, now: datetime, ttl: timedelta) -> bool:
        # Absolute expiry from login; activity does not extend it.
        return now - self.login_time > ttl
