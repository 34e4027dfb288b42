"""In-memory record of users who completed a booking in this process."""

import logging
import time
from datetime import datetime, timezone

from amcmcp.schemas import UserSession

logger = logging.getLogger(__name__)


class SessionStore:
    """
    Sessions keyed by email, lost on restart.

    Only written at the end of a successful booking and read for diagnostics.
    Access stays on the one event loop, so no lock is taken.
    """

    def __init__(self) -> None:
        self._sessions: dict[str, UserSession] = {}

    def record(self, email: str) -> UserSession:
        """Store (or overwrite) the session for ``email``."""
        session = UserSession(
            user_id=f"user_{int(time.time() * 1000)}",
            email=email,
            last_login=datetime.now(timezone.utc),
            is_active=True,
        )
        self._sessions[email] = session
        logger.info(f"Stored session for user: {email}")
        return session

    def get(self, email: str) -> UserSession | None:
        return self._sessions.get(email)

    def active(self) -> list[UserSession]:
        return [s for s in self._sessions.values() if s.is_active]

    def clear(self) -> None:
        self._sessions.clear()

    def __len__(self) -> int:
        return len(self._sessions)
