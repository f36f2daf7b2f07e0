"""Data models for server-side dashboard sessions"""

import time
from dataclasses import dataclass
from typing import Any, Dict, Optional

# Fields a request handler may read or write through a SessionHandle
SESSION_FIELDS = ("oauth_state", "access_token", "user")


class SessionCommitError(Exception):
    """Raised when a session record could not be persisted"""


class SessionDestroyError(Exception):
    """Raised when a session record could not be removed"""


@dataclass
class SessionData:
    """Server-side session record

    Attributes:
        session_id: Opaque identifier, delivered to the browser in a signed cookie
        created_at: Epoch seconds when the session was opened
        expires_at: Epoch seconds after which the record is discarded
        oauth_state: Anti-CSRF state, present only between login and one callback
        access_token: User OAuth2 access token
        user: Minimal identity projection {id, username, avatar, discriminator}
    """
    session_id: str
    created_at: int
    expires_at: int
    oauth_state: Optional[str] = None
    access_token: Optional[str] = None
    user: Optional[Dict[str, Any]] = None

    @classmethod
    def new(cls, session_id: str, ttl_seconds: int) -> "SessionData":
        now = int(time.time())
        return cls(session_id=session_id, created_at=now, expires_at=now + ttl_seconds)

    def is_expired(self, now: Optional[float] = None) -> bool:
        current = time.time() if now is None else now
        return current >= self.expires_at

    @property
    def is_authenticated(self) -> bool:
        """Authenticated only when both the token and the identity are present"""
        return bool(self.access_token) and bool(self.user)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "session_id": self.session_id,
            "created_at": self.created_at,
            "expires_at": self.expires_at,
            "oauth_state": self.oauth_state,
            "access_token": self.access_token,
            "user": dict(self.user) if self.user else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SessionData":
        user = data.get("user")
        return cls(
            session_id=data["session_id"],
            created_at=int(data.get("created_at", 0)),
            expires_at=int(data.get("expires_at", 0)),
            oauth_state=data.get("oauth_state"),
            access_token=data.get("access_token"),
            user=dict(user) if user else None,
        )

    def copy(self) -> "SessionData":
        return SessionData.from_dict(self.to_dict())
