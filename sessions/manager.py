"""Opens session handles from cookies and writes the cookie back"""

import logging
import secrets
import time
from typing import Optional

from fastapi.responses import Response

from config import DashboardConfig
from settings import SESSION_COOKIE_NAME, SESSION_SWEEP_INTERVAL_SECONDS
from .cookies import sign_session_id, unsign_session_id
from .handle import SessionHandle
from .models import SessionData
from .store import FileSessionStore, MemorySessionStore, SessionStore

logger = logging.getLogger(__name__)

SESSION_ID_BYTES = 32


def create_session_store(config: DashboardConfig) -> SessionStore:
    """Build the configured session backend"""
    if config.session_backend == "file":
        logger.info(f"[Session] Using file session store at {config.session_dir}")
        return FileSessionStore(config.session_dir)
    logger.info("[Session] Using in-memory session store")
    return MemorySessionStore()


class SessionManager:
    """Binds a SessionStore to the signed session cookie"""

    def __init__(
        self,
        store: SessionStore,
        secret: str,
        ttl_seconds: int,
        cookie_secure: bool = False,
        cookie_name: str = SESSION_COOKIE_NAME,
        sweep_interval_seconds: int = SESSION_SWEEP_INTERVAL_SECONDS,
    ):
        self.store = store
        self._secret = secret
        self.ttl_seconds = ttl_seconds
        self.cookie_secure = cookie_secure
        self.cookie_name = cookie_name
        # Never sweep less often than records expire
        self.sweep_interval_seconds = max(1, min(sweep_interval_seconds, ttl_seconds))
        self._next_sweep_at = 0.0

    @classmethod
    def from_config(cls, config: DashboardConfig, store: Optional[SessionStore] = None) -> "SessionManager":
        return cls(
            store=store or create_session_store(config),
            secret=config.session_secret,
            ttl_seconds=config.session_ttl_seconds,
            cookie_secure=config.cookie_secure,
        )

    @staticmethod
    def new_session_id() -> str:
        return secrets.token_urlsafe(SESSION_ID_BYTES)

    async def open(self, cookie_value: Optional[str]) -> SessionHandle:
        """Resume the session named by the cookie, or start a fresh unsaved one"""
        session_id = unsign_session_id(cookie_value, self._secret)
        if session_id is not None:
            data = await self.store.load(session_id)
            if data is not None:
                return SessionHandle(self.store, data, persisted=True)
            logger.debug("[Session] Cookie refers to an unknown or expired session, starting a new one")
        elif cookie_value:
            logger.debug("[Session] Ignoring session cookie with a bad signature")

        data = SessionData.new(self.new_session_id(), self.ttl_seconds)
        return SessionHandle(self.store, data, persisted=False)

    async def sweep_expired(self, now: Optional[float] = None) -> int:
        """Purge expired records, at most once per sweep interval

        Returns:
            Number of records removed (0 when the sweep was skipped)
        """
        current = time.time() if now is None else now
        if current < self._next_sweep_at:
            return 0
        self._next_sweep_at = current + self.sweep_interval_seconds
        try:
            removed = await self.store.purge_expired()
        except OSError as e:
            logger.warning(f"[Session] Expired session sweep failed: {e}")
            return 0
        if removed:
            logger.info(f"[Session] Purged {removed} expired sessions")
        return removed

    def apply_cookie(self, response: Response, handle: SessionHandle) -> None:
        """Set, refresh or delete the session cookie on the response"""
        if handle.is_destroyed:
            response.delete_cookie(self.cookie_name, path="/")
            return
        if not handle.is_persisted:
            return
        max_age = max(int(handle.expires_at - time.time()), 0)
        response.set_cookie(
            self.cookie_name,
            sign_session_id(handle.session_id, self._secret),
            max_age=max_age,
            path="/",
            httponly=True,
            samesite="lax",
            secure=self.cookie_secure,
        )
