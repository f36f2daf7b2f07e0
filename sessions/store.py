"""Session store backends

Both backends hand out copies of the stored records, so two requests never
share a mutable session object.
"""

import asyncio
import json
import logging
import os
import platform
import re
import time
from pathlib import Path
from typing import Any, Dict, Optional

from .models import SESSION_FIELDS, SessionCommitError, SessionData, SessionDestroyError

logger = logging.getLogger(__name__)

# secrets.token_urlsafe alphabet
_SESSION_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]{16,128}$")

# Raised by SessionData.from_dict or json on a damaged record
_UNREADABLE_RECORD_ERRORS = (json.JSONDecodeError, KeyError, ValueError, TypeError, OSError)


def is_valid_session_id(session_id: str) -> bool:
    return bool(session_id) and _SESSION_ID_PATTERN.match(session_id) is not None


class SessionStore:
    """Interface shared by the session backends"""

    async def load(self, session_id: str) -> Optional[SessionData]:
        """Return a copy of the record, or None if missing or expired"""
        raise NotImplementedError

    async def save(self, data: SessionData) -> None:
        """Persist a record

        Raises:
            SessionCommitError: If the record could not be written
        """
        raise NotImplementedError

    async def take_field(self, session_id: str, key: str) -> Any:
        """Read a field of the stored record and clear it in one atomic step

        Returns None when the record is missing, expired or the field is unset.
        Only the named field is written back.

        Raises:
            SessionCommitError: If the cleared record could not be written
        """
        raise NotImplementedError

    async def delete(self, session_id: str) -> None:
        """Remove a record, missing records are ignored

        Raises:
            SessionDestroyError: If the record could not be removed
        """
        raise NotImplementedError

    async def purge_expired(self) -> int:
        """Drop expired records and return how many were removed"""
        raise NotImplementedError


def _check_field(key: str):
    if key not in SESSION_FIELDS:
        raise KeyError(f"Unknown session field: {key}")


class MemorySessionStore(SessionStore):
    """In-process session storage"""

    def __init__(self):
        self._sessions: Dict[str, SessionData] = {}
        self._lock = asyncio.Lock()

    def _live_record(self, session_id: str) -> Optional[SessionData]:
        data = self._sessions.get(session_id)
        if data is None:
            return None
        if data.is_expired():
            del self._sessions[session_id]
            logger.debug("[Session] Dropped expired session on load")
            return None
        return data

    async def load(self, session_id: str) -> Optional[SessionData]:
        async with self._lock:
            data = self._live_record(session_id)
            return data.copy() if data is not None else None

    async def save(self, data: SessionData) -> None:
        async with self._lock:
            self._sessions[data.session_id] = data.copy()

    async def take_field(self, session_id: str, key: str) -> Any:
        _check_field(key)
        async with self._lock:
            data = self._live_record(session_id)
            if data is None:
                return None
            value = getattr(data, key)
            setattr(data, key, None)
            return value

    async def delete(self, session_id: str) -> None:
        async with self._lock:
            self._sessions.pop(session_id, None)

    async def purge_expired(self) -> int:
        now = time.time()
        async with self._lock:
            expired = [sid for sid, data in self._sessions.items() if data.is_expired(now)]
            for sid in expired:
                del self._sessions[sid]
        return len(expired)

    def __len__(self) -> int:
        return len(self._sessions)


class FileSessionStore(SessionStore):
    """One JSON file per session with owner-only permissions

    File IO runs in a worker thread so the event loop is never blocked.
    """

    def __init__(self, session_dir: str):
        self.session_dir = Path(session_dir).expanduser()
        self._lock = asyncio.Lock()
        self._ensure_secure_directory()

    def _ensure_secure_directory(self):
        """Create the session directory with secure permissions"""
        if not self.session_dir.exists():
            self.session_dir.mkdir(parents=True, exist_ok=True)
            # Set directory permissions to 700 on Unix-like systems
            if platform.system() != "Windows":
                os.chmod(self.session_dir, 0o700)

    def _path_for(self, session_id: str) -> Path:
        if not is_valid_session_id(session_id):
            raise ValueError("Invalid session id")
        return self.session_dir / f"{session_id}.json"

    @staticmethod
    def _read_record(path: Path) -> Optional[SessionData]:
        if not path.exists():
            return None
        try:
            return SessionData.from_dict(json.loads(path.read_text()))
        except _UNREADABLE_RECORD_ERRORS as e:
            logger.warning(f"[Session] Discarding unreadable session file {path.name}: {e}")
            return None

    def _write_record(self, path: Path, data: SessionData):
        self._ensure_secure_directory()
        tmp_path = path.with_suffix(".tmp")
        tmp_path.write_text(json.dumps(data.to_dict(), indent=2))
        # Set file permissions to 600 on Unix-like systems
        if platform.system() != "Windows":
            os.chmod(tmp_path, 0o600)
        tmp_path.replace(path)

    def _load_live(self, path: Path) -> Optional[SessionData]:
        data = self._read_record(path)
        if data is not None and data.is_expired():
            path.unlink(missing_ok=True)
            logger.debug("[Session] Dropped expired session on load")
            return None
        return data

    def _take_sync(self, path: Path, key: str) -> Any:
        data = self._load_live(path)
        if data is None:
            return None
        value = getattr(data, key)
        if value is not None:
            setattr(data, key, None)
            self._write_record(path, data)
        return value

    def _purge_sync(self) -> int:
        removed = 0
        now = time.time()
        for path in self.session_dir.glob("*.json"):
            data = self._read_record(path)
            if data is not None and data.is_expired(now):
                path.unlink(missing_ok=True)
                removed += 1
        return removed

    async def load(self, session_id: str) -> Optional[SessionData]:
        if not is_valid_session_id(session_id):
            return None
        path = self._path_for(session_id)
        async with self._lock:
            return await asyncio.to_thread(self._load_live, path)

    async def save(self, data: SessionData) -> None:
        try:
            path = self._path_for(data.session_id)
            async with self._lock:
                await asyncio.to_thread(self._write_record, path, data.copy())
        except (OSError, ValueError) as e:
            raise SessionCommitError(f"Failed to save session: {e}") from e

    async def take_field(self, session_id: str, key: str) -> Any:
        _check_field(key)
        if not is_valid_session_id(session_id):
            return None
        path = self._path_for(session_id)
        try:
            async with self._lock:
                return await asyncio.to_thread(self._take_sync, path, key)
        except OSError as e:
            raise SessionCommitError(f"Failed to update session: {e}") from e

    async def delete(self, session_id: str) -> None:
        if not is_valid_session_id(session_id):
            return
        path = self._path_for(session_id)
        try:
            async with self._lock:
                await asyncio.to_thread(path.unlink, missing_ok=True)
        except OSError as e:
            raise SessionDestroyError(f"Failed to delete session: {e}") from e

    async def purge_expired(self) -> int:
        async with self._lock:
            return await asyncio.to_thread(self._purge_sync)
