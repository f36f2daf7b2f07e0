"""SessionHandle: the capability request handlers use to touch their session"""

from typing import Any

from .models import SESSION_FIELDS, SessionData, SessionCommitError
from .store import SessionStore


class SessionHandle:
    """Per-request view of one session record

    Mutations through set()/clear() stay local until commit() succeeds.
    commit() and destroy() raise on failure and must be checked by callers.
    """

    def __init__(self, store: SessionStore, data: SessionData, persisted: bool = False):
        self._store = store
        self._data = data
        self._persisted = persisted
        self._dirty = False
        self._destroyed = False

    @property
    def session_id(self) -> str:
        return self._data.session_id

    @property
    def expires_at(self) -> int:
        return self._data.expires_at

    @property
    def is_persisted(self) -> bool:
        """Whether the record exists in the store (the browser needs a cookie)"""
        return self._persisted and not self._destroyed

    @property
    def is_destroyed(self) -> bool:
        return self._destroyed

    @property
    def is_dirty(self) -> bool:
        return self._dirty

    @property
    def is_authenticated(self) -> bool:
        return not self._destroyed and self._data.is_authenticated

    def get(self, key: str) -> Any:
        self._check_field(key)
        return getattr(self._data, key)

    def set(self, key: str, value: Any) -> None:
        self._check_field(key)
        setattr(self._data, key, value)
        self._dirty = True

    def clear(self, key: str) -> None:
        self.set(key, None)

    def pop(self, key: str) -> Any:
        """Read a field and clear it in one step"""
        value = self.get(key)
        if value is not None:
            self.clear(key)
        return value

    async def take(self, key: str) -> Any:
        """Read a field and clear it in the store before returning

        For a stored session the store's value wins over the local copy, so
        of two requests racing on the same record only one receives it.

        Raises:
            SessionCommitError: If the store could not write the cleared field
        """
        self._check_field(key)
        if not self.is_persisted:
            return self.pop(key)
        value = await self._store.take_field(self._data.session_id, key)
        setattr(self._data, key, None)
        return value

    async def commit(self) -> None:
        """Persist the record

        Raises:
            SessionCommitError: If the store rejected the write or the session was destroyed
        """
        if self._destroyed:
            raise SessionCommitError("Cannot commit a destroyed session")
        await self._store.save(self._data)
        self._persisted = True
        self._dirty = False

    async def destroy(self) -> None:
        """Remove the record from the store and wipe the local copy

        Raises:
            SessionDestroyError: If the store could not remove the record
        """
        for key in SESSION_FIELDS:
            setattr(self._data, key, None)
        self._destroyed = True
        if self._persisted:
            await self._store.delete(self._data.session_id)

    def snapshot(self) -> SessionData:
        """Copy of the current local state, for inspection"""
        return self._data.copy()

    @staticmethod
    def _check_field(key: str) -> None:
        if key not in SESSION_FIELDS:
            raise KeyError(f"Unknown session field: {key}")

