"""Server-side session storage for the dashboard"""

from .cookies import sign_session_id, unsign_session_id
from .handle import SessionHandle
from .manager import SessionManager, create_session_store
from .models import SESSION_FIELDS, SessionCommitError, SessionData, SessionDestroyError
from .store import FileSessionStore, MemorySessionStore, SessionStore

__all__ = [
    "SESSION_FIELDS",
    "SessionData",
    "SessionCommitError",
    "SessionDestroyError",
    "SessionHandle",
    "SessionManager",
    "SessionStore",
    "MemorySessionStore",
    "FileSessionStore",
    "create_session_store",
    "sign_session_id",
    "unsign_session_id",
]
