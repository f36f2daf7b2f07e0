"""Signed session cookie values

The cookie carries ``<session_id>.<signature>`` where the signature is an
HMAC-SHA256 of the session id keyed with the session secret.
"""

import base64
import hashlib
import hmac
from typing import Optional

from .store import is_valid_session_id


def _signature(session_id: str, secret: str) -> str:
    digest = hmac.new(secret.encode("utf-8"), session_id.encode("utf-8"), hashlib.sha256).digest()
    return base64.urlsafe_b64encode(digest).decode("utf-8").rstrip("=")


def sign_session_id(session_id: str, secret: str) -> str:
    """Build the cookie value for a session id"""
    return f"{session_id}.{_signature(session_id, secret)}"


def unsign_session_id(cookie_value: Optional[str], secret: str) -> Optional[str]:
    """Return the session id from a cookie value, or None if the signature is bad"""
    if not cookie_value or "." not in cookie_value:
        return None
    session_id, _, signature = cookie_value.rpartition(".")
    if not is_valid_session_id(session_id):
        return None
    if not hmac.compare_digest(signature, _signature(session_id, secret)):
        return None
    return session_id
