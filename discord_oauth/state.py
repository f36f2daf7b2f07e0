"""Anti-CSRF state generation and comparison"""

import hmac
import secrets
from typing import Optional

# 256-bit state values
STATE_BYTES = 32


def create_state() -> str:
    """Generate a fresh unguessable state value"""
    return secrets.token_urlsafe(STATE_BYTES)


def states_match(received: Optional[str], stored: Optional[str]) -> bool:
    """Exact, constant-time equality of the received and stored state"""
    if not received or not stored:
        return False
    return hmac.compare_digest(received.encode("utf-8"), stored.encode("utf-8"))
