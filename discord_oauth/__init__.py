"""Discord OAuth2 authorization-code login package"""

from .authorization import AuthorizationURLBuilder
from .login_flow import (
    REASON_CALLBACK_ERROR,
    REASON_INVALID_STATE,
    REASON_MISSING_CODE,
    REASON_NO_STATE,
    REASON_SESSION_EXPIRED,
    REASON_TOKEN_ERROR,
    REASON_USER_FETCH_ERROR,
    CallbackRejected,
    LoginFlow,
)
from .models import DiscordUser, LoginRedirect, TokenResponse
from .state import create_state, states_match
from .token_exchange import TokenExchangeError, exchange_code

__all__ = [
    # Authorization
    "AuthorizationURLBuilder",
    "create_state",
    "states_match",
    # Token Exchange
    "TokenExchangeError",
    "TokenResponse",
    "exchange_code",
    # Login flow
    "CallbackRejected",
    "DiscordUser",
    "LoginFlow",
    "LoginRedirect",
    "REASON_CALLBACK_ERROR",
    "REASON_INVALID_STATE",
    "REASON_MISSING_CODE",
    "REASON_NO_STATE",
    "REASON_SESSION_EXPIRED",
    "REASON_TOKEN_ERROR",
    "REASON_USER_FETCH_ERROR",
]
