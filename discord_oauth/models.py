"""Data models for the Discord OAuth2 login flow"""

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass
class TokenResponse:
    """Token endpoint response

    Attributes:
        access_token: Bearer token representing the user
        token_type: Usually "Bearer"
        expires_in: Lifetime in seconds reported by Discord
        scope: Granted scopes, space separated
        refresh_token: Returned by Discord but not used (no refresh support)
    """
    access_token: str
    token_type: str = "Bearer"
    expires_in: Optional[int] = None
    scope: str = ""
    refresh_token: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "TokenResponse":
        return cls(
            access_token=payload["access_token"],
            token_type=payload.get("token_type", "Bearer"),
            expires_in=payload.get("expires_in"),
            scope=payload.get("scope", ""),
            refresh_token=payload.get("refresh_token"),
        )


@dataclass
class DiscordUser:
    """Minimal identity projection kept in the session"""
    id: str
    username: str
    avatar: Optional[str] = None
    discriminator: Optional[str] = None

    @classmethod
    def from_api(cls, payload: Dict[str, Any]) -> "DiscordUser":
        return cls(
            id=str(payload["id"]),
            username=payload.get("username", ""),
            avatar=payload.get("avatar"),
            discriminator=payload.get("discriminator"),
        )

    def to_session(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "username": self.username,
            "avatar": self.avatar,
            "discriminator": self.discriminator,
        }


@dataclass
class LoginRedirect:
    """Where initiate_login sends the browser

    Attributes:
        location: Provider authorization URL, or the dashboard for signed-in users
        state_issued: False when the session was already authenticated
    """
    location: str
    state_issued: bool
