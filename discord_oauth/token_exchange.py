"""OAuth token exchange functionality"""

import logging
from typing import Optional

import httpx

from config import DashboardConfig
from discord_api import build_timeout
from settings import DISCORD_TOKEN_URL
from .models import TokenResponse

logger = logging.getLogger(__name__)


class TokenExchangeError(Exception):
    """The token endpoint did not return an access token"""

    def __init__(self, message: str, status_code: Optional[int] = None, body: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


async def exchange_code(
    code: str,
    config: DashboardConfig,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    token_url: str = DISCORD_TOKEN_URL,
) -> TokenResponse:
    """Exchange an authorization code for an access token

    Args:
        code: Authorization code from the callback
        config: Dashboard configuration (client credentials, redirect URI, timeouts)
        transport: Optional httpx transport, used by tests to fake Discord
        token_url: Token endpoint

    Returns:
        TokenResponse with the user's access token

    Raises:
        TokenExchangeError: If the exchange fails for any reason
    """
    data = {
        "client_id": config.client_id,
        "client_secret": config.client_secret,
        "grant_type": "authorization_code",
        "code": code,
        "redirect_uri": config.redirect_uri,
    }

    logger.debug("[OAuth] Sending token exchange request...")
    try:
        async with httpx.AsyncClient(timeout=build_timeout(config), transport=transport) as client:
            response = await client.post(
                token_url,
                data=data,
                headers={"Content-Type": "application/x-www-form-urlencoded"},
            )
    except httpx.TimeoutException as e:
        raise TokenExchangeError(f"Token exchange timed out: {e}") from e
    except httpx.RequestError as e:
        raise TokenExchangeError(f"Token exchange request failed: {e}") from e

    logger.debug(f"[OAuth] Token exchange response status: {response.status_code}")

    if not response.is_success:
        raise TokenExchangeError(
            f"Token exchange failed: {response.status_code} - {response.text}",
            status_code=response.status_code,
            body=response.text,
        )

    try:
        payload = response.json()
        return TokenResponse.from_payload(payload)
    except (ValueError, KeyError, TypeError) as e:
        raise TokenExchangeError(
            "Token exchange response missing access_token",
            status_code=response.status_code,
            body=response.text,
        ) from e
