"""Discord REST API v10 client

Two credentials are used and never interchanged:
- the user's OAuth2 access token (``Bearer``) for identity and guild-list reads
- the bot token (``Bot``) for channel and message reads and writes
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

from config import DashboardConfig
from settings import DISCORD_API_BASE, GUILD_TEXT_CHANNEL_TYPE
from .errors import RemoteAPIError, RemoteTransportError

logger = logging.getLogger(__name__)


def build_timeout(config: DashboardConfig) -> httpx.Timeout:
    """Explicit timeout from configuration

    connect_timeout bounds connection setup, request_timeout bounds each
    read, write and pool wait. httpx has no overall per-request deadline.
    """
    return httpx.Timeout(config.request_timeout, connect=config.connect_timeout)


class DiscordClient:
    """Stateless wrapper around the Discord REST endpoints used by the dashboard

    Every failed call raises RemoteAPIError. Nothing is retried here; retry
    policy belongs to the caller.
    """

    def __init__(
        self,
        config: DashboardConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        api_base: str = DISCORD_API_BASE,
    ):
        """
        Args:
            config: Dashboard configuration (bot token, timeouts)
            transport: Optional httpx transport, used by tests to fake Discord
            api_base: Discord REST base URL
        """
        self._bot_token = config.bot_token
        self._timeout = build_timeout(config)
        self._transport = transport
        self.api_base = api_base.rstrip("/")

    @staticmethod
    def _user_auth(access_token: str) -> Dict[str, str]:
        return {"Authorization": f"Bearer {access_token}"}

    def _bot_auth(self) -> Dict[str, str]:
        return {"Authorization": f"Bot {self._bot_token}"}

    async def _request(
        self,
        method: str,
        path: str,
        headers: Dict[str, str],
        action: str,
        params: Optional[Dict[str, Any]] = None,
        json_body: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """Issue one request and decode the JSON response

        Args:
            method: HTTP method
            path: Path relative to the API base
            headers: Authorization headers for the chosen credential
            action: Human readable action, used in error messages
            params: Optional query parameters
            json_body: Optional JSON body

        Returns:
            Decoded JSON payload

        Raises:
            RemoteAPIError: On a non-success status
            RemoteTransportError: When no response was received
        """
        url = f"{self.api_base}{path}"
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.request(method, url, headers=headers, params=params, json=json_body)
        except httpx.TimeoutException as e:
            raise RemoteTransportError(f"Failed to {action}: request timed out", body=str(e)) from e
        except httpx.RequestError as e:
            raise RemoteTransportError(f"Failed to {action}: {e}", body=str(e)) from e

        if not response.is_success:
            body = response.text
            logger.debug(f"{method} {path} -> {response.status_code}: {body}")
            raise RemoteAPIError(
                f"Failed to {action}: {response.status_code} {response.reason_phrase}",
                status_code=response.status_code,
                body=body,
            )

        try:
            return response.json()
        except ValueError as e:
            raise RemoteAPIError(
                f"Failed to {action}: invalid JSON in response",
                status_code=response.status_code,
                body=response.text,
            ) from e

    @staticmethod
    def _expect_list(payload: Any, action: str) -> List[Dict[str, Any]]:
        if not isinstance(payload, list):
            raise RemoteAPIError(f"Failed to {action}: unexpected response shape", status_code=200)
        return [item for item in payload if isinstance(item, dict)]

    async def get_user_info(self, access_token: str) -> Dict[str, Any]:
        """Fetch the current user with an OAuth2 access token"""
        return await self._request("GET", "/users/@me", self._user_auth(access_token), "fetch user info")

    async def get_user_guilds(self, access_token: str) -> List[Dict[str, Any]]:
        """Fetch the guilds the user belongs to, including their permission bitfield"""
        action = "fetch user guilds"
        payload = await self._request("GET", "/users/@me/guilds", self._user_auth(access_token), action)
        return self._expect_list(payload, action)

    async def get_bot_guilds(self) -> List[Dict[str, Any]]:
        """Fetch the guilds the bot is a member of"""
        action = "fetch bot guilds"
        payload = await self._request("GET", "/users/@me/guilds", self._bot_auth(), action)
        return self._expect_list(payload, action)

    async def get_channels(self, guild_id: str) -> List[Dict[str, Any]]:
        """Fetch a guild's text channels using the bot token

        Fails when the bot is not installed in the guild.
        """
        action = "fetch channels"
        payload = await self._request("GET", f"/guilds/{guild_id}/channels", self._bot_auth(), action)
        return [
            channel for channel in self._expect_list(payload, action)
            if channel.get("type") == GUILD_TEXT_CHANNEL_TYPE
        ]

    async def get_messages(self, channel_id: str, limit: int = 10) -> List[Dict[str, Any]]:
        """Fetch the most recent messages of a channel using the bot token"""
        action = "fetch messages"
        payload = await self._request(
            "GET",
            f"/channels/{channel_id}/messages",
            self._bot_auth(),
            action,
            params={"limit": limit},
        )
        return self._expect_list(payload, action)

    async def send_message(self, channel_id: str, content: str) -> Dict[str, Any]:
        """Post a text message to a channel as the bot"""
        return await self._request(
            "POST",
            f"/channels/{channel_id}/messages",
            self._bot_auth(),
            "send message",
            json_body={"content": content},
        )
