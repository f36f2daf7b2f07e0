"""
User identity, guild listing and channel listing endpoints.
"""
import logging

from fastapi import APIRouter, Depends

from config import DashboardConfig
from discord_api import DiscordClient, RemoteAPIError
from guilds import reconcile_guilds
from sessions import SessionHandle
from ..dependencies import get_config, get_discord_client, require_auth
from ..models import error_response, success_response

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/me")
async def me(
    session: SessionHandle = Depends(require_auth),
    client: DiscordClient = Depends(get_discord_client),
):
    """Live profile of the signed-in user (user token)"""
    try:
        user_info = await client.get_user_info(session.get("access_token"))
    except RemoteAPIError as e:
        logger.error(f"Error fetching user info: {e}")
        return error_response("Failed to fetch user info", details=str(e))
    return success_response(user=user_info)


@router.get("/guilds")
async def guilds(
    session: SessionHandle = Depends(require_auth),
    client: DiscordClient = Depends(get_discord_client),
    config: DashboardConfig = Depends(get_config),
):
    """Guilds the user manages and the bot is installed in"""
    try:
        listing = await reconcile_guilds(
            client,
            session.get("access_token"),
            max_concurrency=config.probe_concurrency,
        )
    except RemoteAPIError as e:
        logger.error(f"Error fetching guilds: {e}")
        return error_response("Failed to fetch guilds", details=str(e))

    if listing.reason is not None:
        return success_response(guilds=[], reason=listing.reason.value, debug=listing.message)
    return success_response(guilds=listing.guilds)


@router.get("/channels/{guild_id}")
async def channels(
    guild_id: str,
    session: SessionHandle = Depends(require_auth),
    client: DiscordClient = Depends(get_discord_client),
):
    """Text channels of a guild (bot token)"""
    try:
        text_channels = await client.get_channels(guild_id)
    except RemoteAPIError as e:
        logger.error(f"Error fetching channels: {e}")
        return error_response("Failed to fetch channels", details=str(e))
    return success_response(channels=text_channels)
