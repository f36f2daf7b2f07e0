"""Guild access reconciliation

A guild shows up on the dashboard only when all three hold:
1. the user is a member (user-token guild list)
2. the user has Manage Server (permission bit 0x20)
3. the bot is installed, inferred from a successful bot-token channel fetch

When the result is empty the reason code says which stage removed everything.
"""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from discord_api import DiscordClient, RemoteAPIError, RemoteTransportError
from .permissions import can_manage_guild

logger = logging.getLogger(__name__)

DEFAULT_PROBE_CONCURRENCY = 5


class ReasonCode(str, Enum):
    NO_GUILDS = "NO_GUILDS"
    NO_MANAGE_PERMISSION = "NO_MANAGE_PERMISSION"
    BOT_NOT_INSTALLED = "BOT_NOT_INSTALLED"


REASON_MESSAGES = {
    ReasonCode.NO_GUILDS: "User is not a member of any Discord servers",
    ReasonCode.NO_MANAGE_PERMISSION: "You don't have 'Manage Server' permission in any of your servers",
    ReasonCode.BOT_NOT_INSTALLED: (
        "The bot is not installed in any of your servers. Please invite the bot to your server first."
    ),
}


@dataclass
class Included:
    """The bot answered for this guild"""
    guild: Dict[str, Any]
    channel_count: int = 0


@dataclass
class Excluded:
    """Discord refused the bot (401/403/404): the bot is not in the guild"""
    guild: Dict[str, Any]
    reason: str


@dataclass
class TransportFault:
    """The probe failed for a reason unrelated to membership"""
    guild: Dict[str, Any]
    error: RemoteAPIError


ProbeOutcome = Union[Included, Excluded, TransportFault]


@dataclass
class GuildListing:
    """Result of a reconciliation

    Attributes:
        guilds: Accessible guilds projected to {id, name, icon, owner}
        reason: Set only when guilds is empty
    """
    guilds: List[Dict[str, Any]]
    reason: Optional[ReasonCode] = None

    @property
    def message(self) -> Optional[str]:
        return REASON_MESSAGES.get(self.reason) if self.reason else None


def project_guild(guild: Dict[str, Any]) -> Dict[str, Any]:
    """Fields returned to the dashboard; permissions are used only for filtering"""
    return {
        "id": guild.get("id"),
        "name": guild.get("name"),
        "icon": guild.get("icon"),
        "owner": guild.get("owner", False),
    }


def _label(guild: Dict[str, Any]) -> str:
    return f"{guild.get('name')} ({guild.get('id')})"


async def probe_installation(client: DiscordClient, guild: Dict[str, Any]) -> ProbeOutcome:
    """Check whether the bot can list the guild's channels

    Never raises for Discord failures: they are folded into the outcome so one
    guild cannot abort the others.
    """
    try:
        channels = await client.get_channels(str(guild.get("id")))
    except RemoteTransportError as e:
        return TransportFault(guild, e)
    except RemoteAPIError as e:
        if e.is_access_denied:
            return Excluded(guild, f"HTTP {e.status_code}")
        return TransportFault(guild, e)
    return Included(guild, channel_count=len(channels))


async def _bounded_probe(
    semaphore: asyncio.Semaphore,
    client: DiscordClient,
    guild: Dict[str, Any],
) -> ProbeOutcome:
    async with semaphore:
        return await probe_installation(client, guild)


def _log_outcome(outcome: ProbeOutcome):
    if isinstance(outcome, Included):
        logger.info(f"[Guilds] Bot verified in: {_label(outcome.guild)} - {outcome.channel_count} text channels")
    elif isinstance(outcome, Excluded):
        logger.info(f"[Guilds] Bot NOT in: {_label(outcome.guild)} - {outcome.reason}")
    else:
        logger.warning(f"[Guilds] Probe failed for {_label(outcome.guild)}, excluding it: {outcome.error}")


async def reconcile_guilds(
    client: DiscordClient,
    access_token: str,
    max_concurrency: int = DEFAULT_PROBE_CONCURRENCY,
) -> GuildListing:
    """Compute the guilds the user can manage through the bot

    Args:
        client: Discord REST client
        access_token: The user's OAuth2 access token
        max_concurrency: Upper bound on simultaneous installation probes

    Returns:
        GuildListing preserving the order of the user's guild list

    Raises:
        RemoteAPIError: If the user's guild list could not be fetched
    """
    user_guilds = await client.get_user_guilds(access_token)
    logger.info(f"[Guilds] User is in {len(user_guilds)} guilds")

    if not user_guilds:
        logger.info("[Guilds] User is not in any guilds")
        return GuildListing(guilds=[], reason=ReasonCode.NO_GUILDS)

    manageable = []
    for guild in user_guilds:
        if can_manage_guild(guild):
            logger.debug(f"[Guilds] User has Manage Server in: {_label(guild)}")
            manageable.append(guild)
        else:
            logger.debug(f"[Guilds] User lacks Manage Server in: {_label(guild)}")
    logger.info(f"[Guilds] {len(manageable)} guilds with Manage Server permission")

    if not manageable:
        return GuildListing(guilds=[], reason=ReasonCode.NO_MANAGE_PERMISSION)

    semaphore = asyncio.Semaphore(max(1, max_concurrency))
    # gather keeps the input order
    outcomes = await asyncio.gather(*(_bounded_probe(semaphore, client, guild) for guild in manageable))

    accessible = []
    for outcome in outcomes:
        _log_outcome(outcome)
        if isinstance(outcome, Included):
            accessible.append(project_guild(outcome.guild))

    logger.info(f"[Guilds] Returning {len(accessible)} valid guilds")
    if not accessible:
        return GuildListing(guilds=[], reason=ReasonCode.BOT_NOT_INSTALLED)
    return GuildListing(guilds=accessible)
