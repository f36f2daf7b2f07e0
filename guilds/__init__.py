"""Guild access reconciliation package"""

from .permissions import can_manage_guild, has_permission, parse_permissions
from .reconciliation import (
    REASON_MESSAGES,
    Excluded,
    GuildListing,
    Included,
    ProbeOutcome,
    ReasonCode,
    TransportFault,
    probe_installation,
    project_guild,
    reconcile_guilds,
)

__all__ = [
    "REASON_MESSAGES",
    "Excluded",
    "GuildListing",
    "Included",
    "ProbeOutcome",
    "ReasonCode",
    "TransportFault",
    "can_manage_guild",
    "has_permission",
    "parse_permissions",
    "probe_installation",
    "project_guild",
    "reconcile_guilds",
]
