"""Discord permission bitfield helpers

Discord serializes permissions as a decimal string of a 64-bit bitfield.
Python ints are arbitrary precision, so high bits are never truncated.
"""

from typing import Any

from settings import MANAGE_GUILD_PERMISSION


def parse_permissions(raw: Any) -> int:
    """Parse a permission bitfield, treating missing or malformed values as 0"""
    if raw is None or isinstance(raw, bool):
        return 0
    if isinstance(raw, int):
        return raw if raw >= 0 else 0
    try:
        value = int(str(raw).strip())
    except ValueError:
        return 0
    return value if value >= 0 else 0


def has_permission(raw: Any, flag: int) -> bool:
    return (parse_permissions(raw) & flag) != 0


def can_manage_guild(guild: dict) -> bool:
    """Whether the user holds "Manage Server" in this guild"""
    return has_permission(guild.get("permissions"), MANAGE_GUILD_PERMISSION)
