"""Discord REST API client package"""

from .api_client import DiscordClient, build_timeout
from .errors import RemoteAPIError, RemoteTransportError

__all__ = [
    "DiscordClient",
    "build_timeout",
    "RemoteAPIError",
    "RemoteTransportError",
]
