"""
ChatPulse dashboard server package.

Serves the Discord OAuth2 login flow, the guild/channel/message JSON API
and the static dashboard pages.
"""
from .app import create_app
from .server import DashboardServer

__version__ = "1.0.0"

__all__ = [
    'DashboardServer',
    'create_app',
]
