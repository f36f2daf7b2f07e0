"""
Endpoint routers for the dashboard server.
"""
from .auth import router as auth_router
from .guilds import router as guilds_router
from .health import router as health_router
from .messages import router as messages_router
from .pages import router as pages_router

__all__ = [
    'auth_router',
    'guilds_router',
    'health_router',
    'messages_router',
    'pages_router',
]
