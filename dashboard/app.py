"""
FastAPI application factory for the dashboard.
"""
import logging
from pathlib import Path
from typing import Optional

import httpx
from fastapi import FastAPI, Request
from fastapi.responses import RedirectResponse
from fastapi.staticfiles import StaticFiles

from config import DashboardConfig
from discord_api import DiscordClient
from discord_oauth import LoginFlow
from sessions import SessionManager
from settings import LANDING_PATH
from .dependencies import NotAuthenticatedError
from .middleware import log_requests_middleware, session_middleware
from .endpoints import (
    auth_router,
    guilds_router,
    health_router,
    messages_router,
    pages_router,
)

logger = logging.getLogger(__name__)


async def _redirect_to_landing(request: Request, exc: NotAuthenticatedError):
    return RedirectResponse(LANDING_PATH, status_code=302)


def create_app(
    config: DashboardConfig,
    discord_client: Optional[DiscordClient] = None,
    session_manager: Optional[SessionManager] = None,
    token_transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """Build the dashboard application

    Args:
        config: Dashboard configuration
        discord_client: Discord REST client; built from config when omitted
        session_manager: Session manager; built from config when omitted
        token_transport: Optional httpx transport for the token endpoint (tests)
    """
    app = FastAPI(title="ChatPulse Dashboard", version="1.0.0")

    client = discord_client or DiscordClient(config)
    app.state.config = config
    app.state.discord_client = client
    app.state.session_manager = session_manager or SessionManager.from_config(config)
    app.state.login_flow = LoginFlow(config, client, transport=token_transport)

    # Last registered runs outermost: logging wraps the session layer
    app.middleware("http")(session_middleware)
    app.middleware("http")(log_requests_middleware)

    app.add_exception_handler(NotAuthenticatedError, _redirect_to_landing)

    app.include_router(health_router)
    app.include_router(auth_router)
    app.include_router(guilds_router)
    app.include_router(messages_router)
    app.include_router(pages_router)

    # Static files go last so every route above takes precedence
    static_dir = Path(config.static_dir)
    if static_dir.is_dir():
        app.mount("/", StaticFiles(directory=static_dir, html=True), name="static")
        logger.debug(f"Serving static files from {static_dir}")
    else:
        logger.warning(f"Static directory not found, serving API routes only: {static_dir}")

    logger.debug("FastAPI application initialized with all routers and middleware")
    return app
