"""
FastAPI dependencies: shared services and the session gate.
"""
from fastapi import Request

from config import DashboardConfig
from discord_api import DiscordClient
from discord_oauth import LoginFlow
from sessions import SessionHandle


class NotAuthenticatedError(Exception):
    """Raised for protected routes without an authenticated session"""


def get_config(request: Request) -> DashboardConfig:
    return request.app.state.config


def get_discord_client(request: Request) -> DiscordClient:
    return request.app.state.discord_client


def get_login_flow(request: Request) -> LoginFlow:
    return request.app.state.login_flow


def get_session(request: Request) -> SessionHandle:
    """Session handle opened by the session middleware"""
    return request.state.session


def require_auth(request: Request) -> SessionHandle:
    """Session handle of a signed-in user

    Both the access token and the identity must be present.

    Raises:
        NotAuthenticatedError: Answered with a redirect to the landing page
    """
    session = get_session(request)
    if not session.is_authenticated:
        raise NotAuthenticatedError()
    return session
