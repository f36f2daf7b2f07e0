"""
FastAPI middleware for sessions and request logging.
"""
import logging
import time
import uuid

from fastapi import Request

from utils import log_request_headers

logger = logging.getLogger(__name__)

# Paths worth an INFO line; static assets are logged at DEBUG only
_API_PREFIXES = ("/login", "/callback", "/logout", "/me", "/guilds", "/channels", "/messages", "/send-message")


async def session_middleware(request: Request, call_next):
    """Open the browser's session before the route runs and write its cookie after"""
    manager = request.app.state.session_manager
    await manager.sweep_expired()
    session = await manager.open(request.cookies.get(manager.cookie_name))
    request.state.session = session

    response = await call_next(request)

    manager.apply_cookie(response, session)
    return response


async def log_requests_middleware(request: Request, call_next):
    """Middleware for request logging and timing"""
    request_id = uuid.uuid4().hex[:8]
    log_request_headers(request_id, request.headers)

    start_time = time.time()
    response = await call_next(request)
    process_time = time.time() - start_time

    line = f"{request.method} {request.url.path} - {response.status_code} - {process_time:.3f}s"
    if request.url.path.startswith(_API_PREFIXES):
        logger.info(line)
    else:
        logger.debug(line)

    return response
