"""
Landing page route.
"""
from pathlib import Path

from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse, HTMLResponse, RedirectResponse

from config import DashboardConfig
from sessions import SessionHandle
from settings import DASHBOARD_PATH
from ..dependencies import get_config, get_session

router = APIRouter()

FALLBACK_LANDING_PAGE = """<!DOCTYPE html>
<html>
<head><title>ChatPulse</title></head>
<body>
<h1>ChatPulse</h1>
<p><a href="/login">Login with Discord</a></p>
</body>
</html>
"""


@router.get("/")
async def landing(
    session: SessionHandle = Depends(get_session),
    config: DashboardConfig = Depends(get_config),
):
    if session.is_authenticated:
        return RedirectResponse(DASHBOARD_PATH, status_code=302)

    index_file = Path(config.static_dir) / "index.html"
    if index_file.is_file():
        return FileResponse(index_file)
    return HTMLResponse(FALLBACK_LANDING_PAGE)
