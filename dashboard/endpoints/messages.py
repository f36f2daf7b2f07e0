"""
Message read and relay endpoints (bot token).
"""
import json
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request
from pydantic import ValidationError

from discord_api import DiscordClient, RemoteAPIError
from sessions import SessionHandle
from settings import DEFAULT_MESSAGE_LIMIT, MAX_MESSAGE_LIMIT
from ..dependencies import get_discord_client, require_auth
from ..models import SendMessageRequest, error_response, success_response

logger = logging.getLogger(__name__)
router = APIRouter()

MISSING_FIELDS_ERROR = "channelId and message are required"


def parse_limit(raw: Optional[str]) -> int:
    """Message count from the query string, defaulting on anything unusable"""
    try:
        limit = int(raw) if raw is not None else DEFAULT_MESSAGE_LIMIT
    except ValueError:
        return DEFAULT_MESSAGE_LIMIT
    if limit <= 0:
        return DEFAULT_MESSAGE_LIMIT
    return min(limit, MAX_MESSAGE_LIMIT)


@router.get("/messages/{channel_id}")
async def messages(
    channel_id: str,
    limit: Optional[str] = None,
    session: SessionHandle = Depends(require_auth),
    client: DiscordClient = Depends(get_discord_client),
):
    """Most recent messages of a channel"""
    try:
        channel_messages = await client.get_messages(channel_id, parse_limit(limit))
    except RemoteAPIError as e:
        logger.error(f"Error fetching messages: {e}")
        return error_response("Failed to fetch messages", details=str(e))
    return success_response(messages=channel_messages)


@router.post("/send-message")
async def send_message(
    request: Request,
    session: SessionHandle = Depends(require_auth),
    client: DiscordClient = Depends(get_discord_client),
):
    """Relay a text message through the bot"""
    try:
        body = SendMessageRequest.model_validate(await request.json())
    except (json.JSONDecodeError, UnicodeDecodeError, ValidationError):
        return error_response(MISSING_FIELDS_ERROR, status_code=400)

    if not body.is_complete:
        return error_response(MISSING_FIELDS_ERROR, status_code=400)

    try:
        result = await client.send_message(body.channelId, body.message)
    except RemoteAPIError as e:
        logger.error(f"Error sending message: {e}")
        return error_response("Failed to send message", details=str(e))
    return success_response(messageId=result.get("id"))
