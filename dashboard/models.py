"""
Pydantic models for dashboard request bodies and JSON envelopes.
"""
from typing import Any, Dict, Optional

from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, field_validator


class SendMessageRequest(BaseModel):
    """Body of POST /send-message"""
    model_config = ConfigDict(extra="ignore")

    channelId: Optional[str] = None
    message: Optional[str] = None

    @field_validator("channelId", "message", mode="before")
    @classmethod
    def _coerce_scalar(cls, value: Any) -> Optional[str]:
        # Snowflakes sometimes arrive as JSON numbers
        if isinstance(value, bool) or value is None:
            return None
        if isinstance(value, (int, float)):
            return str(value)
        if isinstance(value, str):
            return value
        return None

    @property
    def is_complete(self) -> bool:
        return bool(self.channelId) and bool(self.message)


def success_response(**payload: Any) -> Dict[str, Any]:
    """{"success": true, ...payload}"""
    return {"success": True, **payload}


def error_response(error: str, status_code: int = 500, details: Optional[str] = None) -> JSONResponse:
    """{"success": false, "error": ..., "details"?: ...} with the given status"""
    content: Dict[str, Any] = {"success": False, "error": error}
    if details is not None:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content)
