"""
Logging utilities: secret masking and request tracing.
"""
import logging
from typing import Mapping, Optional

logger = logging.getLogger(__name__)

SENSITIVE_HEADERS = ("authorization", "cookie", "set-cookie", "x-api-key")


def mask_secret(value: Optional[str], visible: int = 6) -> str:
    """Show only the first characters of a token, state or secret"""
    if not value:
        return "<none>"
    if len(value) <= visible:
        return "*" * len(value)
    return f"{value[:visible]}...({len(value)} chars)"


def log_request_headers(request_id: str, headers: Mapping[str, str]):
    """Log incoming headers at DEBUG, with credentials redacted"""
    if not logger.isEnabledFor(logging.DEBUG):
        return
    for header_name, header_value in headers.items():
        if header_name.lower() in SENSITIVE_HEADERS:
            logger.debug(f"[{request_id}] {header_name}: [REDACTED]")
        else:
            logger.debug(f"[{request_id}] {header_name}: {header_value}")
