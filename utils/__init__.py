"""Shared utilities package for the ChatPulse dashboard"""

from .logging_utils import SENSITIVE_HEADERS, log_request_headers, mask_secret

__all__ = [
    "SENSITIVE_HEADERS",
    "log_request_headers",
    "mask_secret",
]
