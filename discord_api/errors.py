"""Typed errors raised by the Discord REST client"""

from typing import Optional


class RemoteAPIError(Exception):
    """Discord answered with a non-success status

    Attributes:
        status_code: HTTP status returned by Discord, None for transport failures
        body: Raw response body (or the transport error text)
    """

    def __init__(self, message: str, status_code: Optional[int] = None, body: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.body = body

    @property
    def is_access_denied(self) -> bool:
        """401/403/404: the credential cannot see the resource"""
        return self.status_code in (401, 403, 404)


class RemoteTransportError(RemoteAPIError):
    """The request never produced an HTTP response (network error, timeout)"""

    def __init__(self, message: str, body: str = ""):
        super().__init__(message, status_code=None, body=body)
