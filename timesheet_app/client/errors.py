"""
Client Errors
Failures surfaced by the auth client
"""

from typing import Optional


class ClientError(Exception):
    """Base class for auth client failures"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ClientError):
    """Form fields rejected before any request was made"""


class AuthenticationFailure(ClientError):
    """Login response carried no token"""


class HTTPError(ClientError):
    """Server answered with a non-2xx status"""

    def __init__(self, message: str, status_code: int, payload: Optional[dict] = None):
        super().__init__(message)
        self.status_code = status_code
        self.payload = payload or {}


class ParseError(ClientError):
    """Response body was not JSON"""


class NetworkError(ClientError):
    """Request could not complete"""
