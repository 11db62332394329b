"""
Helper Utilities
Common helper functions
"""

from datetime import datetime, time
from typing import Optional
import uuid


def new_id() -> str:
    """
    Generate an opaque record identifier

    Returns:
        str: 32-character hex identifier
    """
    return uuid.uuid4().hex


def parse_clock_time(value: str) -> Optional[time]:
    """
    Parse an ``HH:MM`` clock time

    Args:
        value: Time string

    Returns:
        time: Parsed time or None if the value is not a valid clock time
    """
    try:
        return datetime.strptime(value.strip(), "%H:%M").time()
    except (ValueError, AttributeError):
        return None


def get_client_ip(request) -> str:
    """
    Get client IP address from request

    Args:
        request: FastAPI request object

    Returns:
        str: Client IP address
    """
    # Check for forwarded IP
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()

    if request.client:
        return request.client.host

    return "unknown"
