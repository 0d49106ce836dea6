"""
Core Utilities.

Shared utility functions used across the backend.
All modules should import utilities from this module.
"""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """
    Return current UTC time as timezone-naive datetime.

    All datetime values in the application are timezone-naive
    and assumed to be UTC.

    Returns:
        Current UTC time with tzinfo stripped
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)


def truncate(text: str, limit: int) -> str:
    """
    Shorten text for list and header display.

    Text shorter than ``limit`` is returned unchanged. Longer text is cut to
    ``limit - 2`` characters, stripped, and suffixed with an ellipsis.
    """
    if len(text) < limit:
        return text
    return text[: limit - 2].strip() + "..."
