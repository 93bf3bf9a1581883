"""
Date and Time utilities

Centralizes parsing and formatting of the RFC3339 timestamps exchanged with
Twitch so segment times are always timezone-aware UTC datetimes internally.
"""
from datetime import datetime, timezone
import logging

from streambean.exceptions import ScheduleValidationError

logger = logging.getLogger(__name__)


class DateFormatError(ScheduleValidationError, ValueError):
    """Raised when date format is invalid"""
    pass


def _normalize_iso8601_string(date_str: str) -> str:
    """Normalize ISO8601 string by replacing 'Z' with '+00:00'

    Args:
        date_str: ISO8601 datetime string

    Returns:
        Normalized string with explicit timezone offset
    """
    return date_str.replace('Z', '+00:00') if date_str.endswith('Z') else date_str


def parse_iso8601_to_utc(date_str: str) -> datetime:
    """
    Parse ISO8601 date string and convert to UTC datetime

    This is the single source of truth for date parsing across the application.

    Args:
        date_str: ISO8601 datetime string (e.g., '2025-10-09T00:00:00Z' or '2025-10-09T00:00:00+01:00')

    Returns:
        Timezone-aware datetime in UTC

    Raises:
        DateFormatError: If the date string format is invalid or carries no UTC offset
    """
    try:
        normalized = _normalize_iso8601_string(date_str)
        dt = datetime.fromisoformat(normalized)
    except (ValueError, AttributeError, TypeError) as e:
        raise DateFormatError(f"Invalid ISO8601 datetime format: '{date_str}'") from e

    if dt.tzinfo is None:
        raise DateFormatError(f"ISO8601 datetime has no UTC offset: '{date_str}'")
    return dt.astimezone(timezone.utc)


def format_utc(dt: datetime) -> str:
    """
    Format an aware datetime the way Twitch does ('2025-10-09T18:00:00Z')

    Args:
        dt: Timezone-aware datetime

    Returns:
        ISO8601 string in UTC with a 'Z' suffix
    """
    return dt.astimezone(timezone.utc).isoformat().replace('+00:00', 'Z')


def is_aware(dt: object) -> bool:
    """True if dt is a datetime carrying a UTC offset"""
    return isinstance(dt, datetime) and dt.tzinfo is not None and dt.utcoffset() is not None
