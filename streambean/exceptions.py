"""
Error taxonomy

Every error the API surfaces derives from StreambeanError, which carries the
HTTP status and the machine-readable code rendered by the exception handler
in streambean.main.
"""
from typing import Any


class StreambeanError(Exception):
    """Base class for errors rendered as a standard error response"""
    status_code: int = 500
    code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, context: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.context = context


class UpstreamAuthFailure(StreambeanError):
    """Access token could not be acquired from the upstream platform"""
    code = "UPSTREAM_AUTH_FAILED"


class UpstreamUnavailable(StreambeanError):
    """A required upstream call failed"""
    code = "UPSTREAM_UNAVAILABLE"

    def __init__(self, message: str, endpoint: str, context: dict[str, Any] | None = None):
        super().__init__(message, {"endpoint": endpoint, **(context or {})})
        self.endpoint = endpoint


class PerBroadcasterFetchFailure(StreambeanError):
    """
    A single broadcaster's schedule lookup failed.

    Only raised inside the schedule fetcher, which converts it into an
    empty contribution.
    """
    code = "SCHEDULE_FETCH_FAILED"

    def __init__(self, broadcaster_id: str, reason: str):
        super().__init__(
            f"Schedule lookup failed for broadcaster {broadcaster_id}: {reason}",
            {"broadcaster_id": broadcaster_id},
        )
        self.broadcaster_id = broadcaster_id


class ValidationError(StreambeanError):
    """Missing or invalid input"""
    status_code = 400
    code = "VALIDATION_ERROR"


class UnknownCategory(ValidationError):
    """Category key is not in the configured category table"""
    code = "UNKNOWN_CATEGORY"

    def __init__(self, category: str):
        super().__init__(f"Invalid category: {category}", {"category": category})
        self.category = category


class ScheduleValidationError(ValidationError):
    """Segment timestamps are malformed"""
    code = "INVALID_SEGMENT"


class MalformedUpstreamRecord(ValidationError):
    """Upstream record is missing a field the service depends on"""
    status_code = 502
    code = "UPSTREAM_MALFORMED"


class NotFound(StreambeanError):
    """Referenced resource does not exist upstream"""
    status_code = 404
    code = "NOT_FOUND"


__all__ = [
    "StreambeanError",
    "UpstreamAuthFailure",
    "UpstreamUnavailable",
    "PerBroadcasterFetchFailure",
    "ValidationError",
    "UnknownCategory",
    "ScheduleValidationError",
    "MalformedUpstreamRecord",
    "NotFound",
]
