"""
Structured logging helpers for consistent log formatting.
"""
import logging


def log_section_start(logger: logging.Logger, section_name: str) -> None:
    """
    Log the start of a processing section.

    Args:
        logger: Logger instance
        section_name: Name of the section being started
    """
    logger.info(f"Starting: {section_name}")


def log_section_end(logger: logging.Logger, section_name: str) -> None:
    """
    Log the end of a processing section.

    Args:
        logger: Logger instance
        section_name: Name of the section being ended
    """
    logger.info(f"Completed: {section_name}")


def log_upstream_failure(
    logger: logging.Logger,
    endpoint: str,
    identifier: str | None,
    exc: BaseException,
    *,
    level: int = logging.ERROR,
) -> None:
    """
    Log a failed upstream call with enough context to diagnose it.

    Args:
        logger: Logger instance
        endpoint: Upstream endpoint that was called
        identifier: Broadcaster id, category id or query involved (if any)
        exc: The exception raised by the call
        level: Log level, lowered for failures the caller tolerates
    """
    logger.log(
        level,
        "Upstream call failed: endpoint=%s id=%s error=%s: %s",
        endpoint,
        identifier or "-",
        type(exc).__name__,
        exc,
    )


def log_timeline_summary(
    logger: logging.Logger,
    category: str,
    broadcasters: int,
    segments_in: int,
    segments_out: int
) -> None:
    """
    Log timeslot aggregation summary.

    Args:
        logger: Logger instance
        category: Category key the timeline was built for
        broadcasters: Number of live broadcasters discovered
        segments_in: Segments fetched across all broadcasters
        segments_out: Segments left after normalization
    """
    logger.info(
        f"Timeline summary - Category: {category}, Broadcasters: {broadcasters}, "
        f"Segments: {segments_in} fetched, {segments_out} kept"
    )
