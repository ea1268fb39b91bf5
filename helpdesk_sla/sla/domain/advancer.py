"""
Deadline Advancer
=================

Moves an instant forward by a number of hours, either counting only
business time (spilling over window by window) or on a plain 24/7 clock.
"""

from datetime import datetime, timedelta

from helpdesk_sla.config import MAX_CALENDAR_ITERATIONS
from helpdesk_sla.core.exceptions import ConfigurationError, ValidationException
from helpdesk_sla.shared.infrastructure.logging import get_logger
from helpdesk_sla.sla.domain.calendar import (
    ensure_aware,
    next_business_window_start,
    to_utc,
    window_end,
)
from helpdesk_sla.sla.domain.value_objects import BusinessHoursConfig

logger = get_logger(__name__)

# Smallest step past a window's close; the close itself is already outside [start, end).
_TICK = timedelta(microseconds=1)


def _duration(hours: float) -> timedelta:
    if hours < 0:
        raise ValidationException(
            "hours must be non-negative",
            {"hours": hours}
        )
    try:
        return timedelta(hours=hours)
    except (OverflowError, ValueError) as e:
        raise ValidationException(
            "hours must be a finite, representable duration",
            {"hours": hours}
        ) from e


def advance_business_hours(
    start: datetime,
    hours: float,
    config: BusinessHoursConfig
) -> datetime:
    """
    Instant at which ``hours`` business hours have elapsed since ``start``.

    A start outside business time is first snapped to the next window
    opening. When the remaining duration does not fit in the current
    window, the rest carries over to the next valid window, which is
    re-resolved each time so weekends and multi-day holiday blocks are
    skipped.

    Args:
        start: Timezone-aware starting instant
        hours: Non-negative business-hour duration
        config: Business calendar

    Returns:
        Deadline expressed in the business timezone

    Raises:
        ConfigurationError: the calendar runs out of reachable windows
        ValidationException: naive ``start``, or negative or non-finite ``hours``
    """
    ensure_aware(start, "start")
    remaining = _duration(hours)
    cursor = next_business_window_start(start, config)

    for windows_spanned in range(1, MAX_CALENDAR_ITERATIONS + 1):
        closes = window_end(cursor, config)
        capacity = to_utc(closes) - to_utc(cursor)

        if remaining <= capacity:
            deadline = (to_utc(cursor) + remaining).astimezone(config.tzinfo)
            logger.debug(
                "Business-hours deadline resolved",
                extra={
                    "start": start.isoformat(),
                    "hours": hours,
                    "deadline": deadline.isoformat(),
                    "windows_spanned": windows_spanned,
                }
            )
            return deadline

        remaining -= capacity
        cursor = next_business_window_start(to_utc(closes) + _TICK, config)

    logger.warning(
        "Business-hours advance exceeded window limit",
        extra={"start": start.isoformat(), "hours": hours, "max_windows": MAX_CALENDAR_ITERATIONS}
    )
    raise ConfigurationError(
        f"Cannot fit {hours} business hours into {MAX_CALENDAR_ITERATIONS} business windows",
        {"start": start.isoformat(), "hours": hours, "max_windows": MAX_CALENDAR_ITERATIONS}
    )


def advance_24x7(start: datetime, hours: float) -> datetime:
    """``start`` plus ``hours`` of elapsed time, ignoring any calendar."""
    ensure_aware(start, "start")
    duration = _duration(hours)
    try:
        return (to_utc(start) + duration).astimezone(start.tzinfo)
    except OverflowError as e:
        raise ValidationException(
            f"Deadline {hours} hours after {start.isoformat()} is out of range",
            {"start": start.isoformat(), "hours": hours}
        ) from e
