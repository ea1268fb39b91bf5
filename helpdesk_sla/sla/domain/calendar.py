"""
Business Calendar
=================

Calendar questions answered against a ``BusinessHoursConfig``:

- Is a date a holiday?
- Is an instant inside a business window?
- When does the next business window open?
- How many business hours lie between two instants?

Wall-clock times are resolved in the configured timezone; every elapsed
duration is measured in UTC so DST shifts never stretch or shrink a window.
All functions are pure and never read the current time.
"""

from datetime import date, datetime, time, timedelta, timezone
from typing import Iterable

from helpdesk_sla.config import MAX_CALENDAR_ITERATIONS
from helpdesk_sla.core.exceptions import ConfigurationError, ValidationException
from helpdesk_sla.shared.infrastructure.logging import get_logger
from helpdesk_sla.sla.domain.value_objects import BusinessHoursConfig, Holiday, Weekday

logger = get_logger(__name__)


def ensure_aware(instant: datetime, name: str = "instant") -> datetime:
    """Reject naive datetimes; the domain only deals in absolute instants."""
    if not isinstance(instant, datetime):
        raise ValidationException(
            f"{name} must be a datetime",
            {"field": name, "type": type(instant).__name__}
        )
    if instant.tzinfo is None or instant.utcoffset() is None:
        raise ValidationException(
            f"{name} must be timezone-aware",
            {"field": name, "value": instant.isoformat()}
        )
    return instant


def to_utc(instant: datetime) -> datetime:
    return instant.astimezone(timezone.utc)


def is_holiday(day: date, holidays: Iterable[Holiday]) -> bool:
    """True if any holiday blocks ``day`` (month/day for recurring, exact date otherwise)."""
    return any(holiday.matches(day) for holiday in holidays)


def is_working_day(day: date, config: BusinessHoursConfig) -> bool:
    return (
        Weekday(day.weekday()) in config.working_weekdays
        and not is_holiday(day, config.holidays)
    )


def _opening_instant(day: date, config: BusinessHoursConfig) -> datetime:
    return datetime.combine(day, config.start_time, tzinfo=config.tzinfo)


def _closing_instant(day: date, config: BusinessHoursConfig) -> datetime:
    # A closing time repeated by a DST fall-back resolves to its later occurrence
    closes = datetime.combine(day, config.end_time, tzinfo=config.tzinfo)
    repeated = closes.replace(fold=1)
    return repeated if to_utc(repeated) > to_utc(closes) else closes


def is_business_instant(instant: datetime, config: BusinessHoursConfig) -> bool:
    """True iff ``instant`` falls on a working, non-holiday day inside ``[start, end)``."""
    local = ensure_aware(instant).astimezone(config.tzinfo)
    day = local.date()
    if not is_working_day(day, config):
        return False
    moment = to_utc(local)
    return to_utc(_opening_instant(day, config)) <= moment < to_utc(_closing_instant(day, config))


def next_business_window_start(instant: datetime, config: BusinessHoursConfig) -> datetime:
    """
    Earliest instant at or after ``instant`` where a business window is open.

    An instant already inside a window is returned as-is (expressed in the
    business timezone). Otherwise the search walks forward one calendar day
    at a time, for at most ``MAX_CALENDAR_ITERATIONS`` days.

    Raises:
        ConfigurationError: no working day is reachable within the bound
    """
    if not config.working_weekdays:
        logger.warning("Business calendar has no working weekdays")
        raise ConfigurationError(
            "Business calendar has no working weekdays",
            {"timezone": config.timezone}
        )

    tz = config.tzinfo
    local = ensure_aware(instant).astimezone(tz)
    day = local.date()

    for _ in range(MAX_CALENDAR_ITERATIONS):
        if is_working_day(day, config):
            opens = _opening_instant(day, config)
            if to_utc(local) < to_utc(opens):
                return opens
            if to_utc(local) < to_utc(_closing_instant(day, config)):
                return local
        day += timedelta(days=1)
        local = datetime.combine(day, time.min, tzinfo=tz)

    logger.warning(
        "No business window reachable",
        extra={
            "from_instant": instant.isoformat(),
            "max_days": MAX_CALENDAR_ITERATIONS,
            "holiday_count": len(config.holidays),
        }
    )
    raise ConfigurationError(
        f"No business window within {MAX_CALENDAR_ITERATIONS} days of {instant.isoformat()}",
        {
            "from_instant": instant.isoformat(),
            "max_days": MAX_CALENDAR_ITERATIONS,
        }
    )


def window_end(instant: datetime, config: BusinessHoursConfig) -> datetime:
    """Closing instant of the window on the same local date as ``instant``."""
    local = ensure_aware(instant).astimezone(config.tzinfo)
    return _closing_instant(local.date(), config)


def hours_between(start: datetime, end: datetime) -> float:
    return (to_utc(end) - to_utc(start)).total_seconds() / 3600


def business_hours_between(start: datetime, end: datetime, config: BusinessHoursConfig) -> float:
    """
    Business hours elapsed in ``[start, end)``.

    Only time inside working-day windows counts; holidays and
    non-working weekdays contribute nothing. Returns 0.0 if ``end <= start``.
    """
    ensure_aware(start, "start")
    ensure_aware(end, "end")
    if end <= start:
        return 0.0

    tz = config.tzinfo
    day = start.astimezone(tz).date()
    last_day = end.astimezone(tz).date()
    total = timedelta(0)

    while day <= last_day:
        if is_working_day(day, config):
            opens = _opening_instant(day, config)
            closes = _closing_instant(day, config)
            lower = max(to_utc(start), to_utc(opens))
            upper = min(to_utc(end), to_utc(closes))
            if upper > lower:
                total += upper - lower
        day += timedelta(days=1)

    return total.total_seconds() / 3600
