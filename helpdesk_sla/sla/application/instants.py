"""
Instant Normalization
=====================

Boundary adapter turning persistence-layer timestamp representations into
the single instant type the domain accepts: a timezone-aware ``datetime``.

Supported inputs:
- aware ``datetime``: returned unchanged
- naive ``datetime``: interpreted as UTC
- ``int``/``float``: epoch milliseconds
- mapping or object with ``seconds`` and ``nanoseconds`` (document-store timestamps)
- object exposing ``to_datetime()`` or ``toDate()``
- ISO-8601 string
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Mapping

from helpdesk_sla.core.exceptions import ValidationException

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def _from_datetime(value: datetime) -> datetime:
    if value.tzinfo is None or value.utcoffset() is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _from_seconds_nanos(seconds: Any, nanoseconds: Any) -> datetime:
    # timedelta keeps microsecond precision; sub-microsecond nanos are dropped
    return _EPOCH + timedelta(seconds=int(seconds), microseconds=int(nanoseconds) // 1000)


def to_instant(value: Any) -> datetime:
    """
    Normalize a timestamp-like value to an aware ``datetime``.

    Raises:
        ValidationException: value cannot be interpreted as an instant
    """
    if isinstance(value, datetime):
        return _from_datetime(value)

    if isinstance(value, bool):
        raise ValidationException("Boolean is not a timestamp", {"value": value})

    if isinstance(value, (int, float)):
        return _EPOCH + timedelta(milliseconds=value)

    if isinstance(value, str):
        try:
            return _from_datetime(datetime.fromisoformat(value.replace("Z", "+00:00")))
        except ValueError as e:
            raise ValidationException(
                f"Invalid ISO-8601 timestamp: {value!r}",
                {"value": value}
            ) from e

    if isinstance(value, Mapping):
        if "seconds" in value:
            return _from_seconds_nanos(value["seconds"], value.get("nanoseconds", 0))
        if "_seconds" in value:
            return _from_seconds_nanos(value["_seconds"], value.get("_nanoseconds", 0))

    for converter in ("to_datetime", "toDate"):
        method = getattr(value, converter, None)
        if callable(method):
            return to_instant(method())

    if hasattr(value, "seconds") and hasattr(value, "nanoseconds"):
        return _from_seconds_nanos(value.seconds, value.nanoseconds)

    raise ValidationException(
        f"Unsupported timestamp type: {type(value).__name__}",
        {"type": type(value).__name__}
    )
