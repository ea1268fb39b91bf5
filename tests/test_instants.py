"""Tests for normalizing stored timestamps into aware datetimes."""

from datetime import datetime, timedelta, timezone

import pytest

from helpdesk_sla.core.exceptions import ValidationException
from helpdesk_sla.sla.application import to_instant
from tests.factories import chicago

NEW_YEAR_UTC = datetime(2025, 1, 1, tzinfo=timezone.utc)


class StoreTimestamp:
    """Mimics a document-store timestamp exposing seconds/nanoseconds."""

    def __init__(self, seconds, nanoseconds):
        self.seconds = seconds
        self.nanoseconds = nanoseconds


class ClientTimestamp:
    def __init__(self, value):
        self._value = value

    def toDate(self):
        return self._value


class ServerTimestamp:
    def __init__(self, value):
        self._value = value

    def to_datetime(self):
        return self._value


class TestToInstant:

    def test_aware_datetime_unchanged(self):
        instant = chicago(2025, 12, 23, 10)
        assert to_instant(instant) is instant

    def test_naive_datetime_is_utc(self):
        assert to_instant(datetime(2025, 1, 1)) == NEW_YEAR_UTC
        assert to_instant(datetime(2025, 1, 1)).tzinfo == timezone.utc

    def test_epoch_milliseconds(self):
        assert to_instant(1735689600000) == NEW_YEAR_UTC
        assert to_instant(1735689600500.0) == NEW_YEAR_UTC + timedelta(milliseconds=500)

    def test_iso_string_with_z(self):
        assert to_instant("2025-01-01T00:00:00Z") == NEW_YEAR_UTC

    def test_iso_string_with_offset(self):
        assert to_instant("2025-12-23T10:00:00-06:00") == chicago(2025, 12, 23, 10)

    def test_seconds_nanoseconds_mapping(self):
        assert to_instant({"seconds": 1735689600, "nanoseconds": 250_000_000}) == (
            NEW_YEAR_UTC + timedelta(milliseconds=250)
        )

    def test_serialized_mapping(self):
        assert to_instant({"_seconds": 1735689600, "_nanoseconds": 0}) == NEW_YEAR_UTC

    def test_seconds_nanoseconds_object(self):
        assert to_instant(StoreTimestamp(1735689600, 999)) == NEW_YEAR_UTC

    def test_to_date_method(self):
        assert to_instant(ClientTimestamp(NEW_YEAR_UTC)) == NEW_YEAR_UTC

    def test_to_datetime_method(self):
        assert to_instant(ServerTimestamp(datetime(2025, 1, 1))) == NEW_YEAR_UTC

    @pytest.mark.parametrize("value", [
        "not a date",
        True,
        None,
        {"millis": 1735689600000},
        object(),
    ])
    def test_unsupported_values(self, value):
        with pytest.raises(ValidationException):
            to_instant(value)
