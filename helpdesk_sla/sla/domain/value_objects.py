"""
SLA Value Objects
==================

Immutable value objects for SLA domain.

Value objects are defined by their attributes rather than an identity.
They are immutable and can be freely shared. An ``SLASettings`` instance is
the snapshot handed to every calculation; nothing in the domain layer
caches or mutates it.
"""

from dataclasses import dataclass
from datetime import date, datetime, time
from enum import IntEnum
from typing import Any, Dict, FrozenSet, Mapping, Optional, Tuple
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from helpdesk_sla.config import PriorityLevel, VALID_PRIORITIES
from helpdesk_sla.core.exceptions import InvalidPriorityError


class Weekday(IntEnum):
    """Day of week, numbered like ``date.weekday()``."""
    MONDAY = 0
    TUESDAY = 1
    WEDNESDAY = 2
    THURSDAY = 3
    FRIDAY = 4
    SATURDAY = 5
    SUNDAY = 6

    @classmethod
    def parse(cls, value: Any) -> "Weekday":
        """Accept a Weekday, an int, a full English name or a 3-letter abbreviation."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str) and not value.strip().isdigit():
            key = value.strip().upper()
            for member in cls:
                if member.name == key or member.name[:3] == key:
                    return member
            raise ValueError(f"Unknown weekday: {value!r}")
        return cls(int(value))


MONDAY_TO_FRIDAY = frozenset({
    Weekday.MONDAY, Weekday.TUESDAY, Weekday.WEDNESDAY,
    Weekday.THURSDAY, Weekday.FRIDAY
})


class PrioritySLA(BaseModel):
    """Response/resolution targets for a single priority level."""
    model_config = ConfigDict(frozen=True)

    response_time_hours: float = Field(ge=0, allow_inf_nan=False, description="Hours until first response is due")
    resolution_time_hours: float = Field(ge=0, allow_inf_nan=False, description="Hours until resolution is due")
    business_hours_only: bool = Field(default=True, description="Count only business hours")
    enabled: bool = Field(default=True, description="Track SLA for this priority")


class Holiday(BaseModel):
    """
    A day excluded from business hours.

    Recurring holidays block the same month/day every year; one-time
    holidays block only their exact date.
    """
    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    name: str
    date: date
    is_recurring: bool = False
    description: Optional[str] = None

    def matches(self, day: date) -> bool:
        if self.is_recurring:
            return (self.date.month, self.date.day) == (day.month, day.day)
        return self.date == day


class BusinessHoursConfig(BaseModel):
    """
    Business calendar: daily window, working weekdays, timezone and holidays.

    The window is half-open, ``[start_time, end_time)``, in local time of
    ``timezone``.
    """
    model_config = ConfigDict(frozen=True)

    start_time: time = Field(default=time(9, 0), description="Window opens (local time)")
    end_time: time = Field(default=time(17, 0), description="Window closes (local time)")
    working_weekdays: FrozenSet[Weekday] = Field(default=MONDAY_TO_FRIDAY)
    timezone: str = Field(default="UTC", description="IANA timezone identifier")
    holidays: Tuple[Holiday, ...] = Field(default=())

    @field_validator("working_weekdays", mode="before")
    @classmethod
    def parse_weekdays(cls, v: Any) -> Any:
        if isinstance(v, (list, tuple, set, frozenset)):
            return frozenset(Weekday.parse(item) for item in v)
        return v

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown timezone: {v!r}") from e
        return v

    @model_validator(mode="after")
    def validate_window(self) -> "BusinessHoursConfig":
        if self.start_time.tzinfo is not None or self.end_time.tzinfo is not None:
            raise ValueError("start_time/end_time must not carry a timezone; use 'timezone'")
        if self.start_time >= self.end_time:
            raise ValueError("start_time must be before end_time")

        seen = set()
        for holiday in self.holidays:
            if holiday.id in seen:
                raise ValueError(f"Duplicate holiday id: {holiday.id!r}")
            seen.add(holiday.id)
        return self

    @property
    def tzinfo(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)


class SLASettings(BaseModel):
    """
    SLA settings snapshot: per-priority targets plus one shared calendar.

    This is a value object - immutable and defined by its attributes.
    """
    model_config = ConfigDict(frozen=True)

    priorities: Dict[str, PrioritySLA] = Field(
        default_factory=dict,
        description="SLA targets by priority level"
    )
    business_hours: BusinessHoursConfig = Field(default_factory=BusinessHoursConfig)

    @field_validator("priorities", mode="before")
    @classmethod
    def normalize_priority_keys(cls, v: Any) -> Any:
        """Lower-case priority keys and reject unknown levels."""
        if not isinstance(v, Mapping):
            return v
        normalized = {}
        for key, value in v.items():
            level = str(key).lower()
            if level not in VALID_PRIORITIES:
                raise ValueError(f"Unknown priority level: {key!r}")
            normalized[level] = value
        return normalized

    def get_priority(self, priority: str) -> PrioritySLA:
        """
        Look up the targets for a priority (case-insensitive).

        Raises:
            InvalidPriorityError: if the priority is not configured
        """
        sla = self.priorities.get(str(priority).lower())
        if sla is None:
            raise InvalidPriorityError(priority, self.priorities.keys())
        return sla

    @classmethod
    def from_document(cls, document: Mapping[str, Any]) -> "SLASettings":
        """
        Build settings from either the native shape or the admin-tool document.

        The admin-tool document is flat and camelCase::

            {"urgent": {"responseTimeHours": 1, "resolutionTimeHours": 4,
                        "businessHoursOnly": false, "enabled": true},
             ...,
             "businessHours": {"start": "09:00", "end": "17:00",
                               "days": [1, 2, 3, 4, 5],
                               "timezone": "America/Chicago",
                               "holidays": [{"id": "xmas", "name": "Christmas",
                                             "date": "2025-12-25",
                                             "isRecurring": true}]}}

        In that shape ``days`` counts from 0 = Sunday.
        """
        if "priorities" in document or "business_hours" in document:
            return cls.model_validate(dict(document))

        priorities = {
            key: _priority_from_document(value)
            for key, value in document.items()
            if str(key).lower() in VALID_PRIORITIES
        }
        hours = document.get("businessHours") or {}
        business_hours: Dict[str, Any] = {}
        if "start" in hours:
            business_hours["start_time"] = hours["start"]
        if "end" in hours:
            business_hours["end_time"] = hours["end"]
        if "days" in hours:
            # Sunday-based (0 = Sunday) to Monday-based numbering
            business_hours["working_weekdays"] = [(int(d) - 1) % 7 for d in hours["days"]]
        if "timezone" in hours:
            business_hours["timezone"] = hours["timezone"]
        business_hours["holidays"] = [
            {
                "id": item["id"],
                "name": item.get("name", item["id"]),
                "date": item["date"],
                "is_recurring": item.get("isRecurring", False),
                "description": item.get("description"),
            }
            for item in hours.get("holidays") or []
        ]
        return cls(priorities=priorities, business_hours=business_hours)


def _priority_from_document(data: Mapping[str, Any]) -> Dict[str, Any]:
    return {
        "response_time_hours": data["responseTimeHours"],
        "resolution_time_hours": data["resolutionTimeHours"],
        "business_hours_only": data.get("businessHoursOnly", True),
        "enabled": data.get("enabled", True),
    }


@dataclass(frozen=True)
class SLAExpectation:
    """
    Immutable result of an SLA calculation.

    Built fresh per call; no identity. ``resolution_expected_by`` is not
    guaranteed to be later than ``response_expected_by``.
    """
    response_expected_by: datetime
    resolution_expected_by: datetime
    business_hours_only: bool


DEFAULT_SLA_SETTINGS = SLASettings(
    priorities={
        PriorityLevel.URGENT: PrioritySLA(
            response_time_hours=1, resolution_time_hours=4, business_hours_only=False
        ),
        PriorityLevel.HIGH: PrioritySLA(
            response_time_hours=4, resolution_time_hours=8, business_hours_only=False
        ),
        PriorityLevel.MEDIUM: PrioritySLA(
            response_time_hours=8, resolution_time_hours=24, business_hours_only=True
        ),
        PriorityLevel.LOW: PrioritySLA(
            response_time_hours=24, resolution_time_hours=72, business_hours_only=True
        ),
    },
    business_hours=BusinessHoursConfig(
        start_time=time(9, 0),
        end_time=time(17, 0),
        working_weekdays=MONDAY_TO_FRIDAY,
        timezone="America/Chicago",
    ),
)
