"""
SLA Domain Layer
================

Domain layer for SLA deadline calculation.

Contains:
- Value Objects: Immutable settings and results (SLASettings, Holiday, SLAExpectation)
- Calendar: Business-window questions (holidays, window openings, elapsed business time)
- Advancer: Moving an instant forward on the business or 24/7 clock
- Calculator: Stateless entry point (SLAExpectationCalculator)

This layer has no dependencies on infrastructure - pure Python business logic.
"""

from helpdesk_sla.sla.domain.value_objects import (
    Weekday,
    MONDAY_TO_FRIDAY,
    PrioritySLA,
    Holiday,
    BusinessHoursConfig,
    SLASettings,
    SLAExpectation,
    DEFAULT_SLA_SETTINGS,
)
from helpdesk_sla.sla.domain.calendar import (
    is_holiday,
    is_business_instant,
    next_business_window_start,
    window_end,
    business_hours_between,
)
from helpdesk_sla.sla.domain.advancer import advance_business_hours, advance_24x7
from helpdesk_sla.sla.domain.calculator import SLAExpectationCalculator

__all__ = [
    # Value Objects
    "Weekday",
    "MONDAY_TO_FRIDAY",
    "PrioritySLA",
    "Holiday",
    "BusinessHoursConfig",
    "SLASettings",
    "SLAExpectation",
    "DEFAULT_SLA_SETTINGS",
    # Calendar
    "is_holiday",
    "is_business_instant",
    "next_business_window_start",
    "window_end",
    "business_hours_between",
    # Advancer
    "advance_business_hours",
    "advance_24x7",
    # Calculator
    "SLAExpectationCalculator",
]
