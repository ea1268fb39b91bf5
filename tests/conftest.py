"""Shared fixtures for SLA tests."""

from datetime import date

import pytest

from helpdesk_sla.sla.domain import BusinessHoursConfig, Holiday, SLASettings
from tests.factories import make_business_hours, make_settings


@pytest.fixture
def business_hours() -> BusinessHoursConfig:
    """09:00-17:00, Monday to Friday, America/Chicago, no holidays."""
    return make_business_hours()


@pytest.fixture
def christmas() -> Holiday:
    return Holiday(id="christmas", name="Christmas Day", date=date(2025, 12, 25), is_recurring=True)


@pytest.fixture
def company_event() -> Holiday:
    return Holiday(id="company-event", name="Company Event", date=date(2025, 7, 15))


@pytest.fixture
def settings() -> SLASettings:
    return make_settings()
