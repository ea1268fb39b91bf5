"""
SLA Application Services
=========================

Application services orchestrate business logic and coordinate between
domain calculations and configuration providers.

Following SOLID principles:
- Single Responsibility: Each service has one clear purpose
- Dependency Inversion: Depend on abstractions (settings provider), not concrete implementations
"""

from abc import ABC, abstractmethod
from datetime import datetime, timedelta, tzinfo
from html import escape
from typing import Optional

from helpdesk_sla.shared.infrastructure.logging import get_logger, log_latency
from helpdesk_sla.sla.application.dto import ExpectationText, SLAExpectationResponse
from helpdesk_sla.sla.domain import (
    BusinessHoursConfig,
    SLAExpectationCalculator,
    SLASettings,
)

logger = get_logger(__name__)


# ========== Settings Provider Interface (Dependency Inversion) ==========

class ISLASettingsProvider(ABC):
    """Interface for SLA settings access."""

    @abstractmethod
    def get_settings(self) -> SLASettings:
        """Get the current SLA settings snapshot."""


# ========== Message Formatting ==========

def _format_clock(moment: datetime) -> str:
    return moment.strftime("%I:%M %p").lstrip("0")


def _format_day(moment: datetime) -> str:
    return f"{moment:%A, %B} {moment.day}"


def _format_hours(hours: float, business_hours_only: bool = False) -> str:
    unit = "business hour" if business_hours_only else "hour"
    return f"1 {unit}" if hours == 1 else f"{hours:g} {unit}s"


def format_expectation_message(
    deadline: datetime,
    hours: float,
    business_hours_only: bool,
    now: datetime,
    tz: tzinfo
) -> str:
    """
    Render a deadline as customer-facing text.

    Examples:
        "within 2 business hours (today by 12:00 PM)"
        "within 4 hours (tomorrow (Friday, December 26) by 9:00 AM)"
        "within 8 business hours (by 5:00 PM on Monday, December 29)"

    ``today``/``tomorrow`` are judged against ``now`` in ``tz``.
    """
    local_deadline = deadline.astimezone(tz)
    local_today = now.astimezone(tz).date()
    clock = _format_clock(local_deadline)

    if local_deadline.date() == local_today:
        timeframe = f"today by {clock}"
    elif local_deadline.date() == local_today + timedelta(days=1):
        timeframe = f"tomorrow ({_format_day(local_deadline)}) by {clock}"
    else:
        timeframe = f"by {clock} on {_format_day(local_deadline)}"

    return f"within {_format_hours(hours, business_hours_only)} ({timeframe})"


def _business_hours_note(business_hours: BusinessHoursConfig) -> str:
    note = (
        f"{business_hours.start_time:%H:%M}-{business_hours.end_time:%H:%M}, "
        f"{business_hours.timezone}"
    )
    holiday_count = len(business_hours.holidays)
    if holiday_count:
        plural = "" if holiday_count == 1 else "s"
        note += f", excluding {holiday_count} configured holiday{plural}"
    return note


# ========== Application Services ==========

class SLAExpectationService:
    """
    Service for SLA expectations shown to customers and agents.

    Fetches one settings snapshot per call and hands it to the pure
    calculator; the wall clock is never consulted.
    """

    def __init__(self, settings_provider: ISLASettingsProvider):
        self._settings_provider = settings_provider

    def get_expectation(
        self,
        priority: str,
        submitted_at: datetime,
        now: Optional[datetime] = None
    ) -> SLAExpectationResponse:
        """
        Calculate deadlines plus display messages for a ticket.

        Args:
            priority: Ticket priority
            submitted_at: Timezone-aware submission instant
            now: Reference instant for message wording (defaults to submitted_at)

        Returns:
            SLAExpectationResponse (``tracked=False`` when SLA is disabled)
        """
        settings = self._settings_provider.get_settings()
        reference = now or submitted_at
        normalized = priority.lower()

        with log_latency(logger, "sla_expectation", priority=normalized):
            expectation = SLAExpectationCalculator.calculate(priority, submitted_at, settings)

        if expectation is None:
            return SLAExpectationResponse(
                priority=normalized,
                tracked=False,
                submitted_at=submitted_at,
            )

        sla = settings.get_priority(priority)
        tz = settings.business_hours.tzinfo
        return SLAExpectationResponse(
            priority=normalized,
            tracked=True,
            submitted_at=submitted_at,
            response_expected_by=expectation.response_expected_by,
            resolution_expected_by=expectation.resolution_expected_by,
            response_message=format_expectation_message(
                expectation.response_expected_by, sla.response_time_hours,
                expectation.business_hours_only, reference, tz
            ),
            resolution_message=format_expectation_message(
                expectation.resolution_expected_by, sla.resolution_time_hours,
                expectation.business_hours_only, reference, tz
            ),
            business_hours_only=expectation.business_hours_only,
        )

    def get_expectation_text(
        self,
        priority: str,
        submitted_at: datetime,
        now: Optional[datetime] = None
    ) -> ExpectationText:
        """Render the expectation snippet included in ticket confirmation emails."""
        return generate_expectation_text(
            priority, submitted_at, self._settings_provider.get_settings(), now
        )


def generate_expectation_text(
    priority: str,
    submitted_at: datetime,
    settings: SLASettings,
    now: Optional[datetime] = None
) -> ExpectationText:
    """
    Build plain-text and HTML expectation snippets for emails.

    Both snippets are empty strings when SLA tracking is disabled for the
    priority. Business-hours snippets mention the window, timezone and
    number of configured holidays.
    """
    expectation = SLAExpectationCalculator.calculate(priority, submitted_at, settings)
    if expectation is None:
        return ExpectationText(plain_text="", html_text="")

    reference = now or submitted_at
    sla = settings.get_priority(priority)
    business_hours = settings.business_hours
    tz = business_hours.tzinfo

    response_message = format_expectation_message(
        expectation.response_expected_by, sla.response_time_hours,
        expectation.business_hours_only, reference, tz
    )
    resolution_message = format_expectation_message(
        expectation.resolution_expected_by, sla.resolution_time_hours,
        expectation.business_hours_only, reference, tz
    )

    note = _business_hours_note(business_hours) if expectation.business_hours_only else ""
    plain_note = f" (calculated using business hours: {note})" if note else ""

    plain_text = (
        "\nService Level Expectations:\n"
        f"• Initial response: {response_message}\n"
        f"• Resolution target: {resolution_message}{plain_note}\n"
    )

    html_note = ""
    if note:
        html_note = (
            '<p style="margin: 10px 0 0 0; font-size: 12px; color: #666;">'
            f"<em>Times calculated using business hours: {escape(note)}</em></p>"
        )
    html_text = (
        '<div style="background-color: #e3f2fd; padding: 15px; border-radius: 5px; '
        'margin: 15px 0; border-left: 4px solid #1976d2;">'
        '<h4 style="margin: 0 0 10px 0; color: #1976d2;">Service Level Expectations</h4>'
        '<ul style="margin: 0; padding-left: 20px;">'
        f"<li><strong>Initial response:</strong> {escape(response_message)}</li>"
        f"<li><strong>Resolution target:</strong> {escape(resolution_message)}</li>"
        "</ul>"
        f"{html_note}"
        "</div>"
    )

    return ExpectationText(plain_text=plain_text, html_text=html_text)
