"""Tests for SLA application services and message formatting."""

from datetime import timezone

import pytest

from helpdesk_sla.core.exceptions import ConfigurationError, InvalidPriorityError
from helpdesk_sla.sla.application import (
    SLAExpectationService,
    format_expectation_message,
    generate_expectation_text,
)
from helpdesk_sla.sla.domain import PrioritySLA
from helpdesk_sla.sla.infrastructure import StaticSLASettingsProvider
from tests.factories import CHICAGO, chicago, make_business_hours, make_settings


class TestFormatExpectationMessage:

    def test_today(self):
        message = format_expectation_message(
            chicago(2025, 12, 23, 12), 2, True, chicago(2025, 12, 23, 10), CHICAGO
        )
        assert message == "within 2 business hours (today by 12:00 PM)"

    def test_tomorrow(self):
        message = format_expectation_message(
            chicago(2025, 12, 24, 9), 4, False, chicago(2025, 12, 23, 10), CHICAGO
        )
        assert message == "within 4 hours (tomorrow (Wednesday, December 24) by 9:00 AM)"

    def test_later_date(self):
        message = format_expectation_message(
            chicago(2025, 12, 29, 17), 8, True, chicago(2025, 12, 23, 10), CHICAGO
        )
        assert message == "within 8 business hours (by 5:00 PM on Monday, December 29)"

    def test_single_hour(self):
        message = format_expectation_message(
            chicago(2025, 12, 23, 11), 1, False, chicago(2025, 12, 23, 10), CHICAGO
        )
        assert message.startswith("within 1 hour (")

    def test_single_business_hour(self):
        message = format_expectation_message(
            chicago(2025, 12, 23, 11), 1, True, chicago(2025, 12, 23, 10), CHICAGO
        )
        assert message == "within 1 business hour (today by 11:00 AM)"

    def test_fractional_hours(self):
        message = format_expectation_message(
            chicago(2025, 12, 23, 11, 30), 1.5, True, chicago(2025, 12, 23, 10), CHICAGO
        )
        assert message == "within 1.5 business hours (today by 11:30 AM)"

    def test_today_judged_in_business_timezone(self):
        # 03:00 UTC on the 24th is still the evening of the 23rd in Chicago
        now = chicago(2025, 12, 23, 21).astimezone(timezone.utc)
        message = format_expectation_message(chicago(2025, 12, 23, 22), 1, False, now, CHICAGO)

        assert "today by 10:00 PM" in message


class TestGenerateExpectationText:

    def test_business_hours_snippet(self, christmas):
        settings = make_settings([christmas])

        text = generate_expectation_text("urgent", chicago(2025, 12, 23, 10), settings)

        assert text.plain_text == (
            "\nService Level Expectations:\n"
            "• Initial response: within 2 business hours (today by 12:00 PM)\n"
            "• Resolution target: within 4 business hours (today by 2:00 PM)"
            " (calculated using business hours: 09:00-17:00, America/Chicago,"
            " excluding 1 configured holiday)\n"
        )
        assert "Service Level Expectations" in text.html_text
        assert "excluding 1 configured holiday" in text.html_text
        assert not text.is_empty

    def test_spans_holiday(self, christmas):
        settings = make_settings([christmas])

        text = generate_expectation_text("low", chicago(2025, 12, 23, 10), settings)

        assert "Initial response: within 24 business hours (by 10:00 AM on Monday, December 29)" in text.plain_text

    def test_plural_holidays(self, christmas, company_event):
        settings = make_settings([christmas, company_event])

        text = generate_expectation_text("urgent", chicago(2025, 12, 23, 10), settings)

        assert "excluding 2 configured holidays" in text.plain_text

    def test_24x7_snippet_has_no_business_hours_note(self):
        settings = make_settings(
            urgent=PrioritySLA(response_time_hours=2, resolution_time_hours=4, business_hours_only=False)
        )

        text = generate_expectation_text("urgent", chicago(2025, 12, 20, 10), settings)

        assert "within 2 hours (today by 12:00 PM)" in text.plain_text
        assert "business hours" not in text.plain_text
        assert "business hours" not in text.html_text

    def test_now_controls_wording(self):
        settings = make_settings()

        text = generate_expectation_text(
            "urgent", chicago(2025, 12, 23, 10), settings, now=chicago(2025, 12, 22, 15)
        )

        assert "tomorrow (Tuesday, December 23) by 12:00 PM" in text.plain_text

    def test_html_snippet_structure(self):
        settings = make_settings()

        text = generate_expectation_text("urgent", chicago(2025, 12, 23, 10), settings)

        assert "<li><strong>Initial response:</strong>" in text.html_text
        assert text.html_text.startswith("<div")

    def test_disabled_priority_is_empty(self):
        settings = make_settings(
            medium=PrioritySLA(response_time_hours=8, resolution_time_hours=24, enabled=False)
        )

        text = generate_expectation_text("medium", chicago(2025, 12, 23, 10), settings)

        assert text.plain_text == ""
        assert text.html_text == ""
        assert text.is_empty


class TestSLAExpectationService:

    def test_tracked_expectation(self):
        service = SLAExpectationService(StaticSLASettingsProvider(make_settings()))

        result = service.get_expectation("HIGH", chicago(2025, 12, 23, 10))

        assert result.priority == "high"
        assert result.tracked is True
        assert result.response_expected_by == chicago(2025, 12, 23, 14)
        assert result.resolution_expected_by == chicago(2025, 12, 24, 10)
        assert result.response_message == "within 4 business hours (today by 2:00 PM)"
        assert result.resolution_message == (
            "within 8 business hours (tomorrow (Wednesday, December 24) by 10:00 AM)"
        )
        assert result.business_hours_only is True

    def test_untracked_priority(self):
        settings = make_settings(
            low=PrioritySLA(response_time_hours=24, resolution_time_hours=72, enabled=False)
        )
        service = SLAExpectationService(StaticSLASettingsProvider(settings))

        result = service.get_expectation("low", chicago(2025, 12, 23, 10))

        assert result.tracked is False
        assert result.response_expected_by is None
        assert result.resolution_message is None

    def test_unknown_priority_propagates(self):
        service = SLAExpectationService(StaticSLASettingsProvider(make_settings()))

        with pytest.raises(InvalidPriorityError):
            service.get_expectation("critical", chicago(2025, 12, 23, 10))

    def test_configuration_error_propagates(self):
        settings = make_settings(business_hours=make_business_hours(working_weekdays=frozenset()))
        service = SLAExpectationService(StaticSLASettingsProvider(settings))

        with pytest.raises(ConfigurationError):
            service.get_expectation("urgent", chicago(2025, 12, 23, 10))

    def test_reads_settings_per_call(self):
        class SwitchingProvider:
            def __init__(self):
                self.snapshots = [
                    make_settings(),
                    make_settings(urgent=PrioritySLA(response_time_hours=1, resolution_time_hours=4)),
                ]

            def get_settings(self):
                return self.snapshots.pop(0)

        service = SLAExpectationService(SwitchingProvider())
        first = service.get_expectation("urgent", chicago(2025, 12, 23, 10))
        second = service.get_expectation("urgent", chicago(2025, 12, 23, 10))

        assert first.response_expected_by == chicago(2025, 12, 23, 12)
        assert second.response_expected_by == chicago(2025, 12, 23, 11)

    def test_expectation_text(self, christmas):
        service = SLAExpectationService(StaticSLASettingsProvider(make_settings([christmas])))

        text = service.get_expectation_text("urgent", chicago(2025, 12, 25, 15))

        assert "tomorrow (Friday, December 26) by 11:00 AM" in text.plain_text
