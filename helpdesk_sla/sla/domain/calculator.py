"""
SLA Expectation Calculator
==========================

Public entry point of the SLA domain: turns (priority, submission instant,
settings snapshot) into response and resolution deadlines.
"""

from datetime import datetime
from typing import Optional

from helpdesk_sla.config import SLAType
from helpdesk_sla.shared.infrastructure.logging import get_logger
from helpdesk_sla.sla.domain.advancer import advance_24x7, advance_business_hours
from helpdesk_sla.sla.domain.calendar import ensure_aware
from helpdesk_sla.sla.domain.value_objects import (
    BusinessHoursConfig,
    SLAExpectation,
    SLASettings,
)

logger = get_logger(__name__)


class SLAExpectationCalculator:
    """
    Pure functions for SLA deadline calculation.

    Stateless utility class: every input arrives as an argument and the
    wall clock is never consulted, so identical calls give identical results.
    """

    @staticmethod
    def calculate_deadline(
        submitted_at: datetime,
        hours: float,
        business_hours_only: bool,
        business_hours: BusinessHoursConfig
    ) -> datetime:
        """Advance ``submitted_at`` by ``hours`` on the selected clock."""
        if business_hours_only:
            return advance_business_hours(submitted_at, hours, business_hours)
        return advance_24x7(submitted_at, hours)

    @staticmethod
    def calculate(
        priority: str,
        submitted_at: datetime,
        settings: SLASettings
    ) -> Optional[SLAExpectation]:
        """
        Calculate response and resolution deadlines for a ticket.

        Both deadlines start from ``submitted_at``; the resolution deadline
        is not chained off the response deadline.

        Args:
            priority: Priority level (case-insensitive)
            submitted_at: Timezone-aware submission instant
            settings: SLA settings snapshot

        Returns:
            SLAExpectation, or None when SLA tracking is disabled for the priority

        Raises:
            InvalidPriorityError: priority is not configured
            ConfigurationError: business calendar has no reachable window
        """
        ensure_aware(submitted_at, "submitted_at")
        sla = settings.get_priority(priority)

        if not sla.enabled:
            logger.debug("SLA tracking disabled", extra={"priority": priority})
            return None

        deadlines = {}
        for sla_type, hours in (
            (SLAType.RESPONSE, sla.response_time_hours),
            (SLAType.RESOLUTION, sla.resolution_time_hours),
        ):
            deadlines[sla_type] = SLAExpectationCalculator.calculate_deadline(
                submitted_at, hours, sla.business_hours_only, settings.business_hours
            )

        logger.debug(
            "SLA expectation calculated",
            extra={
                "priority": priority,
                "submitted_at": submitted_at.isoformat(),
                "business_hours_only": sla.business_hours_only,
                "response_expected_by": deadlines[SLAType.RESPONSE].isoformat(),
                "resolution_expected_by": deadlines[SLAType.RESOLUTION].isoformat(),
            }
        )

        return SLAExpectation(
            response_expected_by=deadlines[SLAType.RESPONSE],
            resolution_expected_by=deadlines[SLAType.RESOLUTION],
            business_hours_only=sla.business_hours_only,
        )
