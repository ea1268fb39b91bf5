"""
SLA Application Layer
======================

Application layer for SLA expectations.

Contains:
- Services: Orchestrate domain calculations and settings providers
- DTOs: Data transfer objects for API serialization
- Instants: Boundary adapter normalizing stored timestamps

This layer depends on the domain layer and the settings provider interface,
but not on concrete infrastructure implementations.
"""

from helpdesk_sla.sla.application.dto import (
    SLAExpectationRequest,
    SLAExpectationResponse,
    ExpectationTextResponse,
    ExpectationText,
)
from helpdesk_sla.sla.application.instants import to_instant
from helpdesk_sla.sla.application.services import (
    SLAExpectationService,
    ISLASettingsProvider,
    format_expectation_message,
    generate_expectation_text,
)

__all__ = [
    # DTOs
    "SLAExpectationRequest",
    "SLAExpectationResponse",
    "ExpectationTextResponse",
    "ExpectationText",
    # Services
    "SLAExpectationService",
    "format_expectation_message",
    "generate_expectation_text",
    "to_instant",
    # Provider Interfaces
    "ISLASettingsProvider",
]
