"""
SLA Application DTOs
=====================

Data Transfer Objects for SLA API layer.

These Pydantic models handle serialization/deserialization and validation
for API requests and responses. Following YAGNI - only what's needed.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from pydantic import AwareDatetime, BaseModel, Field


# ========== Request DTOs ==========

class SLAExpectationRequest(BaseModel):
    """Request model for an SLA expectation."""
    priority: str = Field(..., min_length=1, description="Ticket priority (urgent, high, medium, low)")
    submitted_at: AwareDatetime = Field(..., description="Ticket submission instant (with offset)")
    now: Optional[AwareDatetime] = Field(
        None,
        description="Reference instant for 'today'/'tomorrow' wording; defaults to submitted_at"
    )


# ========== Response DTOs ==========

class SLAExpectationResponse(BaseModel):
    """Response model for an SLA expectation."""
    priority: str = Field(..., description="Normalized priority")
    tracked: bool = Field(..., description="False when SLA tracking is disabled for the priority")
    submitted_at: datetime
    response_expected_by: Optional[datetime] = Field(None, description="Response deadline")
    resolution_expected_by: Optional[datetime] = Field(None, description="Resolution deadline")
    response_message: Optional[str] = Field(None, description="Human-readable response target")
    resolution_message: Optional[str] = Field(None, description="Human-readable resolution target")
    business_hours_only: Optional[bool] = Field(None, description="Whether business hours were used")


class ExpectationTextResponse(BaseModel):
    """Response model for the expectation email snippet."""
    priority: str
    plain_text: str = Field(..., description="Plain-text snippet (empty if not tracked)")
    html_text: str = Field(..., description="HTML snippet (empty if not tracked)")


@dataclass(frozen=True)
class ExpectationText:
    """Rendered expectation snippet for notification emails."""
    plain_text: str
    html_text: str

    @property
    def is_empty(self) -> bool:
        return not self.plain_text and not self.html_text
