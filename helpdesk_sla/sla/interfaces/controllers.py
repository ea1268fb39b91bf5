"""
SLA Controllers (API Routes)
=============================

FastAPI routes for SLA expectation endpoints.

Controllers are thin - they delegate to application services.
"""

from fastapi import APIRouter, Depends, HTTPException, Request, status

from helpdesk_sla.sla.application import (
    ExpectationTextResponse,
    ISLASettingsProvider,
    SLAExpectationRequest,
    SLAExpectationResponse,
    SLAExpectationService,
)

router = APIRouter(prefix="/sla", tags=["SLA Expectations"])


# ========== Example payloads for Swagger ==========

EXPECTATION_RESPONSE_EXAMPLE = {
    "priority": "urgent",
    "tracked": True,
    "submitted_at": "2025-12-23T10:00:00-06:00",
    "response_expected_by": "2025-12-23T12:00:00-06:00",
    "resolution_expected_by": "2025-12-23T14:00:00-06:00",
    "response_message": "within 2 business hours (today by 12:00 PM)",
    "resolution_message": "within 4 business hours (today by 2:00 PM)",
    "business_hours_only": True
}


# ========== Dependencies ==========

def get_settings_provider(request: Request) -> ISLASettingsProvider:
    """Get the settings provider installed at startup."""
    provider = getattr(request.app.state, "settings_provider", None)
    if provider is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="SLA settings not loaded"
        )
    return provider


def get_expectation_service(
    provider: ISLASettingsProvider = Depends(get_settings_provider)
) -> SLAExpectationService:
    """Get SLA expectation service instance."""
    return SLAExpectationService(provider)


# ========== Route Handlers ==========

@router.post(
    "/expectations",
    response_model=SLAExpectationResponse,
    summary="Calculate SLA expectations",
    description="""
    Calculate response and resolution deadlines for a ticket.

    **Priority Levels**: `urgent`, `high`, `medium`, `low`

    Deadlines use business hours (working days, daily window, holidays) or a
    24/7 clock, depending on the priority's settings. A priority with SLA
    tracking disabled returns `tracked: false`.
    """,
    responses={
        200: {
            "description": "SLA expectation",
            "content": {"application/json": {"example": EXPECTATION_RESPONSE_EXAMPLE}}
        },
        404: {"description": "Priority not configured"},
        409: {"description": "SLA misconfigured (no reachable business window)"}
    }
)
def calculate_expectation(
    body: SLAExpectationRequest,
    service: SLAExpectationService = Depends(get_expectation_service)
):
    return service.get_expectation(body.priority, body.submitted_at, body.now)


@router.post(
    "/expectations/text",
    response_model=ExpectationTextResponse,
    summary="Render SLA expectation snippet",
    description="Plain-text and HTML snippets for ticket confirmation emails."
)
def render_expectation_text(
    body: SLAExpectationRequest,
    service: SLAExpectationService = Depends(get_expectation_service)
):
    text = service.get_expectation_text(body.priority, body.submitted_at, body.now)
    return ExpectationTextResponse(
        priority=body.priority.lower(),
        plain_text=text.plain_text,
        html_text=text.html_text
    )


@router.get(
    "/settings",
    summary="Current SLA settings",
    description="The settings snapshot currently used for calculations."
)
def get_sla_settings(provider: ISLASettingsProvider = Depends(get_settings_provider)):
    return provider.get_settings().model_dump(mode="json")


sla_router = router
