"""Onboarding endpoints.

The server keeps no onboarding session: each call receives the serialized
state and returns the next one.
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Request, status

from nutriscan.api.auth import require_user
from nutriscan.api.schemas import (
    OnboardingRequest,
    OnboardingResponse,
    OnboardingUpdateRequest,
    PlanModel,
)
from nutriscan.containers import AppContainer
from nutriscan.services import onboarding
from nutriscan.services.onboarding import OnboardingError, OnboardingSaveError

router = APIRouter(
    prefix="/onboarding",
    tags=["onboarding"],
    dependencies=[Depends(require_user)],
)

_logger = logging.getLogger(__name__)


@router.post("/start")
async def start(request: Request) -> OnboardingResponse:
    """Return a fresh onboarding state."""
    container: AppContainer = request.app.state.container
    return OnboardingResponse.from_state(container.onboarding_service.start())


@router.post("/update")
async def update(body: OnboardingUpdateRequest) -> OnboardingResponse:
    """Record the answer for the current step."""
    try:
        state = onboarding.update(body.state.to_state(), **body.values)
    except ValueError as exc:
        raise HTTPException(
            status_code=422, detail=str(exc)
        ) from exc
    return OnboardingResponse.from_state(state)


@router.post("/next")
async def next_step(body: OnboardingRequest) -> OnboardingResponse:
    """Advance when the current step is valid; otherwise return it unchanged."""
    return OnboardingResponse.from_state(onboarding.advance(body.state.to_state()))


@router.post("/back")
async def previous_step(body: OnboardingRequest) -> OnboardingResponse:
    """Go back one step."""
    return OnboardingResponse.from_state(onboarding.go_back(body.state.to_state()))


@router.post("/complete")
async def complete(
    body: OnboardingRequest,
    request: Request,
    user_id: UUID = Depends(require_user),
) -> dict[str, object]:
    """Persist the profile and plan ("Start Tracking")."""
    container: AppContainer = request.app.state.container
    try:
        plan = container.onboarding_service.complete(user_id, body.state.to_state())
    except OnboardingSaveError as exc:
        _logger.exception("Onboarding save failed", extra={"user_id": str(user_id)})
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)
        ) from exc
    except OnboardingError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
        ) from exc
    return {"plan": PlanModel.from_plan(plan).model_dump(), "onboarding_complete": True}
