"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from uuid import UUID

from fastapi import Depends, FastAPI, HTTPException, status

from nutriscan.api.auth import require_user
from nutriscan.api.dependencies import format_error, get_container, resolve_timezone
from nutriscan.api.food import router as food_router
from nutriscan.api.onboarding import router as onboarding_router
from nutriscan.api.payments import router as payments_router
from nutriscan.api.schemas import serialize_profile, serialize_summary
from nutriscan.app_logging import configure_logging
from nutriscan.containers import AppContainer
from nutriscan.services.profiles import ProfileNotFoundError


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(onboarding_router)
    app.include_router(food_router)
    app.include_router(payments_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/profile")
    async def get_profile(
        user_id: UUID = Depends(require_user),
        state_container: AppContainer = Depends(get_container),
    ) -> dict[str, object]:
        """Return the signed-in user's profile."""
        try:
            profile = state_container.profile_service.get_profile(user_id)
        except ProfileNotFoundError as exc:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail="Profile not found"
            ) from exc
        return serialize_profile(profile)

    @app.get("/dashboard")
    async def dashboard(
        timezone: str | None = None,
        user_id: UUID = Depends(require_user),
        state_container: AppContainer = Depends(get_container),
    ) -> dict[str, object]:
        """Return today's plan, entries and progress."""
        timezone_name = resolve_timezone(state_container, timezone)
        _require_onboarded(state_container, user_id)
        summary = state_container.dashboard_service.get_today(user_id, timezone_name)
        return serialize_summary(summary)

    @app.post("/suggestions")
    async def suggestions(
        timezone: str | None = None,
        user_id: UUID = Depends(require_user),
        state_container: AppContainer = Depends(get_container),
    ) -> dict[str, object]:
        """Suggest meals that fit what is left of today's plan."""
        timezone_name = resolve_timezone(state_container, timezone)
        _require_onboarded(state_container, user_id)
        summary = state_container.dashboard_service.get_today(user_id, timezone_name)
        try:
            meals = await state_container.suggestion_service.suggest(summary.remaining)
        except Exception as exc:
            logger.exception("Meal suggestions failed", extra={"user_id": str(user_id)})
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail=format_error(
                    state_container, exc, "Could not generate suggestions."
                ),
            ) from exc
        return {"suggestions": [meal.model_dump(mode="json") for meal in meals]}

    return app


def _require_onboarded(state_container: AppContainer, user_id: UUID) -> None:
    try:
        needs_onboarding = state_container.profile_service.needs_onboarding(user_id)
    except ProfileNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Profile not found"
        ) from exc
    if needs_onboarding:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT, detail="Onboarding not complete"
        )
