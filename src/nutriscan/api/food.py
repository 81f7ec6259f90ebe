"""Food scanning and food log endpoints."""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status

from nutriscan.api.auth import require_user
from nutriscan.api.dependencies import format_error, get_container, resolve_timezone
from nutriscan.api.schemas import FoodLogCreateRequest, ImageRequest, serialize_entry
from nutriscan.containers import AppContainer
from nutriscan.domain.ai import FoodAnalysis
from nutriscan.services.vision import InvalidImageError, decode_image

router = APIRouter(prefix="/food", tags=["food"])

_logger = logging.getLogger(__name__)


@router.post("/analyze")
async def analyze_food(
    body: ImageRequest,
    user_id: UUID = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Estimate nutrition for a food photo without logging it."""
    try:
        image_bytes = decode_image(body.image_base64, container.settings.max_image_bytes)
    except InvalidImageError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
        ) from exc
    try:
        analysis = await container.food_scan_service.analyze(image_bytes)
    except Exception as exc:
        _logger.exception("Food analysis failed", extra={"user_id": str(user_id)})
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=format_error(
                container, exc, "Could not analyze the photo. Please try again."
            ),
        ) from exc
    return {"analysis": analysis.model_dump(mode="json")}


@router.get("/logs")
async def list_food_logs(
    timezone: str | None = None,
    user_id: UUID = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Return today's food logs, newest first."""
    timezone_name = resolve_timezone(container, timezone)
    entries = container.food_log_service.list_day(user_id, timezone_name)
    return {"entries": [serialize_entry(entry) for entry in entries]}


@router.post("/logs", status_code=status.HTTP_201_CREATED)
async def create_food_log(
    body: FoodLogCreateRequest,
    user_id: UUID = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Log a confirmed scan result."""
    analysis = FoodAnalysis.model_validate(
        body.model_dump(exclude={"meal_type", "food_image_url"})
    )
    entry = container.food_log_service.add_entry(
        user_id, analysis, body.meal_type, food_image_url=body.food_image_url
    )
    return {"entry": serialize_entry(entry)}


@router.delete("/logs/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_food_log(
    entry_id: UUID,
    user_id: UUID = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> None:
    """Delete one of the user's food logs."""
    if not container.food_log_service.delete_entry(user_id, entry_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
