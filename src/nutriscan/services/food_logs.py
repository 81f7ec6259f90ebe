"""Food log service."""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Protocol
from uuid import UUID
from zoneinfo import ZoneInfo

from nutriscan.domain.ai import FoodAnalysis
from nutriscan.domain.food_logs import FoodLogEntry, MealType, NewFoodLog


class FoodLogRepository(Protocol):
    """Persistence interface for food logs."""

    def list_food_logs(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[FoodLogEntry]:
        """Return food logs with start <= logged_at < end, newest first."""

    def create_food_log(self, user_id: UUID, entry: NewFoodLog) -> FoodLogEntry:
        """Insert a food log and return the stored row."""

    def delete_food_log(self, user_id: UUID, entry_id: UUID) -> bool:
        """Delete a user's food log; return False if nothing was deleted."""


@dataclass
class FoodLogService:
    """Creates, lists and deletes confirmed food logs."""

    repository: FoodLogRepository

    def add_entry(
        self,
        user_id: UUID,
        analysis: FoodAnalysis,
        meal_type: MealType,
        food_image_url: str | None = None,
    ) -> FoodLogEntry:
        """Store a confirmed scan result."""
        entry = NewFoodLog(
            food_name=analysis.food_name,
            calories=analysis.calories,
            protein_g=analysis.protein_g,
            carbs_g=analysis.carbs_g,
            fat_g=analysis.fat_g,
            fiber_g=analysis.fiber_g or 0.0,
            meal_type=meal_type,
            logged_at=datetime.now(tz=UTC),
            serving_size=analysis.serving_size,
            food_image_url=food_image_url,
        )
        return self.repository.create_food_log(user_id, entry)

    def delete_entry(self, user_id: UUID, entry_id: UUID) -> bool:
        """Delete an entry owned by the user."""
        return self.repository.delete_food_log(user_id, entry_id)

    def list_day(self, user_id: UUID, timezone_name: str) -> list[FoodLogEntry]:
        """Return today's entries in the user's timezone."""
        start, end = day_bounds(timezone_name)
        return self.repository.list_food_logs(user_id, start, end)


def day_bounds(
    timezone_name: str, now: datetime | None = None
) -> tuple[datetime, datetime]:
    """Return UTC bounds of the local day containing now."""
    tz = ZoneInfo(timezone_name)
    local_now = (now or datetime.now(tz=UTC)).astimezone(tz)
    start = local_now.replace(hour=0, minute=0, second=0, microsecond=0)
    end = start + timedelta(days=1)
    return start.astimezone(UTC), end.astimezone(UTC)
