"""Supabase repository for food logs."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from nutriscan.domain.food_logs import FoodLogEntry, MealType, NewFoodLog
from nutriscan.services.food_logs import FoodLogRepository

_FOOD_LOG_COLUMNS = (
    "id, user_id, food_name, calories, protein_g, carbs_g, fat_g, fiber_g, "
    "meal_type, logged_at, serving_size, food_image_url"
)


@dataclass
class SupabaseFoodLogRepository(FoodLogRepository):
    """Supabase implementation for the food_logs table."""

    client: Client

    def list_food_logs(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[FoodLogEntry]:
        """Return food logs in the time range, newest first."""
        response = (
            self.client.table("food_logs")
            .select(_FOOD_LOG_COLUMNS)
            .eq("user_id", str(user_id))
            .gte("logged_at", start.isoformat())
            .lt("logged_at", end.isoformat())
            .order("logged_at", desc=True)
            .execute()
        )
        return [_parse_row(row) for row in response.data or []]

    def create_food_log(self, user_id: UUID, entry: NewFoodLog) -> FoodLogEntry:
        """Insert a food log row and return it."""
        response = (
            self.client.table("food_logs")
            .insert(
                {
                    "user_id": str(user_id),
                    "food_name": entry.food_name,
                    "calories": entry.calories,
                    "protein_g": entry.protein_g,
                    "carbs_g": entry.carbs_g,
                    "fat_g": entry.fat_g,
                    "fiber_g": entry.fiber_g,
                    "meal_type": str(entry.meal_type),
                    "logged_at": entry.logged_at.isoformat(),
                    "serving_size": entry.serving_size,
                    "food_image_url": entry.food_image_url,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create food log")
        return _parse_row(response.data[0])

    def delete_food_log(self, user_id: UUID, entry_id: UUID) -> bool:
        """Delete a food log owned by the user."""
        response = (
            self.client.table("food_logs")
            .delete()
            .eq("id", str(entry_id))
            .eq("user_id", str(user_id))
            .execute()
        )
        return bool(response.data)


def _parse_row(row: dict[str, object]) -> FoodLogEntry:
    meal_type_raw = row.get("meal_type")
    try:
        meal_type = MealType(meal_type_raw) if meal_type_raw else None
    except ValueError:
        meal_type = None
    return FoodLogEntry(
        id=UUID(str(row["id"])),
        user_id=UUID(str(row["user_id"])),
        food_name=str(row.get("food_name", "")),
        calories=_to_optional_float(row.get("calories")),
        protein_g=_to_optional_float(row.get("protein_g")),
        carbs_g=_to_optional_float(row.get("carbs_g")),
        fat_g=_to_optional_float(row.get("fat_g")),
        fiber_g=_to_optional_float(row.get("fiber_g")),
        meal_type=meal_type,
        logged_at=datetime.fromisoformat(str(row["logged_at"])),
        serving_size=row.get("serving_size"),
        food_image_url=row.get("food_image_url"),
    )


def _to_optional_float(value: object) -> float | None:
    if isinstance(value, int | float):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None
