"""Domain models for food logging and daily totals."""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from uuid import UUID


class MealType(StrEnum):
    """Meal slot a food log belongs to."""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"


@dataclass(frozen=True)
class FoodLogEntry:
    """A confirmed food log row. Macro fields may be null in storage."""

    id: UUID
    user_id: UUID
    food_name: str
    calories: float | None
    protein_g: float | None
    carbs_g: float | None
    fat_g: float | None
    fiber_g: float | None
    meal_type: MealType | None
    logged_at: datetime
    serving_size: str | None = None
    food_image_url: str | None = None


@dataclass(frozen=True)
class NewFoodLog:
    """Values for a food log that has not been stored yet."""

    food_name: str
    calories: float
    protein_g: float
    carbs_g: float
    fat_g: float
    fiber_g: float
    meal_type: MealType
    logged_at: datetime
    serving_size: str | None = None
    food_image_url: str | None = None


@dataclass(frozen=True)
class DailyTotals:
    """Summed macros for a set of entries."""

    calories: float
    protein: float
    carbs: float
    fat: float
