"""Models for structured AI outputs."""

from enum import StrEnum

from pydantic import BaseModel, Field

from nutriscan.domain.food_logs import MealType


class Confidence(StrEnum):
    """Classifier confidence bucket."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class FoodAnalysis(BaseModel):
    """Nutrition estimate for a single food photo."""

    food_name: str
    serving_size: str | None = None
    calories: float = Field(ge=0.0)
    protein_g: float = Field(ge=0.0)
    carbs_g: float = Field(ge=0.0)
    fat_g: float = Field(ge=0.0)
    fiber_g: float = Field(default=0.0, ge=0.0)
    confidence: Confidence = Confidence.MEDIUM


class MealSuggestion(BaseModel):
    """Suggested meal that helps close the remaining daily gap."""

    name: str
    calories: float = Field(ge=0.0)
    protein_g: float = Field(ge=0.0)
    carbs_g: float = Field(ge=0.0)
    fat_g: float = Field(ge=0.0)
    description: str
    meal_type: MealType


class MealSuggestions(BaseModel):
    """Structured output wrapper for meal suggestions."""

    suggestions: list[MealSuggestion]
