"""Meal suggestions for the rest of the day."""

from dataclasses import dataclass

from nutriscan.domain.ai import MealSuggestion, MealSuggestions
from nutriscan.domain.food_logs import DailyTotals
from nutriscan.services.vision import StructuredClient

SUGGESTIONS_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "suggestions": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "name": {"type": "string"},
                    "calories": {"type": "number", "minimum": 0},
                    "protein_g": {"type": "number", "minimum": 0},
                    "carbs_g": {"type": "number", "minimum": 0},
                    "fat_g": {"type": "number", "minimum": 0},
                    "description": {"type": "string"},
                    "meal_type": {
                        "type": "string",
                        "enum": ["breakfast", "lunch", "dinner", "snack"],
                    },
                },
                "required": [
                    "name",
                    "calories",
                    "protein_g",
                    "carbs_g",
                    "fat_g",
                    "description",
                    "meal_type",
                ],
                "additionalProperties": False,
            },
        }
    },
    "required": ["suggestions"],
    "additionalProperties": False,
}


@dataclass
class MealSuggestionService:
    """Asks the model for meals that fit the remaining allowance."""

    client: StructuredClient
    model: str
    reasoning_effort: str | None
    store: bool

    async def suggest(self, remaining: DailyTotals) -> list[MealSuggestion]:
        """Return 5-6 meal ideas covering the remaining macros."""
        raw = await self.client.generate(
            model=self.model,
            reasoning_effort=self.reasoning_effort,
            store=self.store,
            prompt=_build_prompt(remaining),
            schema=SUGGESTIONS_SCHEMA,
            schema_name="meal_suggestions",
        )
        return MealSuggestions.model_validate(raw).suggestions


def _build_prompt(remaining: DailyTotals) -> str:
    return (
        "You are a nutrition expert specializing in Indian cuisine. "
        "Suggest 5-6 Indian meals (dal, roti, rice, paneer dishes, chicken "
        "curry, dosa, idli, upma, paratha, biryani and similar) spread across "
        "breakfast, lunch, dinner and snack, so that together they roughly "
        "match these remaining daily goals:\n"
        f"- Calories: {remaining.calories:.0f} kcal\n"
        f"- Protein: {remaining.protein:.0f} g\n"
        f"- Carbs: {remaining.carbs:.0f} g\n"
        f"- Fat: {remaining.fat:.0f} g\n"
        "Give each meal a one or two sentence description."
    )
