"""Tests for daily totals arithmetic."""

from datetime import UTC, datetime
from uuid import uuid4

from nutriscan.domain.food_logs import DailyTotals, FoodLogEntry, MealType
from nutriscan.domain.profiles import NutritionPlan
from nutriscan.services.totals import (
    ZERO_TOTALS,
    aggregate,
    progress_percent,
    remaining,
)
from tests.conftest import USER_ID

PLAN = NutritionPlan(
    daily_calories=2000, daily_protein_g=120, daily_carbs_g=250, daily_fat_g=56
)


def _entry(calories, protein=None, carbs=None, fat=None) -> FoodLogEntry:  # type: ignore[no-untyped-def]
    return FoodLogEntry(
        id=uuid4(),
        user_id=USER_ID,
        food_name="Dal",
        calories=calories,
        protein_g=protein,
        carbs_g=carbs,
        fat_g=fat,
        fiber_g=None,
        meal_type=MealType.LUNCH,
        logged_at=datetime(2024, 5, 1, 12, tzinfo=UTC),
    )


def test_aggregate_treats_missing_values_as_zero() -> None:
    totals = aggregate([_entry(300, 10, 40, 8), _entry(None, 5), _entry(150.5)])

    assert totals == DailyTotals(calories=450.5, protein=15, carbs=40, fat=8)


def test_aggregate_empty() -> None:
    assert aggregate([]) == ZERO_TOTALS


def test_remaining_never_negative() -> None:
    totals = DailyTotals(calories=2500, protein=50, carbs=300, fat=20)

    left = remaining(PLAN, totals)

    assert left == DailyTotals(calories=0, protein=70, carbs=0, fat=36)


def test_remaining_without_plan_is_zero() -> None:
    assert remaining(None, DailyTotals(100, 1, 1, 1)) == ZERO_TOTALS


def test_progress_is_capped() -> None:
    assert progress_percent(PLAN, DailyTotals(500, 0, 0, 0)) == 25
    assert progress_percent(PLAN, DailyTotals(4000, 0, 0, 0)) == 100


def test_progress_without_calorie_goal_is_zero() -> None:
    zero_plan = NutritionPlan(0, 0, 0, 0)

    assert progress_percent(None, DailyTotals(500, 0, 0, 0)) == 0
    assert progress_percent(zero_plan, DailyTotals(500, 0, 0, 0)) == 0
