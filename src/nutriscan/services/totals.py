"""Daily macro totals against a nutrition plan."""

from collections.abc import Iterable

from nutriscan.domain.food_logs import DailyTotals, FoodLogEntry
from nutriscan.domain.profiles import NutritionPlan

ZERO_TOTALS = DailyTotals(calories=0, protein=0, carbs=0, fat=0)


def aggregate(entries: Iterable[FoodLogEntry]) -> DailyTotals:
    """Sum macros across entries, counting missing values as zero."""
    total = ZERO_TOTALS
    for entry in entries:
        total = DailyTotals(
            calories=total.calories + (entry.calories or 0),
            protein=total.protein + (entry.protein_g or 0),
            carbs=total.carbs + (entry.carbs_g or 0),
            fat=total.fat + (entry.fat_g or 0),
        )
    return total


def remaining(plan: NutritionPlan | None, totals: DailyTotals) -> DailyTotals:
    """Return what is left of the plan for each macro, never below zero."""
    if plan is None:
        return ZERO_TOTALS
    return DailyTotals(
        calories=max(0, plan.daily_calories - totals.calories),
        protein=max(0, plan.daily_protein_g - totals.protein),
        carbs=max(0, plan.daily_carbs_g - totals.carbs),
        fat=max(0, plan.daily_fat_g - totals.fat),
    )


def progress_percent(plan: NutritionPlan | None, totals: DailyTotals) -> float:
    """Return calorie progress capped at 100, or 0 without a calorie goal."""
    if plan is None or not plan.daily_calories:
        return 0
    return min(100, totals.calories / plan.daily_calories * 100)
