"""Daily nutrition plan calculation.

BMR uses the Mifflin-St Jeor equation and TDEE assumes moderate activity.
The calorie target follows one of two policies:

* simple: a fixed deficit or surplus per goal;
* timeline: the deficit or surplus needed to reach a target weight within a
  number of months, capped and floored for safety.

Macros are then split as 1.6 g protein per kg, 25% of calories from fat and
the remainder from carbs.
"""

import math

from nutriscan.domain.profiles import (
    BiometricProfile,
    Gender,
    Goal,
    GoalTarget,
    NutritionPlan,
)

ACTIVITY_MULTIPLIER = 1.55
SIMPLE_DEFICIT_KCAL = 500
SIMPLE_SURPLUS_KCAL = 400
KCAL_PER_KG = 7700
WEEKS_PER_MONTH = 4.33
MAX_DAILY_DEFICIT_KCAL = 1000
MAX_DAILY_SURPLUS_KCAL = 500
MIN_CALORIES = {Gender.MALE: 1500, Gender.FEMALE: 1200, Gender.OTHER: 1200}
PROTEIN_G_PER_KG = 1.6
FAT_CALORIE_SHARE = 0.25
KCAL_PER_G_PROTEIN = 4
KCAL_PER_G_CARBS = 4
KCAL_PER_G_FAT = 9


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up."""
    return math.floor(value + 0.5)


def basal_metabolic_rate(
    gender: Gender, age: int, weight_kg: float, height_cm: float
) -> float:
    """Return BMR in kcal/day."""
    base = 10 * weight_kg + 6.25 * height_cm - 5 * age
    if gender == Gender.MALE:
        return base + 5
    return base - 161


def total_daily_energy(bmr: float) -> float:
    """Return TDEE for a moderately active person."""
    return bmr * ACTIVITY_MULTIPLIER


def compute_plan(
    profile: BiometricProfile, target: GoalTarget | None = None
) -> NutritionPlan | None:
    """Return the daily plan, or None when the profile is incomplete."""
    if not profile.is_complete:
        return None

    bmr = basal_metabolic_rate(
        profile.gender, profile.age, profile.weight_kg, profile.height_cm
    )
    tdee = total_daily_energy(bmr)
    if target is not None and target.is_complete and profile.goal != Goal.MAINTAIN:
        calories = _timeline_calories(profile, target, tdee)
    else:
        calories = _simple_calories(profile.goal, tdee)
    return _split_macros(calories, profile.weight_kg)


def daily_adjustment(weight_kg: float, target: GoalTarget) -> int:
    """Return the kcal/day change needed to hit the target on time."""
    weight_difference = abs(weight_kg - target.target_weight_kg)
    weeks_to_goal = target.timeline_months * WEEKS_PER_MONTH
    weekly_change_kg = weight_difference / weeks_to_goal
    return round_half_up(weekly_change_kg * KCAL_PER_KG / 7)


def _simple_calories(goal: Goal, tdee: float) -> int:
    if goal == Goal.LOSE_WEIGHT:
        return round_half_up(tdee - SIMPLE_DEFICIT_KCAL)
    if goal == Goal.GAIN_WEIGHT:
        return round_half_up(tdee + SIMPLE_SURPLUS_KCAL)
    return round_half_up(tdee)


def _timeline_calories(
    profile: BiometricProfile, target: GoalTarget, tdee: float
) -> int:
    adjustment = daily_adjustment(profile.weight_kg, target)
    if profile.goal == Goal.LOSE_WEIGHT:
        deficit = min(adjustment, MAX_DAILY_DEFICIT_KCAL)
        calories = round_half_up(tdee - deficit)
        return max(calories, MIN_CALORIES[profile.gender])
    surplus = min(adjustment, MAX_DAILY_SURPLUS_KCAL)
    return round_half_up(tdee + surplus)


def _split_macros(calories: int, weight_kg: float) -> NutritionPlan:
    # carbs are not clamped; see NutritionPlan.is_feasible
    protein_g = round_half_up(weight_kg * PROTEIN_G_PER_KG)
    fat_g = round_half_up(calories * FAT_CALORIE_SHARE / KCAL_PER_G_FAT)
    carbs_g = round_half_up(
        (calories - protein_g * KCAL_PER_G_PROTEIN - fat_g * KCAL_PER_G_FAT)
        / KCAL_PER_G_CARBS
    )
    return NutritionPlan(
        daily_calories=calories,
        daily_protein_g=protein_g,
        daily_carbs_g=carbs_g,
        daily_fat_g=fat_g,
    )
