"""Supabase-backed profile repository."""

from dataclasses import dataclass
from datetime import UTC, datetime
from enum import StrEnum
from uuid import UUID

from supabase import Client

from nutriscan.domain.profiles import (
    BiometricProfile,
    Gender,
    Goal,
    GoalTarget,
    NutritionPlan,
    ProfileRecord,
)
from nutriscan.services.profiles import ProfileRepository

_PROFILE_COLUMNS = (
    "user_id, full_name, gender, age, weight_kg, height_cm, goal, "
    "target_weight_kg, timeline_months, daily_calories, daily_protein_g, "
    "daily_carbs_g, daily_fat_g, onboarding_complete, is_subscribed, "
    "subscription_ends_at"
)


@dataclass
class SupabaseProfileRepository(ProfileRepository):
    """Supabase implementation for the profiles table."""

    client: Client

    def get_profile(self, user_id: UUID) -> ProfileRecord | None:
        """Return the profile row for a user, if present."""
        response = (
            self.client.table("profiles")
            .select(_PROFILE_COLUMNS)
            .eq("user_id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_profile(response.data[0])

    def update_profile(self, user_id: UUID, fields: dict[str, object]) -> None:
        """Update the profile row and fail if no row was touched."""
        payload = dict(fields)
        payload["updated_at"] = datetime.now(tz=UTC).isoformat()
        response = (
            self.client.table("profiles")
            .update(payload)
            .eq("user_id", str(user_id))
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to update profile in Supabase")


def _parse_profile(row: dict[str, object]) -> ProfileRecord:
    return ProfileRecord(
        user_id=UUID(str(row["user_id"])),
        full_name=row.get("full_name"),
        biometrics=BiometricProfile(
            gender=_parse_enum(Gender, row.get("gender")),
            age=_to_int(row.get("age")),
            weight_kg=_to_float(row.get("weight_kg")),
            height_cm=_to_float(row.get("height_cm")),
            goal=_parse_enum(Goal, row.get("goal")),
        ),
        target=GoalTarget(
            target_weight_kg=_to_float(row.get("target_weight_kg")),
            timeline_months=_to_int(row.get("timeline_months")),
        ),
        plan=_parse_plan(row),
        onboarding_complete=bool(row.get("onboarding_complete")),
        is_subscribed=bool(row.get("is_subscribed")),
        subscription_ends_at=_parse_datetime(row.get("subscription_ends_at")),
    )


def _parse_plan(row: dict[str, object]) -> NutritionPlan | None:
    values = [
        _to_int(row.get(key))
        for key in (
            "daily_calories",
            "daily_protein_g",
            "daily_carbs_g",
            "daily_fat_g",
        )
    ]
    if any(value is None for value in values):
        return None
    calories, protein, carbs, fat = values
    return NutritionPlan(
        daily_calories=calories,
        daily_protein_g=protein,
        daily_carbs_g=carbs,
        daily_fat_g=fat,
    )


def _parse_enum(enum_type: type[StrEnum], value: object) -> StrEnum | None:
    if value is None:
        return None
    try:
        return enum_type(value)
    except ValueError:
        return None


def _parse_datetime(value: object) -> datetime | None:
    if isinstance(value, str) and value:
        return datetime.fromisoformat(value)
    return None


def _to_int(value: object) -> int | None:
    if isinstance(value, int | float):
        return int(value)
    return None


def _to_float(value: object) -> float | None:
    if isinstance(value, int | float):
        return float(value)
    return None
