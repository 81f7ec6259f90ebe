"""Domain models for user profiles and nutrition plans."""

from dataclasses import dataclass, fields
from datetime import datetime
from enum import StrEnum
from uuid import UUID


class Gender(StrEnum):
    """Gender options used by the BMR equation."""

    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class Goal(StrEnum):
    """Weight goal selected during onboarding."""

    LOSE_WEIGHT = "lose_weight"
    GAIN_WEIGHT = "gain_weight"
    MAINTAIN = "maintain"


@dataclass(frozen=True)
class BiometricProfile:
    """Biometric inputs for the calculator; fields stay None until collected."""

    gender: Gender | None = None
    age: int | None = None
    weight_kg: float | None = None
    height_cm: float | None = None
    goal: Goal | None = None

    def missing_fields(self) -> list[str]:
        """Return the names of fields that are absent or zero."""
        return [field.name for field in fields(self) if not getattr(self, field.name)]

    @property
    def is_complete(self) -> bool:
        return not self.missing_fields()


@dataclass(frozen=True)
class GoalTarget:
    """Target weight and timeline for lose/gain goals."""

    target_weight_kg: float | None = None
    timeline_months: int | None = None

    @property
    def is_complete(self) -> bool:
        return bool(self.target_weight_kg) and bool(self.timeline_months)


@dataclass(frozen=True)
class NutritionPlan:
    """Daily calorie and macro targets."""

    daily_calories: int
    daily_protein_g: int
    daily_carbs_g: int
    daily_fat_g: int

    @property
    def is_feasible(self) -> bool:
        """False when protein and fat alone exceed the calorie target."""
        return self.daily_carbs_g >= 0


@dataclass(frozen=True)
class ProfileRecord:
    """Persisted profile row."""

    user_id: UUID
    full_name: str | None
    biometrics: BiometricProfile
    target: GoalTarget
    plan: NutritionPlan | None
    onboarding_complete: bool
    is_subscribed: bool
    subscription_ends_at: datetime | None
