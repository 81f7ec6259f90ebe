"""Pydantic models and serializers for the HTTP API."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from nutriscan.domain.ai import FoodAnalysis
from nutriscan.domain.food_logs import DailyTotals, FoodLogEntry, MealType
from nutriscan.domain.profiles import (
    BiometricProfile,
    Gender,
    Goal,
    GoalTarget,
    NutritionPlan,
    ProfileRecord,
)
from nutriscan.services.dashboard import DailySummary
from nutriscan.services.onboarding import (
    OnboardingState,
    Step,
    can_advance,
    step_sequence,
)


class ProfileDraft(BaseModel):
    """Biometric answers collected so far."""

    model_config = ConfigDict(allow_inf_nan=False)

    gender: Gender | None = None
    age: int | None = None
    weight_kg: float | None = None
    height_cm: float | None = None
    goal: Goal | None = None


class TargetDraft(BaseModel):
    """Target weight answers collected so far."""

    model_config = ConfigDict(allow_inf_nan=False)

    target_weight_kg: float | None = None
    timeline_months: int | None = None


class PlanModel(BaseModel):
    """Daily nutrition plan."""

    daily_calories: int
    daily_protein_g: int
    daily_carbs_g: int
    daily_fat_g: int
    is_feasible: bool = True

    @classmethod
    def from_plan(cls, plan: NutritionPlan) -> "PlanModel":
        return cls(
            daily_calories=plan.daily_calories,
            daily_protein_g=plan.daily_protein_g,
            daily_carbs_g=plan.daily_carbs_g,
            daily_fat_g=plan.daily_fat_g,
            is_feasible=plan.is_feasible,
        )

    def to_plan(self) -> NutritionPlan:
        return NutritionPlan(
            daily_calories=self.daily_calories,
            daily_protein_g=self.daily_protein_g,
            daily_carbs_g=self.daily_carbs_g,
            daily_fat_g=self.daily_fat_g,
        )


class OnboardingStateModel(BaseModel):
    """Serialized onboarding state that clients send back on each call."""

    step_index: int = Field(default=0, ge=0)
    profile: ProfileDraft = Field(default_factory=ProfileDraft)
    target: TargetDraft = Field(default_factory=TargetDraft)
    plan: PlanModel | None = None

    @model_validator(mode="after")
    def _check_step_index(self) -> "OnboardingStateModel":
        if self.step_index >= len(step_sequence(self.profile.goal)):
            raise ValueError("step_index is out of range for the selected goal")
        return self

    @classmethod
    def from_state(cls, state: OnboardingState) -> "OnboardingStateModel":
        return cls(
            step_index=state.step_index,
            profile=ProfileDraft(
                gender=state.profile.gender,
                age=state.profile.age,
                weight_kg=state.profile.weight_kg,
                height_cm=state.profile.height_cm,
                goal=state.profile.goal,
            ),
            target=TargetDraft(
                target_weight_kg=state.target.target_weight_kg,
                timeline_months=state.target.timeline_months,
            ),
            plan=PlanModel.from_plan(state.plan) if state.plan else None,
        )

    def to_state(self) -> OnboardingState:
        return OnboardingState(
            step_index=self.step_index,
            profile=BiometricProfile(**self.profile.model_dump()),
            target=GoalTarget(**self.target.model_dump()),
            plan=self.plan.to_plan() if self.plan else None,
        )


class OnboardingRequest(BaseModel):
    """Request carrying the current onboarding state."""

    state: OnboardingStateModel


class OnboardingUpdateRequest(OnboardingRequest):
    """Answer for the current onboarding step."""

    values: dict[str, Any]


class OnboardingResponse(BaseModel):
    """Onboarding state with derived navigation data."""

    state: OnboardingStateModel
    steps: list[Step]
    current_step: Step
    can_advance: bool
    progress_percent: float

    @classmethod
    def from_state(cls, state: OnboardingState) -> "OnboardingResponse":
        return cls(
            state=OnboardingStateModel.from_state(state),
            steps=list(state.steps),
            current_step=state.current_step,
            can_advance=can_advance(state.current_step, state.profile, state.target),
            progress_percent=state.progress_percent,
        )


class ImageRequest(BaseModel):
    """Base64 image, optionally as a data URL."""

    image_base64: str = Field(min_length=16)


class FoodLogCreateRequest(FoodAnalysis):
    """Confirmed scan result to log."""

    meal_type: MealType = MealType.LUNCH
    food_image_url: str | None = None


class OrderRequest(BaseModel):
    """Plan to purchase."""

    plan_name: str


class PaymentVerificationRequest(BaseModel):
    """Checkout callback payload."""

    razorpay_order_id: str
    razorpay_payment_id: str
    razorpay_signature: str
    plan_name: str


def serialize_totals(totals: DailyTotals) -> dict[str, float]:
    return {
        "calories": totals.calories,
        "protein": totals.protein,
        "carbs": totals.carbs,
        "fat": totals.fat,
    }


def serialize_entry(entry: FoodLogEntry) -> dict[str, object]:
    return {
        "id": str(entry.id),
        "food_name": entry.food_name,
        "calories": entry.calories,
        "protein_g": entry.protein_g,
        "carbs_g": entry.carbs_g,
        "fat_g": entry.fat_g,
        "fiber_g": entry.fiber_g,
        "meal_type": str(entry.meal_type) if entry.meal_type else None,
        "serving_size": entry.serving_size,
        "food_image_url": entry.food_image_url,
        "logged_at": entry.logged_at.isoformat(),
    }


def serialize_profile(profile: ProfileRecord) -> dict[str, object]:
    biometrics = profile.biometrics
    return {
        "user_id": str(profile.user_id),
        "full_name": profile.full_name,
        "gender": biometrics.gender,
        "age": biometrics.age,
        "weight_kg": biometrics.weight_kg,
        "height_cm": biometrics.height_cm,
        "goal": biometrics.goal,
        "target_weight_kg": profile.target.target_weight_kg,
        "timeline_months": profile.target.timeline_months,
        "plan": PlanModel.from_plan(profile.plan).model_dump()
        if profile.plan
        else None,
        "onboarding_complete": profile.onboarding_complete,
        "is_subscribed": profile.is_subscribed,
        "subscription_ends_at": profile.subscription_ends_at.isoformat()
        if profile.subscription_ends_at
        else None,
    }


def serialize_summary(summary: DailySummary) -> dict[str, object]:
    return {
        "plan": PlanModel.from_plan(summary.plan).model_dump()
        if summary.plan
        else None,
        "entries": [serialize_entry(entry) for entry in summary.entries],
        "totals": serialize_totals(summary.totals),
        "remaining": serialize_totals(summary.remaining),
        "progress_percent": summary.progress_percent,
    }
