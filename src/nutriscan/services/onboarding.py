"""Step machine for the onboarding questionnaire.

The state is an immutable value: every operation takes an OnboardingState and
returns a new one, so callers may keep it wherever they like (the HTTP API
round-trips it through the client). The step sequence depends on the chosen
goal: lose and gain goals collect a target weight and timeline before the
results step, maintain goes straight to results.
"""

import logging
import math
from dataclasses import dataclass, field, replace
from enum import StrEnum
from uuid import UUID

from nutriscan.domain.profiles import (
    BiometricProfile,
    Gender,
    Goal,
    GoalTarget,
    NutritionPlan,
)
from nutriscan.services.planner import compute_plan
from nutriscan.services.profiles import ProfileRepository

MIN_AGE = 10
MAX_AGE = 120
MIN_WEIGHT_KG = 20
MAX_WEIGHT_KG = 300
MIN_HEIGHT_CM = 100
MAX_HEIGHT_CM = 250
MIN_TARGET_WEIGHT_KG = 30
MAX_TARGET_WEIGHT_KG = 200
MIN_TIMELINE_MONTHS = 1
MAX_TIMELINE_MONTHS = 36

_logger = logging.getLogger(__name__)


class Step(StrEnum):
    """Onboarding steps."""

    GENDER = "gender"
    AGE = "age"
    WEIGHT = "weight"
    HEIGHT = "height"
    GOAL = "goal"
    TARGET_WEIGHT = "target_weight"
    TIMELINE = "timeline"
    RESULTS = "results"


_PROFILE_STEPS = (Step.GENDER, Step.AGE, Step.WEIGHT, Step.HEIGHT, Step.GOAL)
_TARGET_STEPS = (Step.TARGET_WEIGHT, Step.TIMELINE)

STEP_FIELDS: dict[Step, str] = {
    Step.GENDER: "gender",
    Step.AGE: "age",
    Step.WEIGHT: "weight_kg",
    Step.HEIGHT: "height_cm",
    Step.GOAL: "goal",
    Step.TARGET_WEIGHT: "target_weight_kg",
    Step.TIMELINE: "timeline_months",
}


def step_sequence(goal: Goal | None) -> tuple[Step, ...]:
    """Return the ordered steps for the selected goal."""
    if goal in {Goal.LOSE_WEIGHT, Goal.GAIN_WEIGHT}:
        return (*_PROFILE_STEPS, *_TARGET_STEPS, Step.RESULTS)
    return (*_PROFILE_STEPS, Step.RESULTS)


@dataclass(frozen=True)
class OnboardingState:
    """Position in the step sequence plus the draft being collected."""

    step_index: int = 0
    profile: BiometricProfile = field(default_factory=BiometricProfile)
    target: GoalTarget = field(default_factory=GoalTarget)
    plan: NutritionPlan | None = None

    @property
    def steps(self) -> tuple[Step, ...]:
        return step_sequence(self.profile.goal)

    @property
    def current_step(self) -> Step:
        return self.steps[self.step_index]

    @property
    def progress_percent(self) -> float:
        return (self.step_index + 1) / len(self.steps) * 100

    @property
    def goal_target(self) -> GoalTarget | None:
        """Return the target when the goal uses one."""
        if self.profile.goal == Goal.MAINTAIN:
            return None
        return self.target


def is_valid_target_weight(profile: BiometricProfile, target: GoalTarget) -> bool:
    """Check the target weight against the current weight and goal."""
    target_weight = target.target_weight_kg
    if target_weight is None or not profile.weight_kg:
        return False
    if profile.goal == Goal.LOSE_WEIGHT:
        return MIN_TARGET_WEIGHT_KG < target_weight < profile.weight_kg
    if profile.goal == Goal.GAIN_WEIGHT:
        return profile.weight_kg < target_weight < MAX_TARGET_WEIGHT_KG
    return False


def can_advance(step: Step, profile: BiometricProfile, target: GoalTarget) -> bool:  # noqa: PLR0911
    """Return True when the data collected for a step is acceptable."""
    if step == Step.GENDER:
        return profile.gender is not None
    if step == Step.AGE:
        return profile.age is not None and MIN_AGE <= profile.age <= MAX_AGE
    if step == Step.WEIGHT:
        return (
            profile.weight_kg is not None
            and MIN_WEIGHT_KG <= profile.weight_kg <= MAX_WEIGHT_KG
        )
    if step == Step.HEIGHT:
        return (
            profile.height_cm is not None
            and MIN_HEIGHT_CM <= profile.height_cm <= MAX_HEIGHT_CM
        )
    if step == Step.GOAL:
        return profile.goal is not None
    if step == Step.TARGET_WEIGHT:
        return is_valid_target_weight(profile, target)
    if step == Step.TIMELINE:
        months = target.timeline_months
        return (
            months is not None and MIN_TIMELINE_MONTHS <= months <= MAX_TIMELINE_MONTHS
        )
    return True


def update(state: OnboardingState, **changes: object) -> OnboardingState:
    """Return a new state with the current step's answer replaced."""
    step = state.current_step
    allowed = STEP_FIELDS.get(step)
    unexpected = set(changes) - {allowed}
    if unexpected:
        raise ValueError(
            f"Step {step} does not accept fields: {', '.join(sorted(unexpected))}"
        )
    if not changes:
        return state
    value = _coerce(allowed, changes[allowed])
    if step in _TARGET_STEPS:
        target = replace(state.target, **{allowed: value})
        return replace(state, target=target, plan=None)
    profile = replace(state.profile, **{allowed: value})
    return replace(state, profile=profile, plan=None)


def advance(state: OnboardingState) -> OnboardingState:
    """Move to the next step, or return the state unchanged if blocked."""
    if state.current_step == Step.RESULTS:
        return state
    # recheck earlier answers as well; callers may hand back an edited state
    answered = state.steps[: state.step_index + 1]
    if not all(can_advance(step, state.profile, state.target) for step in answered):
        return state
    next_index = state.step_index + 1
    advanced = replace(state, step_index=next_index)
    if advanced.current_step == Step.RESULTS:
        return replace(
            advanced, plan=compute_plan(state.profile, advanced.goal_target)
        )
    return advanced


def go_back(state: OnboardingState) -> OnboardingState:
    """Move to the previous step without touching collected answers.

    The plan is dropped because it only belongs to the results step.
    """
    if state.step_index == 0:
        return state
    return replace(state, step_index=state.step_index - 1, plan=None)


def _coerce(name: str, value: object) -> object:
    if value is None:
        return None
    if name == "gender":
        return Gender(value)
    if name == "goal":
        return Goal(value)
    if isinstance(value, bool) or not isinstance(value, int | float | str):
        raise ValueError(f"{name} must be a number")
    number = float(value)
    if not math.isfinite(number):
        raise ValueError(f"{name} must be a finite number")
    if name in {"age", "timeline_months"}:
        if not number.is_integer():
            raise ValueError(f"{name} must be a whole number")
        return int(number)
    return number


class OnboardingError(Exception):
    """Raised when onboarding cannot be completed from the given state."""


class OnboardingSaveError(OnboardingError):
    """Raised when the profile could not be stored; safe to retry."""


@dataclass
class OnboardingService:
    """Finishes onboarding by persisting the profile and plan."""

    repository: ProfileRepository

    def start(self) -> OnboardingState:
        """Return a fresh onboarding state."""
        return OnboardingState()

    def complete(self, user_id: UUID, state: OnboardingState) -> NutritionPlan:
        """Persist the collected profile and its plan in one update."""
        if state.current_step != Step.RESULTS:
            raise OnboardingError("Onboarding has not reached the results step")
        for step in state.steps[:-1]:
            if not can_advance(step, state.profile, state.target):
                raise OnboardingError(f"Step {step} is incomplete")
        plan = compute_plan(state.profile, state.goal_target)
        if plan is None:
            raise OnboardingError("Profile is incomplete")

        target = state.goal_target or GoalTarget()
        fields: dict[str, object] = {
            "gender": str(state.profile.gender),
            "age": state.profile.age,
            "weight_kg": state.profile.weight_kg,
            "height_cm": state.profile.height_cm,
            "goal": str(state.profile.goal),
            "target_weight_kg": target.target_weight_kg,
            "timeline_months": target.timeline_months,
            "daily_calories": plan.daily_calories,
            "daily_protein_g": plan.daily_protein_g,
            "daily_carbs_g": plan.daily_carbs_g,
            "daily_fat_g": plan.daily_fat_g,
            "onboarding_complete": True,
        }
        try:
            self.repository.update_profile(user_id, fields)
        except Exception as exc:
            _logger.warning("Failed to save onboarding profile for user %s", user_id)
            raise OnboardingSaveError(
                "Failed to save profile. Please try again."
            ) from exc
        if not plan.is_feasible:
            _logger.info(
                "Saved plan with negative carbs for user %s: %s", user_id, plan
            )
        return plan
