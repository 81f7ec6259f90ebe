"""Today's progress against the stored plan."""

from dataclasses import dataclass
from uuid import UUID

from nutriscan.domain.food_logs import DailyTotals, FoodLogEntry
from nutriscan.domain.profiles import NutritionPlan
from nutriscan.services.food_logs import FoodLogService
from nutriscan.services.profiles import ProfileService
from nutriscan.services.totals import aggregate, progress_percent, remaining


@dataclass
class DailySummary:
    """Plan, entries and derived totals for one day."""

    plan: NutritionPlan | None
    entries: list[FoodLogEntry]
    totals: DailyTotals
    remaining: DailyTotals
    progress_percent: float


@dataclass
class DashboardService:
    """Combines profile and food logs into a daily summary."""

    profile_service: ProfileService
    food_log_service: FoodLogService

    def get_today(self, user_id: UUID, timezone_name: str) -> DailySummary:
        """Return today's summary in the user's timezone."""
        profile = self.profile_service.get_profile(user_id)
        entries = self.food_log_service.list_day(user_id, timezone_name)
        totals = aggregate(entries)
        return DailySummary(
            plan=profile.plan,
            entries=entries,
            totals=totals,
            remaining=remaining(profile.plan, totals),
            progress_percent=progress_percent(profile.plan, totals),
        )
