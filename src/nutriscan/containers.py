"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from nutriscan.adapters.openai_client import OpenAIStructuredClient
from nutriscan.adapters.razorpay_client import HttpxRazorpayClient
from nutriscan.adapters.supabase_auth_verifier import SupabaseTokenVerifier
from nutriscan.adapters.supabase_food_log_repository import (
    SupabaseFoodLogRepository,
)
from nutriscan.adapters.supabase_profile_repository import (
    SupabaseProfileRepository,
)
from nutriscan.config import Settings
from nutriscan.services.auth import AuthService
from nutriscan.services.dashboard import DashboardService
from nutriscan.services.food_logs import FoodLogService
from nutriscan.services.onboarding import OnboardingService
from nutriscan.services.payments import PaymentService
from nutriscan.services.profiles import ProfileService
from nutriscan.services.suggestions import MealSuggestionService
from nutriscan.services.vision import FoodScanService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    auth_service: AuthService
    profile_service: ProfileService
    onboarding_service: OnboardingService
    food_log_service: FoodLogService
    dashboard_service: DashboardService
    food_scan_service: FoodScanService
    suggestion_service: MealSuggestionService
    payment_service: PaymentService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    profile_repository = SupabaseProfileRepository(supabase_client)
    food_log_repository = SupabaseFoodLogRepository(supabase_client)
    auth_service = AuthService(SupabaseTokenVerifier(supabase_client))
    profile_service = ProfileService(profile_repository)
    onboarding_service = OnboardingService(profile_repository)
    food_log_service = FoodLogService(food_log_repository)
    dashboard_service = DashboardService(
        profile_service=profile_service,
        food_log_service=food_log_service,
    )
    openai_client = OpenAIStructuredClient.create(resolved_settings.openai_api_key)
    food_scan_service = FoodScanService(
        client=openai_client,
        model=resolved_settings.openai_model,
        reasoning_effort=resolved_settings.openai_reasoning_effort,
        store=resolved_settings.openai_store,
    )
    suggestion_service = MealSuggestionService(
        client=openai_client,
        model=resolved_settings.openai_model,
        reasoning_effort=resolved_settings.openai_reasoning_effort,
        store=resolved_settings.openai_store,
    )
    razorpay_client = HttpxRazorpayClient.create(
        key_id=resolved_settings.razorpay_key_id,
        key_secret=resolved_settings.razorpay_key_secret,
        base_url=resolved_settings.razorpay_base_url,
    )
    payment_service = PaymentService(
        client=razorpay_client,
        profile_repository=profile_repository,
        key_id=resolved_settings.razorpay_key_id,
        key_secret=resolved_settings.razorpay_key_secret,
    )

    async def close_resources() -> None:
        await razorpay_client.close()
        await openai_client.client.close()

    return AppContainer(
        settings=resolved_settings,
        auth_service=auth_service,
        profile_service=profile_service,
        onboarding_service=onboarding_service,
        food_log_service=food_log_service,
        dashboard_service=dashboard_service,
        food_scan_service=food_scan_service,
        suggestion_service=suggestion_service,
        payment_service=payment_service,
        close_resources=close_resources,
    )
