"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from calorie_tracker.adapters.gemini_estimation_client import (
    HttpxGeminiEstimationClient,
)
from calorie_tracker.adapters.openai_estimation_client import OpenAIEstimationClient
from calorie_tracker.adapters.supabase_entry_repository import SupabaseEntryRepository
from calorie_tracker.adapters.supabase_profile_repository import (
    SupabaseProfileRepository,
)
from calorie_tracker.config import Settings, resolve_provider
from calorie_tracker.services.cache import InMemoryCache
from calorie_tracker.services.dashboard import DashboardService
from calorie_tracker.services.entries import EntryService
from calorie_tracker.services.estimation import EstimationService
from calorie_tracker.services.profiles import ProfileService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    profile_service: ProfileService
    estimation_service: EstimationService
    entry_service: EntryService
    dashboard_service: DashboardService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    profile_service = ProfileService(SupabaseProfileRepository(supabase_client))

    estimation_client: OpenAIEstimationClient | HttpxGeminiEstimationClient
    if resolve_provider(resolved_settings) == "gemini":
        estimation_client = HttpxGeminiEstimationClient.create(
            api_key=resolved_settings.gemini_api_key or "",
            model=resolved_settings.gemini_model,
            base_url=resolved_settings.gemini_base_url,
        )
    else:
        estimation_client = OpenAIEstimationClient.create(
            api_key=resolved_settings.openai_api_key or "",
            model=resolved_settings.openai_model,
            reasoning_effort=resolved_settings.openai_reasoning_effort,
            store=resolved_settings.openai_store,
        )
    estimation_service = EstimationService(
        client=estimation_client,
        cache=InMemoryCache(),
        cache_ttl_seconds=resolved_settings.estimate_cache_ttl_seconds,
    )
    entry_service = EntryService(
        repository=SupabaseEntryRepository(supabase_client),
        estimation_service=estimation_service,
    )
    dashboard_service = DashboardService(
        profile_service=profile_service,
        entry_service=entry_service,
    )

    async def close_resources() -> None:
        await estimation_client.close()

    return AppContainer(
        settings=resolved_settings,
        profile_service=profile_service,
        estimation_service=estimation_service,
        entry_service=entry_service,
        dashboard_service=dashboard_service,
        close_resources=close_resources,
    )
