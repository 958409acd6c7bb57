"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from calorie_tracker.adapters.fdc_client import HttpxFdcClient
from calorie_tracker.adapters.openai_client import OpenAIStructuredClient
from calorie_tracker.adapters.supabase_food_entry_repository import (
    SupabaseFoodEntryRepository,
)
from calorie_tracker.adapters.supabase_identity_client import SupabaseIdentityClient
from calorie_tracker.config import Settings
from calorie_tracker.services.analysis import FoodAnalysisService
from calorie_tracker.services.cache import InMemoryCache
from calorie_tracker.services.entries import FoodEntryService
from calorie_tracker.services.estimation import EstimationResolver, EstimationService
from calorie_tracker.services.events import LoggingEventSink
from calorie_tracker.services.identity import IdentityService
from calorie_tracker.services.nutrition import DatabaseResolver, NutritionService
from calorie_tracker.services.vision import VisionService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    analysis_service: FoodAnalysisService
    food_entry_service: FoodEntryService
    identity_service: IdentityService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    openai_client = OpenAIStructuredClient.create(resolved_settings.openai_api_key)
    fdc_client = HttpxFdcClient.create(
        api_key=resolved_settings.fdc_api_key,
        base_url=resolved_settings.fdc_base_url,
    )
    events = LoggingEventSink()

    vision_service = VisionService(
        client=openai_client,
        model=resolved_settings.openai_vision_model,
        reasoning_effort=resolved_settings.openai_reasoning_effort,
        store=resolved_settings.openai_store,
    )
    estimation_service = EstimationService(
        client=openai_client,
        model=resolved_settings.openai_estimation_model,
        reasoning_effort=resolved_settings.openai_reasoning_effort,
        store=resolved_settings.openai_store,
    )
    nutrition_service = NutritionService(
        resolvers=[
            DatabaseResolver(
                fdc_client=fdc_client,
                events=events,
                cache=InMemoryCache(),
                page_size=resolved_settings.fdc_page_size,
                search_ttl_seconds=resolved_settings.fdc_search_ttl_seconds,
            ),
            EstimationResolver(service=estimation_service, events=events),
        ],
        events=events,
    )
    analysis_service = FoodAnalysisService(
        vision_service=vision_service,
        nutrition_service=nutrition_service,
    )
    food_entry_service = FoodEntryService(
        SupabaseFoodEntryRepository(supabase_client)
    )
    identity_service = IdentityService(SupabaseIdentityClient(supabase_client))

    async def close_resources() -> None:
        await fdc_client.close()
        await openai_client.close()

    return AppContainer(
        settings=resolved_settings,
        analysis_service=analysis_service,
        food_entry_service=food_entry_service,
        identity_service=identity_service,
        close_resources=close_resources,
    )
