"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from pantry_tracker.adapters.fdc_client import HttpxFdcClient
from pantry_tracker.adapters.openai_text_client import OpenAITextClient
from pantry_tracker.adapters.supabase_pantry_repository import (
    SupabasePantryRepository,
)
from pantry_tracker.adapters.supabase_recipe_repository import (
    SupabaseRecipeRepository,
)
from pantry_tracker.config import Settings
from pantry_tracker.services.cache import InMemoryCache
from pantry_tracker.services.cooking import CookService
from pantry_tracker.services.food_search import FoodSearchService
from pantry_tracker.services.lifespan import LifespanEstimator
from pantry_tracker.services.pantry import PantryService
from pantry_tracker.services.recipe_generation import RecipeGenerator
from pantry_tracker.services.recipes import RecipeService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    lifespan_estimator: LifespanEstimator
    pantry_service: PantryService
    recipe_service: RecipeService
    cook_service: CookService
    food_search_service: FoodSearchService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    pantry_repository = SupabasePantryRepository(supabase_client)
    recipe_repository = SupabaseRecipeRepository(supabase_client)
    text_client = OpenAITextClient.create(
        resolved_settings.openai_api_key,
        resolved_settings.openai_model,
        reasoning_effort=resolved_settings.openai_reasoning_effort,
        store=resolved_settings.openai_store,
        timeout_seconds=resolved_settings.openai_timeout_seconds,
    )
    fdc_client = HttpxFdcClient.create(
        api_key=resolved_settings.fdc_api_key,
        base_url=resolved_settings.fdc_base_url,
    )
    lifespan_estimator = LifespanEstimator(text_client)
    pantry_service = PantryService(
        repository=pantry_repository,
        estimator=lifespan_estimator,
    )
    recipe_service = RecipeService(
        repository=recipe_repository,
        generator=RecipeGenerator(text_client),
    )
    cook_service = CookService(
        recipe_repository=recipe_repository,
        pantry_repository=pantry_repository,
    )
    food_search_service = FoodSearchService(
        fdc_client=fdc_client,
        cache=InMemoryCache(),
    )

    async def close_resources() -> None:
        await text_client.close()
        await fdc_client.close()

    return AppContainer(
        settings=resolved_settings,
        lifespan_estimator=lifespan_estimator,
        pantry_service=pantry_service,
        recipe_service=recipe_service,
        cook_service=cook_service,
        food_search_service=food_search_service,
        close_resources=close_resources,
    )
