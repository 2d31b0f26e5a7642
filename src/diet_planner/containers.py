"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from pathlib import Path

from supabase import create_client

from diet_planner.adapters.json_food_source import JsonFileFoodSource
from diet_planner.adapters.openai_polish_client import OpenAIPolishClient
from diet_planner.adapters.supabase_food_source import SupabaseFoodSource
from diet_planner.adapters.supabase_override_repository import (
    SupabaseOverrideRepository,
)
from diet_planner.config import Settings
from diet_planner.frameworks.registry import FrameworkRegistry
from diet_planner.services.catalog import CatalogRepository, FoodSource
from diet_planner.services.overrides import OverrideService
from diet_planner.services.planner import WeeklyPlanner
from diet_planner.services.planning import DietPlanService
from diet_planner.services.polish import ReasoningPolisher
from diet_planner.services.scoring import ScoringEngine


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    catalog: CatalogRepository
    registry: FrameworkRegistry
    override_service: OverrideService
    diet_plan_service: DietPlanService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    food_source: FoodSource
    if resolved_settings.catalog_path:
        food_source = JsonFileFoodSource(Path(resolved_settings.catalog_path))
    else:
        food_source = SupabaseFoodSource(
            supabase_client, table=resolved_settings.foods_table
        )
    catalog = CatalogRepository(food_source)
    registry = FrameworkRegistry.default()
    override_service = OverrideService(
        SupabaseOverrideRepository(
            supabase_client, table=resolved_settings.overrides_table
        )
    )
    polish_client = None
    if resolved_settings.polish_enabled and resolved_settings.openai_api_key:
        polish_client = OpenAIPolishClient.create(resolved_settings.openai_api_key)
    polisher = ReasoningPolisher(
        client=polish_client,
        model=resolved_settings.openai_model,
        timeout_seconds=resolved_settings.polish_timeout_seconds,
    )
    diet_plan_service = DietPlanService(
        catalog=catalog,
        registry=registry,
        scoring_engine=ScoringEngine(max_workers=resolved_settings.scoring_workers),
        planner=WeeklyPlanner(),
        override_service=override_service,
        polisher=polisher,
    )

    async def close_resources() -> None:
        if polish_client is not None:
            await polish_client.close()

    return AppContainer(
        settings=resolved_settings,
        catalog=catalog,
        registry=registry,
        override_service=override_service,
        diet_plan_service=diet_plan_service,
        close_resources=close_resources,
    )
