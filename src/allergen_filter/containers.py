"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from allergen_filter.adapters.openai_structured_client import OpenAIStructuredClient
from allergen_filter.adapters.supabase_menu_repository import SupabaseMenuRepository
from allergen_filter.catalog import default_registry
from allergen_filter.config import Settings
from allergen_filter.domain.allergens import AllergenRegistry
from allergen_filter.services.ai_analysis import LLMAllergenAnalyzer
from allergen_filter.services.cache import InMemoryCache
from allergen_filter.services.hybrid_filter import HybridFilterService
from allergen_filter.services.interpreter import TextInterpreter
from allergen_filter.services.menu import MenuService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    registry: AllergenRegistry
    menu_service: MenuService
    hybrid_filter: HybridFilterService
    interpreter: TextInterpreter
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    registry = default_registry()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    menu_service = MenuService(
        source=SupabaseMenuRepository(supabase_client, registry),
        cache=InMemoryCache(),
        ttl_seconds=resolved_settings.menu_cache_ttl_seconds,
    )

    openai_client: OpenAIStructuredClient | None = None
    analyzer: LLMAllergenAnalyzer | None = None
    if resolved_settings.openai_api_key:
        openai_client = OpenAIStructuredClient.create(resolved_settings.openai_api_key)
        analyzer = LLMAllergenAnalyzer(
            client=openai_client,
            model=resolved_settings.openai_model,
            reasoning_effort=resolved_settings.openai_reasoning_effort,
            store=resolved_settings.openai_store,
        )

    hybrid_filter = HybridFilterService(
        registry=registry,
        judge=analyzer,
        batch_size=resolved_settings.ai_batch_size,
    )
    interpreter = TextInterpreter(registry=registry, resolver=analyzer)

    async def close_resources() -> None:
        if openai_client is not None:
            await openai_client.close()

    return AppContainer(
        settings=resolved_settings,
        registry=registry,
        menu_service=menu_service,
        hybrid_filter=hybrid_filter,
        interpreter=interpreter,
        close_resources=close_resources,
    )
