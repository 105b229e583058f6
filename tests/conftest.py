"""Shared test fixtures."""

from collections.abc import Sequence
from dataclasses import dataclass, field

import pytest

from allergen_filter.catalog import default_registry
from allergen_filter.config import Settings
from allergen_filter.containers import AppContainer
from allergen_filter.domain.allergens import AllergenRegistry
from allergen_filter.domain.errors import AICapabilityError
from allergen_filter.domain.filtering import FilterCategory
from allergen_filter.domain.judgments import ItemJudgment
from allergen_filter.domain.menu import ColumnValue, Menu, MenuItem
from allergen_filter.domain.restrictions import AIRestriction
from allergen_filter.services.ai_analysis import StructuredLLMClient
from allergen_filter.services.cache import InMemoryCache
from allergen_filter.services.hybrid_filter import HybridFilterService, ItemJudge
from allergen_filter.services.interpreter import TextInterpreter, TextResolver
from allergen_filter.services.menu import MenuService, MenuSource

DEMO_VENUE = "demo-bistro"


def make_item(name: str, ingredients: str = "", **profile: str) -> MenuItem:
    """Build a column-representation item, e.g. ``make_item("Soup", dairy="NO")``."""
    return MenuItem(
        name=name,
        ingredients=ingredients,
        price=9.5,
        allergen_profile={key: ColumnValue(value) for key, value in profile.items()},
    )


def demo_menu() -> Menu:
    return Menu(
        items=(
            make_item(
                "Garden Salad",
                "lettuce, tomato, olive oil",
                dairy="YES",
                gluten="YES",
            ),
            make_item(
                "Caesar Salad",
                "romaine, parmesan, croutons",
                dairy="NO",
                gluten="CAN BE",
            ),
            make_item("Margherita Pizza", "flour, mozzarella", dairy="NO", gluten="NO"),
            make_item("Fries", "potato, sunflower oil", dairy="YES", gluten="CAN BE"),
        )
    )


@dataclass
class InMemoryMenuSource(MenuSource):
    """In-memory menu source that counts reads."""

    menus: dict[str, Menu] = field(default_factory=dict)
    reads: list[str] = field(default_factory=list)

    def get_menu(self, venue_slug: str) -> Menu | None:
        self.reads.append(venue_slug)
        return self.menus.get(venue_slug)


@dataclass
class FakeJudge(ItemJudge):
    """Fake AI judge with per-item confidences (0-100) and scripted failures."""

    confidences: dict[str, float] = field(default_factory=dict)
    warnings: dict[str, list[str]] = field(default_factory=dict)
    default_confidence: float = 95.0
    omit: set[str] = field(default_factory=set)
    silent_calls: set[int] = field(default_factory=set)
    fail_calls: set[int] = field(default_factory=set)
    calls: list[tuple[list[str], list[AIRestriction]]] = field(default_factory=list)

    async def judge_items(
        self, items: Sequence[MenuItem], restrictions: Sequence[AIRestriction]
    ) -> list[ItemJudgment]:
        self.calls.append(([item.name for item in items], list(restrictions)))
        if len(self.calls) in self.fail_calls:
            raise AICapabilityError("model unavailable")
        if len(self.calls) in self.silent_calls:
            return []
        judgments = []
        for item in items:
            if item.name in self.omit:
                continue
            confidence = self.confidences.get(item.name, self.default_confidence)
            judgments.append(
                ItemJudgment(
                    item_name=item.name,
                    status=_status_for(confidence),
                    confidence=confidence,
                    warnings=self.warnings.get(item.name, []),
                    reason="scripted",
                )
            )
        return judgments


def _status_for(confidence: float) -> FilterCategory:
    if confidence >= 80:
        return FilterCategory.SAFE
    if confidence >= 40:
        return FilterCategory.CAUTION
    return FilterCategory.EXCLUDED


@dataclass
class FakeResolver(TextResolver):
    """Fake AI text resolver returning scripted ids."""

    allergen_ids: list[str] = field(default_factory=list)
    error: Exception | None = None
    calls: list[str] = field(default_factory=list)

    async def resolve_text(self, text: str, vocabulary: Sequence[str]) -> list[str]:
        self.calls.append(text)
        if self.error is not None:
            raise self.error
        return list(self.allergen_ids)


@dataclass
class FakeStructuredClient(StructuredLLMClient):
    """Fake structured LLM client that records prompts."""

    payload: dict[str, object] = field(default_factory=dict)
    calls: list[dict[str, object]] = field(default_factory=list)

    async def complete(  # noqa: PLR0913
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        prompt: str,
        schema: dict[str, object],
        schema_name: str,
    ) -> dict[str, object]:
        self.calls.append(
            {
                "model": model,
                "reasoning_effort": reasoning_effort,
                "store": store,
                "prompt": prompt,
                "schema": schema,
                "schema_name": schema_name,
            }
        )
        return self.payload


@pytest.fixture
def registry() -> AllergenRegistry:
    return default_registry()


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="service.key.signature",
        admin_token="admin-token",
        openai_api_key="openai-key",
    )


@pytest.fixture
def menu_source() -> InMemoryMenuSource:
    return InMemoryMenuSource(menus={DEMO_VENUE: demo_menu()})


@pytest.fixture
def judge() -> FakeJudge:
    return FakeJudge()


@pytest.fixture
def resolver() -> FakeResolver:
    return FakeResolver()


@pytest.fixture
def container(
    settings: Settings,
    registry: AllergenRegistry,
    menu_source: InMemoryMenuSource,
    judge: FakeJudge,
    resolver: FakeResolver,
) -> AppContainer:
    menu_service = MenuService(
        source=menu_source,
        cache=InMemoryCache(),
        ttl_seconds=settings.menu_cache_ttl_seconds,
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        registry=registry,
        menu_service=menu_service,
        hybrid_filter=HybridFilterService(
            registry=registry, judge=judge, batch_size=settings.ai_batch_size
        ),
        interpreter=TextInterpreter(registry=registry, resolver=resolver),
        close_resources=close_resources,
    )
