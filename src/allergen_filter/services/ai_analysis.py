"""LLM-backed ingredient analysis and allergy text resolution."""

import json
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol

from pydantic import ValidationError

from allergen_filter.domain.errors import AICapabilityError
from allergen_filter.domain.judgments import ItemJudgment, JudgmentBatch, TextResolution
from allergen_filter.domain.menu import MenuItem
from allergen_filter.domain.restrictions import AIRestriction

JUDGMENT_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "items": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "item_name": {"type": "string"},
                    "status": {
                        "type": "string",
                        "enum": ["safe", "caution", "excluded"],
                    },
                    "confidence": {"type": "number", "minimum": 0, "maximum": 100},
                    "warnings": {"type": "array", "items": {"type": "string"}},
                    "reason": {"type": "string"},
                },
                "required": ["item_name", "status", "confidence", "warnings", "reason"],
                "additionalProperties": False,
            },
        }
    },
    "required": ["items"],
    "additionalProperties": False,
}

RESOLUTION_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "allergen_ids": {"type": "array", "items": {"type": "string"}},
    },
    "required": ["allergen_ids"],
    "additionalProperties": False,
}

_JUDGMENT_GUIDE = """For each item, provide:
1. "status":
   - "safe": the item clearly does NOT contain any restricted ingredient
   - "caution": the item MIGHT contain a restricted ingredient, or it is unclear
   - "excluded": the item DEFINITELY contains a restricted ingredient
2. "confidence": 0-100, how certain you are the item is FREE of the restrictions
   - 90-100: ingredients clearly show no restricted items
   - 70-89: likely safe, but the ingredient list may be incomplete
   - 40-69: uncertain, might contain hidden sources
   - 0-39: likely or definitely contains restricted items
3. "warnings": short reasons a diner should check with staff, or []
4. "reason": one sentence explaining the verdict

Consider whether the ingredient list is complete, common hidden sources, and
whether the dish typically contains these items even when not listed.
Be conservative: if unsure, lower the confidence score.
Use the exact item name given for "item_name"."""


class StructuredLLMClient(Protocol):
    """Interface for LLM calls that return schema-constrained JSON."""

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
        """Return structured output parsed from the model response."""


@dataclass
class LLMAllergenAnalyzer:
    """Builds prompts for the LLM and validates what comes back."""

    client: StructuredLLMClient
    model: str
    reasoning_effort: str | None
    store: bool

    async def judge_items(
        self, items: Sequence[MenuItem], restrictions: Sequence[AIRestriction]
    ) -> list[ItemJudgment]:
        """Judge each item against the restriction phrases."""
        raw = await self.client.complete(
            model=self.model,
            reasoning_effort=self.reasoning_effort,
            store=self.store,
            prompt=build_judgment_prompt(items, restrictions),
            schema=JUDGMENT_SCHEMA,
            schema_name="menu_item_judgments",
        )
        try:
            return JudgmentBatch.model_validate(raw).items
        except ValidationError as exc:
            raise AICapabilityError(f"Invalid judgment output: {exc}") from exc

    async def resolve_text(self, text: str, vocabulary: Sequence[str]) -> list[str]:
        """Map free-form allergy text onto the allowed allergen ids."""
        raw = await self.client.complete(
            model=self.model,
            reasoning_effort=self.reasoning_effort,
            store=self.store,
            prompt=build_resolution_prompt(text, vocabulary),
            schema=RESOLUTION_SCHEMA,
            schema_name="allergen_resolution",
        )
        try:
            return TextResolution.model_validate(raw).allergen_ids
        except ValidationError as exc:
            raise AICapabilityError(f"Invalid resolution output: {exc}") from exc


def build_judgment_prompt(
    items: Sequence[MenuItem], restrictions: Sequence[AIRestriction]
) -> str:
    """Build the ingredient analysis prompt for a batch of items."""
    restriction_lines = "\n".join(
        f"- {restriction.text} (severity: {restriction.severity.value})"
        for restriction in restrictions
    )
    menu_json = json.dumps(
        [{"name": item.name, "ingredients": item.ingredients} for item in items],
        indent=2,
        ensure_ascii=False,
    )
    return (
        "You are a food safety analyzer for a restaurant. "
        "Analyze each menu item for the following dietary restrictions.\n\n"
        f"RESTRICTIONS:\n{restriction_lines}\n\n"
        f"MENU ITEMS:\n{menu_json}\n\n"
        f"{_JUDGMENT_GUIDE}"
    )


def build_resolution_prompt(text: str, vocabulary: Sequence[str]) -> str:
    """Build the prompt mapping free text onto known allergen ids."""
    return (
        "You are an allergy text interpreter for a restaurant menu system.\n\n"
        "Map the user text to any matching allergens from this list:\n"
        f"{', '.join(vocabulary)}\n\n"
        f'User text: "{text}"\n\n'
        "Rules:\n"
        '- Handle spelling errors (e.g., "dary" -> dairy, "glutin" -> gluten)\n'
        '- Handle synonyms (e.g., "lactose" -> dairy, "wheat" -> gluten)\n'
        '- Handle related terms (e.g., "tree nuts" -> pistachio, walnut, almond)\n'
        "- Only return allergens from the list\n"
        "- If nothing matches, return an empty list"
    )
