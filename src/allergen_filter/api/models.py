"""HTTP request and response payloads."""

from typing import Any

from pydantic import BaseModel, Field

from allergen_filter.domain.allergens import AllergenRegistry
from allergen_filter.domain.filtering import FilteredItem, FilterResult
from allergen_filter.services.interpreter import InterpretResult
from allergen_filter.services.warnings import format_warnings


class FilterRequest(BaseModel):
    """Restrictions are validated by the normalisation step, not here."""

    restrictions: Any = Field(default_factory=list)
    custom_tags: Any = None


class MenuItemPayload(BaseModel):
    name: str
    ingredients: str
    price: float


class CautionItemPayload(MenuItemPayload):
    warnings: list[str]
    warning_messages: list[str]


class FilterResponse(BaseModel):
    safe_items: list[MenuItemPayload]
    caution_items: list[CautionItemPayload]
    excluded_count: int

    @classmethod
    def from_result(
        cls, result: FilterResult, registry: AllergenRegistry
    ) -> "FilterResponse":
        """Build the response, expanding warnings into diner-facing text."""
        return cls(
            safe_items=[_item_payload(entry) for entry in result.safe_items],
            caution_items=[
                CautionItemPayload(
                    **_item_payload(entry).model_dump(),
                    warnings=list(entry.warnings),
                    warning_messages=format_warnings(entry.warnings, registry),
                )
                for entry in result.caution_items
            ],
            excluded_count=result.excluded_count,
        )


class InterpretRequest(BaseModel):
    text: str = ""


class InterpretResponse(BaseModel):
    matched_allergen_ids: list[str]
    unmatched_remainder: str | None
    method: str

    @classmethod
    def from_result(cls, result: InterpretResult) -> "InterpretResponse":
        return cls(
            matched_allergen_ids=list(result.matched_allergen_ids),
            unmatched_remainder=result.unmatched_remainder,
            method=result.method,
        )


def _item_payload(entry: FilteredItem) -> MenuItemPayload:
    return MenuItemPayload(
        name=entry.item.name,
        ingredients=entry.item.ingredients,
        price=entry.item.price,
    )
