"""Models for AI judgment and text-resolution results."""

from pydantic import BaseModel, Field

from allergen_filter.domain.filtering import FilterCategory


class ItemJudgment(BaseModel):
    """AI verdict for a single menu item against the restriction phrases."""

    item_name: str
    status: FilterCategory
    confidence: float = Field(ge=0.0, le=100.0)
    warnings: list[str] = Field(default_factory=list)
    reason: str = ""


class JudgmentBatch(BaseModel):
    """Structured output for a batch of item judgments."""

    items: list[ItemJudgment]


class TextResolution(BaseModel):
    """Structured output for free-text allergen resolution."""

    allergen_ids: list[str]
