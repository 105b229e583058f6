"""Rule-based confidence scoring for menu items.

A confidence score is the estimated probability (0-1) that an item is free of
an allergen. Scores are computed without AI calls so they can be stored at
ingestion time and used for fast query-time filtering.

Resolution order for the base score:
  1. explicit "free of" flag      -> EXPLICIT_FREE
  2. explicit "contains" flag     -> EXPLICIT_CONTAINS
  3. no ingredient text           -> NO_INGREDIENT_DATA
  4. allergen keyword in text     -> KEYWORD_FOUND
  5. text present, no keyword     -> NO_KEYWORD_FOUND

The venue's cross-contamination risk is applied afterwards and the result is
clamped to [0, 1].
"""

from collections.abc import Iterable, Mapping

from allergen_filter.domain.allergens import Allergen, AllergenRegistry
from allergen_filter.domain.menu import CrossContaminationRisk, MenuItem

EXPLICIT_FREE = 0.95
EXPLICIT_CONTAINS = 0.05
KEYWORD_FOUND = 0.10
NO_KEYWORD_FOUND = 0.60
# Passes preference thresholds, fails allergy and life-threatening ones.
DEFAULT_NO_DATA_CONFIDENCE = 0.30
NO_INGREDIENT_DATA = DEFAULT_NO_DATA_CONFIDENCE

CROSS_CONTAMINATION_ADJUSTMENTS: dict[CrossContaminationRisk, float] = {
    CrossContaminationRisk.NONE: 0.20,
    CrossContaminationRisk.LOW: 0.10,
    CrossContaminationRisk.MEDIUM: 0.0,
    CrossContaminationRisk.HIGH: -0.20,
}

ConfidenceMap = dict[str, float]


def clamp_confidence(value: float) -> float:
    """Clamp a confidence value to [0, 1]."""
    return max(0.0, min(1.0, value))


def contains_keyword(ingredients: str, keywords: Iterable[str]) -> bool:
    """Return True if any keyword appears in the ingredient text."""
    lowered = ingredients.lower()
    return any(keyword.lower() in lowered for keyword in keywords)


def compute_confidence(
    allergen: Allergen,
    ingredients: str | None,
    explicit_flag: bool | None = None,
    risk: CrossContaminationRisk | None = None,
) -> float:
    """Compute the probability an item is free of a single allergen."""
    text = (ingredients or "").strip()
    if explicit_flag is True:
        score = EXPLICIT_FREE
    elif explicit_flag is False:
        score = EXPLICIT_CONTAINS
    elif not text:
        score = NO_INGREDIENT_DATA
    elif contains_keyword(text, allergen.keywords):
        score = KEYWORD_FOUND
    else:
        score = NO_KEYWORD_FOUND

    if risk is not None:
        score += CROSS_CONTAMINATION_ADJUSTMENTS[risk]
    return round(clamp_confidence(score), 2)


def compute_item_confidence(
    registry: AllergenRegistry,
    ingredients: str | None,
    explicit_flags: Mapping[str, bool] | None = None,
    venue_risks: Mapping[str, CrossContaminationRisk] | None = None,
) -> ConfidenceMap:
    """Compute confidence scores for every cataloged allergen."""
    flags = explicit_flags or {}
    risks = venue_risks or {}
    return {
        allergen.id: compute_confidence(
            allergen,
            ingredients,
            explicit_flag=flags.get(allergen.id),
            risk=risks.get(allergen.id),
        )
        for allergen in registry
    }


def compute_batch_confidence(
    registry: AllergenRegistry,
    items: Iterable[tuple[MenuItem, Mapping[str, bool]]],
    venue_risks: Mapping[str, CrossContaminationRisk] | None = None,
) -> dict[str, ConfidenceMap]:
    """Compute confidence maps for many items, keyed by item name.

    Each item is scored independently; no state is shared across items.
    """
    return {
        item.name: compute_item_confidence(
            registry, item.ingredients, explicit_flags=flags, venue_risks=venue_risks
        )
        for item, flags in items
    }
