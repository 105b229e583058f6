"""Severity-aware filtering on pre-computed confidence maps."""

from collections.abc import Sequence

from allergen_filter.domain.filtering import FilterCategory, FilteredItem, FilterResult
from allergen_filter.domain.menu import MenuItem
from allergen_filter.domain.restrictions import Restriction
from allergen_filter.services.confidence import DEFAULT_NO_DATA_CONFIDENCE
from allergen_filter.services.severity import classify, threshold_for


def filter_by_confidence(
    items: Sequence[MenuItem], restrictions: Sequence[Restriction]
) -> FilterResult:
    """Classify each item per restriction using its confidence map.

    Allergens missing from an item's map score DEFAULT_NO_DATA_CONFIDENCE.
    The first excluded restriction excludes the item; cautions accumulate as
    warnings in restriction order.
    """
    if not restrictions:
        return FilterResult.all_safe(items)

    safe_items: list[FilteredItem] = []
    caution_items: list[FilteredItem] = []
    excluded_count = 0

    for item in items:
        warnings: list[str] = []
        excluded = False
        for restriction in restrictions:
            confidence = item.allergen_confidence.get(
                restriction.allergen_id, DEFAULT_NO_DATA_CONFIDENCE
            )
            category = classify(confidence, threshold_for(restriction.severity))
            if category is FilterCategory.EXCLUDED:
                excluded = True
                break
            if category is FilterCategory.CAUTION:
                warnings.append(restriction.allergen_id)

        if excluded:
            excluded_count += 1
        elif warnings:
            caution_items.append(FilteredItem(item=item, warnings=tuple(warnings)))
        else:
            safe_items.append(FilteredItem(item=item))

    return FilterResult(
        safe_items=safe_items,
        caution_items=caution_items,
        excluded_count=excluded_count,
    )
