"""Deterministic filtering on tri-state allergen columns."""

import logging
from collections.abc import Sequence

from allergen_filter.domain.filtering import FilteredItem, FilterResult
from allergen_filter.domain.menu import ColumnValue, MenuItem

_logger = logging.getLogger(__name__)


def filter_by_columns(
    items: Sequence[MenuItem], allergen_ids: Sequence[str]
) -> FilterResult:
    """Filter items on their structured allergen profile.

    - ``NO`` excludes the item
    - ``CAN BE`` adds a warning naming the allergen
    - ``YES`` passes
    - a missing column is skipped; the caller routes that allergen elsewhere
    """
    if not allergen_ids:
        return FilterResult.all_safe(items)

    safe_items: list[FilteredItem] = []
    caution_items: list[FilteredItem] = []
    excluded_count = 0

    for item in items:
        warnings: list[str] = []
        excluded: list[str] = []
        for allergen_id in allergen_ids:
            value = item.allergen_profile.get(allergen_id)
            if value is None:
                continue
            if value is ColumnValue.UNSAFE:
                excluded.append(allergen_id)
            elif value is ColumnValue.CONDITIONAL:
                warnings.append(allergen_id)

        if excluded:
            excluded_count += 1
            _logger.debug("Excluded %s for %s", item.name, ", ".join(excluded))
        elif warnings:
            caution_items.append(FilteredItem(item=item, warnings=tuple(warnings)))
        else:
            safe_items.append(FilteredItem(item=item))

    return FilterResult(
        safe_items=safe_items,
        caution_items=caution_items,
        excluded_count=excluded_count,
    )
