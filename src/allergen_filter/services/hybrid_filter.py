"""Two-stage menu filtering: deterministic columns first, AI on the remainder."""

import logging
from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol

from allergen_filter.domain.allergens import AllergenRegistry
from allergen_filter.domain.filtering import FilterCategory, FilteredItem, FilterResult
from allergen_filter.domain.judgments import ItemJudgment
from allergen_filter.domain.menu import Menu, MenuItem, MenuRepresentation
from allergen_filter.domain.restrictions import AIRestriction, CustomTag, Restriction
from allergen_filter.services.column_filter import filter_by_columns
from allergen_filter.services.confidence import DEFAULT_NO_DATA_CONFIDENCE
from allergen_filter.services.confidence_filter import filter_by_confidence
from allergen_filter.services.severity import (
    classify,
    strictest_severity,
    threshold_for,
)

_logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 20
AI_FAILED_WARNING = "AI analysis unavailable - please verify with staff"
NOT_ANALYZED_WARNING = "Unable to determine - please ask staff"


class ItemJudge(Protocol):
    """AI capability judging menu items against restriction phrases."""

    async def judge_items(
        self, items: Sequence[MenuItem], restrictions: Sequence[AIRestriction]
    ) -> list[ItemJudgment]:
        """Return per-item judgments; items may be missing from the output."""


@dataclass
class HybridFilterService:
    """Composes column/confidence filtering with AI ingredient analysis.

    Restrictions with structured data are filtered deterministically over the
    full menu. Only the items that survive are sent to the AI judge, in batches
    of at most ``batch_size``. A failed batch degrades to caution with the
    no-data confidence, which still goes through the severity threshold, so a
    failure can never mark an item safe for an allergy.
    """

    registry: AllergenRegistry
    judge: ItemJudge | None = None
    batch_size: int = DEFAULT_BATCH_SIZE

    async def filter(
        self,
        menu: Menu,
        restrictions: Sequence[Restriction],
        custom_tags: Sequence[CustomTag] = (),
    ) -> FilterResult:
        """Filter a menu against allergen restrictions and custom tags."""
        structured: list[Restriction] = []
        needs_ai: list[Restriction] = []
        for restriction in restrictions:
            if restriction.allergen_id not in self.registry:
                _logger.warning(
                    "Skipping unknown allergen reference: %s", restriction.allergen_id
                )
            elif menu.has_structured_data(restriction.allergen_id):
                structured.append(restriction)
            else:
                needs_ai.append(restriction)

        stage = self.filter_deterministic(menu, structured)
        if not needs_ai and not custom_tags:
            return stage

        candidates = stage.safe_items + stage.caution_items
        if not candidates:
            return stage

        ai_restrictions = [
            AIRestriction(text=self._label(r.allergen_id), severity=r.severity)
            for r in needs_ai
        ] + [AIRestriction(text=tag.text, severity=tag.severity) for tag in custom_tags]
        severity = strictest_severity(r.severity for r in ai_restrictions)
        threshold = threshold_for(severity)
        _logger.info(
            "Hybrid filter: %s of %s items to AI, threshold %s (%s)",
            len(candidates),
            len(menu.items),
            threshold,
            severity.value,
        )

        judgments = await self._judge_all(
            [candidate.item for candidate in candidates], ai_restrictions
        )
        restriction_texts = tuple(r.text for r in ai_restrictions)

        safe_items: list[FilteredItem] = []
        caution_items: list[FilteredItem] = []
        ai_excluded = 0
        for candidate, judgment in zip(candidates, judgments, strict=True):
            category = classify(judgment.confidence / 100, threshold)
            if category is FilterCategory.EXCLUDED:
                ai_excluded += 1
                continue
            reasons = tuple(judgment.warnings)
            if category is FilterCategory.SAFE and not (candidate.warnings or reasons):
                safe_items.append(FilteredItem(item=candidate.item))
                continue
            if category is FilterCategory.CAUTION and not reasons:
                reasons = restriction_texts
            caution_items.append(
                FilteredItem(
                    item=candidate.item,
                    warnings=_ordered_union(candidate.warnings, reasons),
                )
            )

        return FilterResult(
            safe_items=safe_items,
            caution_items=caution_items,
            excluded_count=stage.excluded_count + ai_excluded,
        )

    @staticmethod
    def filter_deterministic(
        menu: Menu, restrictions: Sequence[Restriction]
    ) -> FilterResult:
        """Run the filter matching the menu's declared representation."""
        if menu.representation is MenuRepresentation.CONFIDENCE:
            return filter_by_confidence(menu.items, restrictions)
        return filter_by_columns(menu.items, [r.allergen_id for r in restrictions])

    async def _judge_all(
        self, items: list[MenuItem], restrictions: list[AIRestriction]
    ) -> list[ItemJudgment]:
        """Judge items batch by batch, isolating failures per batch.

        The returned judgments line up position by position with ``items``.
        """
        texts = ", ".join(r.text for r in restrictions)
        results: list[ItemJudgment] = []
        for start in range(0, len(items), self.batch_size):
            batch = items[start : start + self.batch_size]
            if self.judge is None:
                _logger.warning("AI judge not configured; defaulting batch to caution")
                warning = f"Please verify with staff regarding: {texts}"
                results.extend(_fallback(batch, warning, "AI analysis unavailable"))
                continue
            try:
                judged = await self.judge.judge_items(batch, restrictions)
            except Exception:
                _logger.exception(
                    "AI batch %s failed; defaulting to caution",
                    start // self.batch_size + 1,
                )
                results.extend(
                    _fallback(
                        batch, AI_FAILED_WARNING, "Unable to analyze automatically"
                    )
                )
                continue
            results.extend(_match_batch(batch, judged))
        return results

    def _label(self, allergen_id: str) -> str:
        allergen = self.registry.get(allergen_id)
        return allergen.label if allergen else allergen_id


def _match_batch(
    batch: Sequence[MenuItem], judged: Sequence[ItemJudgment]
) -> list[ItemJudgment]:
    """Pair echoed judgments with the batch's items by name.

    A name repeated within the batch cannot be attributed to one item, so
    those items fall back the same way as items the model did not echo.
    """
    name_counts = Counter(item.name for item in batch)
    by_name: dict[str, ItemJudgment] = {}
    for judgment in judged:
        if name_counts.get(judgment.item_name) == 1:
            by_name.setdefault(judgment.item_name, judgment)

    matched: list[ItemJudgment] = []
    for item in batch:
        judgment = by_name.get(item.name)
        if judgment is None:
            _logger.warning("No AI judgment for %s; defaulting to caution", item.name)
            judgment = _fallback_judgment(
                item, NOT_ANALYZED_WARNING, "Item not analyzed"
            )
        matched.append(judgment)
    return matched


def _fallback(
    items: Sequence[MenuItem], warning: str, reason: str
) -> list[ItemJudgment]:
    return [_fallback_judgment(item, warning, reason) for item in items]


def _fallback_judgment(item: MenuItem, warning: str, reason: str) -> ItemJudgment:
    return ItemJudgment(
        item_name=item.name,
        status=FilterCategory.CAUTION,
        confidence=round(DEFAULT_NO_DATA_CONFIDENCE * 100, 2),
        warnings=[warning],
        reason=reason,
    )


def _ordered_union(first: Sequence[str], second: Sequence[str]) -> tuple[str, ...]:
    return tuple(dict.fromkeys([*first, *second]))
