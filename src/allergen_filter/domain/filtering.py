"""Filter result models."""

from dataclasses import dataclass, field
from enum import Enum

from allergen_filter.domain.menu import MenuItem


class FilterCategory(str, Enum):
    """Classification of an item against a restriction."""

    SAFE = "safe"
    CAUTION = "caution"
    EXCLUDED = "excluded"


@dataclass(frozen=True)
class FilteredItem:
    """An item that survived filtering, with ordered warnings."""

    item: MenuItem
    warnings: tuple[str, ...] = ()

    @property
    def safe(self) -> bool:
        """Return True when the item carries no warnings."""
        return not self.warnings


@dataclass(frozen=True)
class FilterResult:
    """Exhaustive safe/caution/excluded partition of the considered items."""

    safe_items: list[FilteredItem] = field(default_factory=list)
    caution_items: list[FilteredItem] = field(default_factory=list)
    excluded_count: int = 0

    @property
    def total(self) -> int:
        """Return the number of items this result accounts for."""
        return len(self.safe_items) + len(self.caution_items) + self.excluded_count

    @classmethod
    def all_safe(cls, items: "list[MenuItem] | tuple[MenuItem, ...]") -> "FilterResult":
        """Return a result that passes every item through untouched."""
        return cls(safe_items=[FilteredItem(item=item) for item in items])
