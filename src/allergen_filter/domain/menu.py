"""Menu domain models."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum


class ColumnValue(str, Enum):
    """Tri-state structured allergen value entered by the venue."""

    SAFE = "YES"
    UNSAFE = "NO"
    CONDITIONAL = "CAN BE"


class CrossContaminationRisk(str, Enum):
    """Venue-level shared-equipment risk for an allergen."""

    NONE = "none"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class MenuRepresentation(str, Enum):
    """Which allergen evidence a menu source provides."""

    COLUMNS = "columns"
    CONFIDENCE = "confidence"


@dataclass(frozen=True)
class MenuItem:
    """A single menu item, read-only to the filtering core."""

    name: str
    ingredients: str = ""
    price: float = 0.0
    allergen_profile: Mapping[str, ColumnValue] = field(default_factory=dict)
    allergen_confidence: Mapping[str, float] = field(default_factory=dict)


@dataclass(frozen=True)
class Menu:
    """Menu items plus the representation the source declares for them."""

    items: tuple[MenuItem, ...]
    representation: MenuRepresentation = MenuRepresentation.COLUMNS

    def has_structured_data(self, allergen_id: str) -> bool:
        """Return True if any item carries evidence for the allergen."""
        if self.representation is MenuRepresentation.CONFIDENCE:
            return any(allergen_id in item.allergen_confidence for item in self.items)
        return any(allergen_id in item.allergen_profile for item in self.items)


def parse_column_value(raw: object) -> ColumnValue | None:
    """Parse a spreadsheet cell into a tri-state value.

    Blank cells mean no structured data. Unrecognized text is treated as
    unsafe so a typo never marks an item safe.
    """
    if raw is None:
        return None
    value = str(raw).strip().upper()
    if not value:
        return None
    if value == ColumnValue.SAFE.value:
        return ColumnValue.SAFE
    if value == ColumnValue.CONDITIONAL.value:
        return ColumnValue.CONDITIONAL
    return ColumnValue.UNSAFE
