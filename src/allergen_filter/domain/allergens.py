"""Allergen catalog models."""

from dataclasses import dataclass, field
from enum import Enum


class AllergenKind(str, Enum):
    """Whether an entry is an allergen or a dietary preference."""

    ALLERGEN = "allergen"
    DIETARY = "dietary"


@dataclass(frozen=True)
class Allergen:
    """A cataloged allergen or dietary preference."""

    id: str
    label: str
    icon: str
    column_name: str | None = None
    kind: AllergenKind = AllergenKind.ALLERGEN
    keywords: tuple[str, ...] = ()
    synonyms: tuple[str, ...] = ()

    @property
    def is_dietary(self) -> bool:
        """Return True for dietary preferences such as vegan."""
        return self.kind is AllergenKind.DIETARY


@dataclass(frozen=True)
class AllergenRegistry:
    """Canonical allergen registry shared by reference across the filters.

    Holds id, label, icon, structured column name, ingredient keywords and
    synonyms for every entry, so keyword scanning, text resolution and column
    lookups all read from the same source.
    """

    allergens: tuple[Allergen, ...]
    _by_id: dict[str, Allergen] = field(init=False, repr=False, compare=False)
    _by_column: dict[str, Allergen] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        by_id = {allergen.id: allergen for allergen in self.allergens}
        if len(by_id) != len(self.allergens):
            raise ValueError("Allergen ids must be unique")
        by_column = {
            allergen.column_name.upper(): allergen
            for allergen in self.allergens
            if allergen.column_name
        }
        object.__setattr__(self, "_by_id", by_id)
        object.__setattr__(self, "_by_column", by_column)

    def __contains__(self, allergen_id: object) -> bool:
        return allergen_id in self._by_id

    def __iter__(self):  # type: ignore[no-untyped-def]
        return iter(self.allergens)

    def __len__(self) -> int:
        return len(self.allergens)

    def get(self, allergen_id: str) -> Allergen | None:
        """Return an allergen by id, if cataloged."""
        return self._by_id.get(allergen_id)

    def ids(self) -> list[str]:
        """Return all allergen ids in catalog order."""
        return [allergen.id for allergen in self.allergens]

    def by_column(self, column_name: str) -> Allergen | None:
        """Return the allergen stored under a structured-data column header."""
        return self._by_column.get(column_name.strip().upper())

    def keywords_for(self, allergen_id: str) -> tuple[str, ...]:
        """Return ingredient keywords that indicate the allergen."""
        allergen = self._by_id.get(allergen_id)
        return allergen.keywords if allergen else ()

    def vocabulary(self) -> dict[str, set[str]]:
        """Map every lower-cased id, label and synonym to the allergen ids it names."""
        terms: dict[str, set[str]] = {}
        for allergen in self.allergens:
            for term in (allergen.id, allergen.label, *allergen.synonyms):
                terms.setdefault(term.lower(), set()).add(allergen.id)
        return terms
