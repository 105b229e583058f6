"""Domain models for diner restrictions."""

from dataclasses import dataclass
from enum import Enum


class Severity(str, Enum):
    """How strict a restriction is, from soft to near-absolute."""

    PREFERENCE = "preference"
    ALLERGY = "allergy"
    LIFE_THREATENING = "life_threatening"


DEFAULT_SEVERITY = Severity.PREFERENCE


@dataclass(frozen=True)
class Restriction:
    """A known allergen the diner needs to avoid."""

    allergen_id: str
    severity: Severity = DEFAULT_SEVERITY


@dataclass(frozen=True)
class CustomTag:
    """Free-text restriction that did not resolve to a cataloged allergen."""

    text: str
    label: str
    severity: Severity = DEFAULT_SEVERITY


@dataclass(frozen=True)
class AIRestriction:
    """Restriction phrase sent to the AI judgment capability."""

    text: str
    severity: Severity
