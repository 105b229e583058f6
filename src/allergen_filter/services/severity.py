"""Severity thresholds and confidence classification."""

from collections.abc import Iterable

from allergen_filter.domain.filtering import FilterCategory
from allergen_filter.domain.restrictions import DEFAULT_SEVERITY, Severity

SEVERITY_THRESHOLDS: dict[Severity, float] = {
    Severity.PREFERENCE: 0.25,
    Severity.ALLERGY: 0.80,
    Severity.LIFE_THREATENING: 0.95,
}

# Scores between threshold * CAUTION_BAND and threshold are surfaced as caution.
CAUTION_BAND = 0.8

_STRICTNESS = [Severity.PREFERENCE, Severity.ALLERGY, Severity.LIFE_THREATENING]


def threshold_for(severity: Severity) -> float:
    """Return the confidence required to treat an item as safe."""
    return SEVERITY_THRESHOLDS[severity]


def caution_floor(threshold: float) -> float:
    """Return the lowest confidence still surfaced as caution."""
    return round(threshold * CAUTION_BAND, 6)


def classify(confidence: float, threshold: float) -> FilterCategory:
    """Classify a confidence score against a threshold."""
    if confidence >= threshold:
        return FilterCategory.SAFE
    if confidence >= caution_floor(threshold):
        return FilterCategory.CAUTION
    return FilterCategory.EXCLUDED


def strictest_severity(severities: Iterable[Severity]) -> Severity:
    """Return the most conservative severity, defaulting to preference."""
    return max(severities, key=_STRICTNESS.index, default=DEFAULT_SEVERITY)
