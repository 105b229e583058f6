"""Normalization of raw restriction input.

This is the only place severity defaults are applied, so every downstream
component can assume a populated severity.
"""

import logging
from collections.abc import Mapping

from allergen_filter.domain.allergens import AllergenRegistry
from allergen_filter.domain.errors import MalformedInputError
from allergen_filter.domain.restrictions import (
    DEFAULT_SEVERITY,
    CustomTag,
    Restriction,
    Severity,
)
from allergen_filter.services.severity import strictest_severity

_logger = logging.getLogger(__name__)


def parse_severity(raw: object) -> Severity:
    """Parse a severity value, defaulting to preference when absent."""
    if raw is None or raw == "":
        return DEFAULT_SEVERITY
    if isinstance(raw, Severity):
        return raw
    if isinstance(raw, str):
        try:
            return Severity(raw.strip().lower())
        except ValueError:
            pass
    raise MalformedInputError(f"Unknown severity: {raw!r}")


def normalize_restrictions(
    raw: object, registry: AllergenRegistry
) -> list[Restriction]:
    """Normalize raw restriction entries into restrictions with severities.

    Unknown allergen ids are skipped rather than failing the request.
    Repeated ids keep their strictest severity and first position.
    """
    if not isinstance(raw, list | tuple):
        raise MalformedInputError("restrictions must be a list")

    merged: dict[str, Severity] = {}
    for entry in raw:
        restriction = _parse_restriction(entry)
        if restriction.allergen_id not in registry:
            _logger.warning(
                "Skipping unknown allergen reference: %s", restriction.allergen_id
            )
            continue
        previous = merged.get(restriction.allergen_id)
        merged[restriction.allergen_id] = (
            restriction.severity
            if previous is None
            else strictest_severity([previous, restriction.severity])
        )
    return [
        Restriction(allergen_id=allergen_id, severity=severity)
        for allergen_id, severity in merged.items()
    ]


def normalize_custom_tags(raw: object) -> list[CustomTag]:
    """Normalize raw custom tag entries, dropping blank ones."""
    if raw is None:
        return []
    if not isinstance(raw, list | tuple):
        raise MalformedInputError("custom tags must be a list")

    tags: list[CustomTag] = []
    for entry in raw:
        tag = _parse_custom_tag(entry)
        if tag is not None:
            tags.append(tag)
    return tags


def _parse_restriction(entry: object) -> Restriction:
    if isinstance(entry, Restriction):
        return entry
    if isinstance(entry, str):
        return Restriction(allergen_id=entry.strip().lower())
    if isinstance(entry, Mapping):
        allergen_id = entry.get("allergen_id", entry.get("id"))
        if not isinstance(allergen_id, str) or not allergen_id.strip():
            raise MalformedInputError(f"Restriction has no allergen id: {entry!r}")
        return Restriction(
            allergen_id=allergen_id.strip().lower(),
            severity=parse_severity(entry.get("severity", entry.get("type"))),
        )
    raise MalformedInputError(f"Unrecognized restriction entry: {entry!r}")


def _parse_custom_tag(entry: object) -> CustomTag | None:
    if isinstance(entry, CustomTag):
        return entry if entry.text.strip() else None
    if isinstance(entry, str):
        text = entry.strip()
        return CustomTag(text=text, label=text) if text else None
    if isinstance(entry, Mapping):
        text = entry.get("text")
        if not isinstance(text, str):
            raise MalformedInputError(f"Custom tag has no text: {entry!r}")
        text = text.strip()
        if not text:
            return None
        label = entry.get("label")
        return CustomTag(
            text=text,
            label=label.strip() if isinstance(label, str) and label.strip() else text,
            severity=parse_severity(entry.get("severity", entry.get("type"))),
        )
    raise MalformedInputError(f"Unrecognized custom tag entry: {entry!r}")
