"""Human-readable warning text."""

from collections.abc import Iterable

from allergen_filter.domain.allergens import AllergenRegistry


def format_warnings(warnings: Iterable[str], registry: AllergenRegistry) -> list[str]:
    """Turn allergen ids into "can be made X-free on request" messages.

    Dietary preferences read "can be made Vegan on request". Warnings that are
    not cataloged ids (AI reasons, staff notices) are returned unchanged.
    """
    messages: list[str] = []
    for warning in warnings:
        allergen = registry.get(warning)
        if allergen is None:
            messages.append(warning)
        elif allergen.is_dietary:
            messages.append(f"Can be made {allergen.label} on request")
        else:
            messages.append(f"Can be made {allergen.label}-free on request")
    return messages
