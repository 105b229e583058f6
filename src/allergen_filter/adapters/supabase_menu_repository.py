"""Supabase menu source."""

import logging
from dataclasses import dataclass

from supabase import Client

from allergen_filter.domain.allergens import AllergenRegistry
from allergen_filter.domain.menu import (
    ColumnValue,
    CrossContaminationRisk,
    Menu,
    MenuItem,
    MenuRepresentation,
    parse_column_value,
)
from allergen_filter.services.confidence import (
    clamp_confidence,
    compute_item_confidence,
)
from allergen_filter.services.menu import MenuSource

_logger = logging.getLogger(__name__)

_FREE_SUFFIX = "_free"


@dataclass
class SupabaseMenuRepository(MenuSource):
    """Reads venue menus stored with per-item confidence maps."""

    client: Client
    registry: AllergenRegistry

    def get_menu(self, venue_slug: str) -> Menu | None:
        """Return the active menu for a venue slug."""
        response = (
            self.client.table("venues")
            .select("id, name, slug")
            .eq("slug", venue_slug)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        venue_id = str(response.data[0]["id"])

        risks = self.list_cross_contamination(venue_id)
        response = (
            self.client.table("menu_items")
            .select("name, price, ingredients, allergen_profile, allergen_confidence")
            .eq("venue_id", venue_id)
            .eq("is_active", True)
            .order("sort_order", desc=False)
            .execute()
        )
        items = tuple(
            self._parse_item(row, risks)
            for row in response.data or []
            if row.get("name")
        )
        return Menu(items=items, representation=MenuRepresentation.CONFIDENCE)

    def list_cross_contamination(
        self, venue_id: str
    ) -> dict[str, CrossContaminationRisk]:
        """Return the venue's per-allergen cross-contamination risk levels."""
        response = (
            self.client.table("venue_cross_contamination")
            .select("allergen_id, risk_level")
            .eq("venue_id", venue_id)
            .execute()
        )
        risks: dict[str, CrossContaminationRisk] = {}
        for row in response.data or []:
            allergen_id = row.get("allergen_id")
            try:
                level = CrossContaminationRisk(row.get("risk_level"))
            except ValueError:
                _logger.warning("Ignoring risk level %r", row.get("risk_level"))
                continue
            if isinstance(allergen_id, str) and allergen_id in self.registry:
                risks[allergen_id] = level
        return risks

    def _parse_item(
        self, row: dict[str, object], risks: dict[str, CrossContaminationRisk]
    ) -> MenuItem:
        ingredients = row.get("ingredients")
        ingredients_text = ingredients if isinstance(ingredients, str) else ""
        confidence = _parse_confidence(row.get("allergen_confidence"))
        if not confidence:
            confidence = compute_item_confidence(
                self.registry,
                ingredients_text,
                explicit_flags=self._explicit_flags(row.get("allergen_profile")),
                venue_risks=risks,
            )
        price = row.get("price")
        return MenuItem(
            name=str(row["name"]),
            ingredients=ingredients_text,
            price=float(price) if isinstance(price, int | float) else 0.0,
            allergen_confidence=confidence,
        )

    def _explicit_flags(self, profile: object) -> dict[str, bool]:
        """Map allergen-free flags in a stored profile onto allergen ids.

        Rows carry either ``dairy_free``-style booleans (and ``vegan``) or
        tri-state text under the column header, e.g. ``"DAIRY FREE": "NO"``.
        ``CAN BE`` and blank cells leave the decision to the keyword scan.
        """
        if not isinstance(profile, dict):
            return {}
        flags: dict[str, bool] = {}
        for key, value in profile.items():
            if isinstance(value, bool):
                allergen_id = key.removesuffix(_FREE_SUFFIX)
                if allergen_id in self.registry:
                    flags[allergen_id] = value
                continue
            allergen = self.registry.by_column(key)
            column_value = parse_column_value(value)
            if allergen is None or column_value in (None, ColumnValue.CONDITIONAL):
                continue
            flags[allergen.id] = column_value is ColumnValue.SAFE
        return flags


def _parse_confidence(raw: object) -> dict[str, float]:
    if not isinstance(raw, dict):
        return {}
    return {
        str(key): clamp_confidence(float(value))
        for key, value in raw.items()
        if isinstance(value, int | float) and not isinstance(value, bool)
    }
