"""Menu loading with a time-bounded cache."""

import logging
from dataclasses import dataclass
from typing import Protocol

from allergen_filter.domain.errors import MenuNotFoundError
from allergen_filter.domain.menu import Menu
from allergen_filter.services.cache import Cache

_logger = logging.getLogger(__name__)

DEFAULT_MENU_TTL_SECONDS = 600


class MenuSource(Protocol):
    """Source of venue menus, declaring the representation it provides."""

    def get_menu(self, venue_slug: str) -> Menu | None:
        """Return the active menu for a venue, if the venue exists."""


@dataclass
class MenuService:
    """Serves menus from the cache, refetching from the source on a miss."""

    source: MenuSource
    cache: Cache
    ttl_seconds: int = DEFAULT_MENU_TTL_SECONDS

    def get_menu(self, venue_slug: str) -> Menu:
        """Return a venue's menu, raising MenuNotFoundError if unknown."""
        cache_key = _cache_key(venue_slug)
        cached = self.cache.get(cache_key)
        if isinstance(cached, Menu):
            _logger.debug("Menu cache hit: %s", venue_slug)
            return cached

        _logger.debug("Menu cache miss: %s", venue_slug)
        menu = self.source.get_menu(venue_slug)
        if menu is None:
            raise MenuNotFoundError(venue_slug)
        self.cache.set(cache_key, menu, ttl_seconds=self.ttl_seconds)
        return menu

    def invalidate(self, venue_slug: str) -> None:
        """Force the next read for a venue to hit the source."""
        self.cache.invalidate(_cache_key(venue_slug))


def _cache_key(venue_slug: str) -> str:
    return f"menu:{venue_slug.lower()}"
