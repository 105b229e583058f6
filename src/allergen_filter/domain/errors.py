"""Error types raised by the filtering core."""


class AllergenFilterError(Exception):
    """Base class for filtering errors."""


class MalformedInputError(AllergenFilterError, ValueError):
    """Raised when restriction input does not have a recognizable shape."""


class AICapabilityError(AllergenFilterError):
    """Raised when the AI capability returns unusable output."""


class MenuNotFoundError(AllergenFilterError):
    """Raised when the menu source has no venue for a slug."""

    def __init__(self, venue_slug: str) -> None:
        super().__init__(f"No menu found for venue '{venue_slug}'")
        self.venue_slug = venue_slug
