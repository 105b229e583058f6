"""Free-text allergy interpretation.

Stage A matches words locally against the allergen registry (exact, then
substring, then edit distance). Stage B asks the AI resolver only when Stage A
finds nothing. Words that neither stage resolves are returned as an unmatched
remainder so the caller can tell the diner to ask staff about them.
"""

import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from rapidfuzz.distance import Levenshtein

from allergen_filter.domain.allergens import AllergenRegistry

_logger = logging.getLogger(__name__)

_TOKEN_PATTERN = re.compile(r"[a-z0-9][a-z0-9'\-]*")
_MIN_SUBSTRING_LENGTH = 3
_MIN_FUZZY_LENGTH = 3
_SHORT_TERM_LENGTH = 3

STOP_WORDS = frozenset(
    {
        # pronouns and articles
        "i", "im", "ive", "me", "my", "we", "our", "us", "you", "your", "he",
        "she", "they", "them", "it", "its", "a", "an", "the", "this", "that",
        # negations
        "no", "not", "non", "cant", "cannot", "can", "dont", "do", "does",
        "doesnt", "without", "never", "free",
        # generic allergy vocabulary
        "allergy", "allergies", "allergic", "intolerant", "intolerance",
        "sensitive", "sensitivity", "avoid", "avoiding", "eat", "eating",
        "have", "has", "am", "is", "are", "be", "to", "of", "and", "or",
        "with", "any", "all", "some", "contain", "contains", "containing",
        "food", "foods", "product", "products", "ingredient", "ingredients",
        "please", "severe", "mild", "very", "really", "also",
    }
)


class MatchKind(Enum):
    """How a term matched the registry, strongest first."""

    EXACT = 0
    SUBSTRING = 1
    FUZZY = 2


@dataclass(frozen=True)
class InterpretResult:
    """Outcome of interpreting free-text allergy input."""

    matched_allergen_ids: tuple[str, ...]
    unmatched_remainder: str | None
    method: str


class TextResolver(Protocol):
    """AI capability mapping free text onto allowed allergen ids."""

    async def resolve_text(self, text: str, vocabulary: Sequence[str]) -> list[str]:
        """Return vocabulary ids the text refers to."""


@dataclass
class TextInterpreter:
    """Resolves free-text restrictions to cataloged allergen ids."""

    registry: AllergenRegistry
    resolver: TextResolver | None = None

    def __post_init__(self) -> None:
        self._vocabulary = self.registry.vocabulary()

    async def resolve(self, text: str) -> InterpretResult:
        """Resolve text locally first, falling back to the AI resolver."""
        trimmed = (text or "").strip()
        if not trimmed:
            return InterpretResult((), None, "none")

        local, leftover = self._match_words(trimmed)
        if local:
            return InterpretResult(tuple(local), " ".join(leftover) or None, "local")

        if self.resolver is None:
            return InterpretResult((), trimmed, "none")

        try:
            raw_ids = await self.resolver.resolve_text(trimmed, self.registry.ids())
        except Exception:
            _logger.exception("AI text resolution failed for %r", trimmed)
            raw_ids = []
        matched = self._validate(raw_ids)
        if raw_ids and len(matched) < len(raw_ids):
            _logger.warning("Discarded uncataloged ids from resolver: %s", raw_ids)
        return InterpretResult(tuple(matched), None if matched else trimmed, "ai")

    def match_locally(self, text: str) -> list[str]:
        """Match text against ids and synonyms, ranked by match strength."""
        return self._match_words(text)[0]

    def _match_words(self, text: str) -> tuple[list[str], list[str]]:
        """Return ranked allergen ids and the words that matched nothing."""
        words = tokenize(text)
        best: dict[str, MatchKind] = {}
        leftover: list[str] = []
        for term in candidate_terms(words):
            kind, allergen_ids = self._match_term(term)
            if not allergen_ids and term in words:
                leftover.append(term)
            for allergen_id in allergen_ids:
                current = best.get(allergen_id)
                if current is None or kind.value < current.value:
                    best[allergen_id] = kind
        ranked = sorted(best, key=lambda found: (best[found].value, found))
        return ranked, leftover

    def _match_term(self, term: str) -> tuple[MatchKind, set[str]]:
        exact = self._vocabulary.get(term)
        if exact:
            return MatchKind.EXACT, set(exact)

        substring: set[str] = set()
        if len(term) >= _MIN_SUBSTRING_LENGTH:
            for known, allergen_ids in self._vocabulary.items():
                if len(known) >= _MIN_SUBSTRING_LENGTH and (
                    term in known or known in term
                ):
                    substring.update(allergen_ids)
        if substring:
            return MatchKind.SUBSTRING, substring

        fuzzy: set[str] = set()
        if " " not in term and len(term) >= _MIN_FUZZY_LENGTH:
            budget = 1 if len(term) <= _SHORT_TERM_LENGTH else 2
            for known, allergen_ids in self._vocabulary.items():
                if " " in known or abs(len(known) - len(term)) > budget:
                    continue
                if Levenshtein.distance(term, known, score_cutoff=budget) <= budget:
                    fuzzy.update(allergen_ids)
        return MatchKind.FUZZY, fuzzy

    def _validate(self, raw_ids: Sequence[object]) -> list[str]:
        valid: list[str] = []
        for raw in raw_ids:
            if not isinstance(raw, str):
                continue
            allergen_id = raw.strip().lower()
            if allergen_id in self.registry and allergen_id not in valid:
                valid.append(allergen_id)
        return valid


def tokenize(text: str) -> list[str]:
    """Split text into distinct lower-cased words, dropping stop words."""
    words = [
        token.replace("'", "").strip("-")
        for token in _TOKEN_PATTERN.findall(text.lower())
    ]
    return list(dict.fromkeys(w for w in words if w and w not in STOP_WORDS))


def candidate_terms(words: Sequence[str]) -> list[str]:
    """Return the words plus the words joined back together.

    The joined phrase lets multi-word terms such as "tree nuts" match.
    """
    if len(words) > 1:
        return [*words, " ".join(words)]
    return list(words)
