"""Tests for free-text allergy interpretation."""

import asyncio

from allergen_filter.catalog import default_registry
from allergen_filter.domain.errors import AICapabilityError
from allergen_filter.services.interpreter import (
    TextInterpreter,
    candidate_terms,
    tokenize,
)
from tests.conftest import FakeResolver


def _interpreter(resolver: FakeResolver | None = None) -> TextInterpreter:
    return TextInterpreter(registry=default_registry(), resolver=resolver)


def test_misspelling_matches_locally() -> None:
    resolver = FakeResolver(allergen_ids=["gluten"])

    result = asyncio.run(_interpreter(resolver).resolve("i cant eat dary products"))

    assert result.matched_allergen_ids == ("dairy",)
    assert result.unmatched_remainder is None
    assert result.method == "local"
    assert resolver.calls == []


def test_multi_word_term() -> None:
    result = asyncio.run(_interpreter().resolve("I'm allergic to tree nuts"))
    assert result.matched_allergen_ids == ("treenuts",)


def test_synonyms_and_multiple_allergens() -> None:
    interpreter = _interpreter()
    assert interpreter.match_locally("Lactose intolerant") == ["dairy"]
    assert interpreter.match_locally("peanut butter") == ["dairy", "peanuts"]


def test_resolution_is_idempotent() -> None:
    interpreter = _interpreter()
    first = asyncio.run(interpreter.resolve("no glutten please"))
    second = asyncio.run(interpreter.resolve("no glutten please"))
    assert first == second
    assert first.matched_allergen_ids == ("gluten",)


def test_ai_results_are_validated_against_catalog() -> None:
    resolver = FakeResolver(allergen_ids=["dairy", "unicorn", " GLUTEN ", "dairy"])

    result = asyncio.run(_interpreter(resolver).resolve("xyzzy"))

    assert resolver.calls == ["xyzzy"]
    assert result.matched_allergen_ids == ("dairy", "gluten")
    assert result.unmatched_remainder is None
    assert result.method == "ai"


def test_unmatched_text_is_returned() -> None:
    result = asyncio.run(_interpreter(FakeResolver()).resolve("  xyzzy "))
    assert result.matched_allergen_ids == ()
    assert result.unmatched_remainder == "xyzzy"
    assert result.method == "ai"


def test_resolver_failure_degrades_to_unmatched() -> None:
    resolver = FakeResolver(error=AICapabilityError("down"))

    result = asyncio.run(_interpreter(resolver).resolve("xyzzy"))

    assert result.matched_allergen_ids == ()
    assert result.unmatched_remainder == "xyzzy"


def test_without_resolver() -> None:
    result = asyncio.run(_interpreter().resolve("xyzzy"))
    assert result.method == "none"
    assert result.unmatched_remainder == "xyzzy"


def test_empty_text() -> None:
    result = asyncio.run(_interpreter(FakeResolver()).resolve("   "))
    assert result.matched_allergen_ids == ()
    assert result.unmatched_remainder is None
    assert result.method == "none"


def test_candidate_terms() -> None:
    words = tokenize("I can't eat tree nuts")
    assert words == ["tree", "nuts"]
    assert candidate_terms(words) == ["tree", "nuts", "tree nuts"]
    assert tokenize("allergic") == []


def test_fuzzy_match_budget() -> None:
    interpreter = _interpreter()
    assert interpreter.match_locally("glutten") == ["gluten"]
    assert interpreter.match_locally("sesmae") == ["sesame"]
    assert interpreter.match_locally("sy") == []
    assert interpreter.match_locally("xyzzy") == []


def test_unmatched_words_after_local_match() -> None:
    resolver = FakeResolver(allergen_ids=["fish"])

    result = asyncio.run(_interpreter(resolver).resolve("dairy and kiwi"))

    assert result.matched_allergen_ids == ("dairy",)
    assert result.unmatched_remainder == "kiwi"
    assert result.method == "local"
    assert resolver.calls == []
