"""Tests for the OpenAI structured-output adapter."""

import asyncio
import json

import pytest

from allergen_filter.adapters.openai_structured_client import OpenAIStructuredClient
from allergen_filter.domain.errors import AICapabilityError


class _FakeResponses:
    def __init__(self, output_text: str) -> None:
        self.output_text = output_text
        self.last_payload: dict[str, object] | None = None

    async def create(self, **kwargs):  # type: ignore[no-untyped-def]
        self.last_payload = kwargs
        return type("Resp", (), {"output_text": self.output_text})()


class _FakeOpenAI:
    def __init__(self, output_text: str) -> None:
        self.responses = _FakeResponses(output_text)
        self.closed = False

    async def close(self) -> None:
        self.closed = True


def _complete(client: OpenAIStructuredClient, reasoning_effort: str | None = "low"):
    return asyncio.run(
        client.complete(
            model="gpt-5.2",
            reasoning_effort=reasoning_effort,
            store=False,
            prompt="Judge these items",
            schema={"type": "object"},
            schema_name="menu_item_judgments",
        )
    )


def test_openai_structured_client_parses_output() -> None:
    fake = _FakeOpenAI(json.dumps({"items": []}))
    client = OpenAIStructuredClient(client=fake)

    result = _complete(client)

    assert result == {"items": []}
    payload = fake.responses.last_payload
    assert payload is not None
    assert payload["text"]["format"]["name"] == "menu_item_judgments"
    assert payload["text"]["format"]["strict"] is True
    assert payload["reasoning"] == {"effort": "low"}
    assert payload["store"] is False


def test_openai_structured_client_omits_empty_reasoning() -> None:
    fake = _FakeOpenAI(json.dumps({"allergen_ids": []}))
    client = OpenAIStructuredClient(client=fake)

    _complete(client, reasoning_effort=None)

    assert "reasoning" not in fake.responses.last_payload


def test_openai_structured_client_rejects_empty_output() -> None:
    client = OpenAIStructuredClient(client=_FakeOpenAI(""))
    with pytest.raises(AICapabilityError):
        _complete(client)


def test_openai_structured_client_rejects_invalid_json() -> None:
    client = OpenAIStructuredClient(client=_FakeOpenAI("not json"))
    with pytest.raises(AICapabilityError):
        _complete(client)


def test_openai_structured_client_close() -> None:
    fake = _FakeOpenAI("{}")
    client = OpenAIStructuredClient(client=fake)
    asyncio.run(client.close())
    assert fake.closed is True
