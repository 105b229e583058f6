"""OpenAI Responses API client for structured allergen analysis."""

import json
from dataclasses import dataclass

from openai import AsyncOpenAI

from allergen_filter.domain.errors import AICapabilityError
from allergen_filter.services.ai_analysis import StructuredLLMClient


@dataclass
class OpenAIStructuredClient(StructuredLLMClient):
    """Structured-output client backed by the OpenAI Responses API."""

    client: AsyncOpenAI

    @classmethod
    def create(cls, api_key: str) -> "OpenAIStructuredClient":
        """Create an OpenAI structured-output client."""
        return cls(client=AsyncOpenAI(api_key=api_key))

    async def complete(  # noqa: PLR0913
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        prompt: str,
        schema: dict[str, object],
        schema_name: str,
    ) -> dict[str, object]:
        """Call OpenAI Responses API with a strict JSON schema."""
        request_payload: dict[str, object] = {
            "model": model,
            "input": [
                {
                    "role": "user",
                    "content": [{"type": "input_text", "text": prompt}],
                }
            ],
            "text": {
                "format": {
                    "type": "json_schema",
                    "name": schema_name,
                    "strict": True,
                    "schema": schema,
                }
            },
            "store": store,
        }
        if reasoning_effort:
            request_payload["reasoning"] = {"effort": reasoning_effort}

        response = await self.client.responses.create(**request_payload)
        output_text = response.output_text
        if not output_text:
            raise AICapabilityError("OpenAI returned an empty response")
        try:
            return json.loads(output_text)
        except json.JSONDecodeError as exc:
            raise AICapabilityError(f"OpenAI returned invalid JSON: {exc}") from exc

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.client.close()
