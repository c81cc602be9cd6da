"""OpenAI Responses API client for quiz generation."""

import json
from dataclasses import dataclass

import httpx
from openai import AsyncOpenAI

from live_quiz.domain.errors import DependencyError
from live_quiz.services.quiz_generation import QuizGenerationClient


@dataclass
class OpenAIQuizClient(QuizGenerationClient):
    """Quiz generation client backed by the OpenAI Responses API."""

    client: AsyncOpenAI
    http_client: httpx.AsyncClient | None = None

    @classmethod
    def create(
        cls, api_key: str, base_url: str | None = None, timeout: float = 30.0
    ) -> "OpenAIQuizClient":
        """Create a client with a managed httpx session."""
        http_client = httpx.AsyncClient(timeout=timeout)
        return cls(
            client=AsyncOpenAI(
                api_key=api_key, base_url=base_url, http_client=http_client
            ),
            http_client=http_client,
        )

    async def generate(  # noqa: PLR0913
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        system_prompt: str,
        prompt: str,
        schema: dict[str, object],
    ) -> dict[str, object]:
        """Call the Responses API with structured outputs."""
        request_payload: dict[str, object] = {
            "model": model,
            "instructions": system_prompt,
            "input": [
                {
                    "role": "user",
                    "content": [{"type": "input_text", "text": prompt}],
                }
            ],
            "text": {
                "format": {
                    "type": "json_schema",
                    "name": "quiz_question",
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
            raise DependencyError("OpenAI returned an empty response")
        try:
            return json.loads(output_text)
        except json.JSONDecodeError as exc:
            raise DependencyError("OpenAI returned malformed quiz JSON") from exc

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        if self.http_client is not None:
            await self.http_client.aclose()
