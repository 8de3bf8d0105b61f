"""OpenAI Chat Completions client for meal parsing."""

from dataclasses import dataclass

import openai
from openai import AsyncOpenAI

from calorie_tracker.services.meal_parser import CompletionClient, CompletionError


@dataclass
class OpenAICompletionClient(CompletionClient):
    """Completion client backed by the OpenAI Chat Completions API."""

    client: AsyncOpenAI

    @classmethod
    def create(cls, api_key: str) -> "OpenAICompletionClient":
        """Create a client that makes exactly one attempt per request."""
        return cls(client=AsyncOpenAI(api_key=api_key, max_retries=0))

    async def complete(
        self,
        *,
        model: str,
        messages: list[dict[str, str]],
        temperature: float,
        max_tokens: int,
    ) -> str:
        """Call chat completions and return the first choice's text."""
        try:
            response = await self.client.chat.completions.create(
                model=model,
                messages=messages,
                temperature=temperature,
                max_tokens=max_tokens,
            )
        except openai.APIStatusError as exc:
            raise CompletionError(
                exc.response.text or exc.message, status_code=exc.status_code
            ) from exc
        except openai.APIError as exc:
            raise CompletionError(f"{type(exc).__name__}: {exc}") from exc

        if not response.choices:
            return ""
        return response.choices[0].message.content or ""

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.client.close()
