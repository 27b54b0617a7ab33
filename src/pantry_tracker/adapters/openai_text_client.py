"""OpenAI Responses API client for plain text generation."""

from dataclasses import dataclass

from openai import AsyncOpenAI

from pantry_tracker.services.text_generation import TextGenerationClient


@dataclass
class OpenAITextClient(TextGenerationClient):
    """Text generation client backed by the OpenAI Responses API."""

    client: AsyncOpenAI
    model: str
    reasoning_effort: str | None = None
    store: bool = False

    @classmethod
    def create(  # noqa: PLR0913
        cls,
        api_key: str,
        model: str,
        *,
        reasoning_effort: str | None = None,
        store: bool = False,
        timeout_seconds: float = 30.0,
    ) -> "OpenAITextClient":
        """Create a client whose calls fail after timeout_seconds, without retries."""
        return cls(
            client=AsyncOpenAI(
                api_key=api_key,
                timeout=timeout_seconds,
                max_retries=0,
            ),
            model=model,
            reasoning_effort=reasoning_effort,
            store=store,
        )

    async def generate_text(self, prompt: str) -> str:
        """Send a prompt and return the reply text."""
        request_payload: dict[str, object] = {
            "model": self.model,
            "input": prompt,
            "store": self.store,
        }
        if self.reasoning_effort:
            request_payload["reasoning"] = {"effort": self.reasoning_effort}

        response = await self.client.responses.create(**request_payload)
        output_text = response.output_text
        if not output_text:
            raise RuntimeError("OpenAI returned an empty response")
        return output_text

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.client.close()
