"""OpenAI Responses API client for kit insights."""

from dataclasses import dataclass

from openai import AsyncOpenAI

from matelli_store.services.insight import InsightClient


@dataclass
class OpenAIInsightClient(InsightClient):
    """Insight client backed by OpenAI Responses API."""

    client: AsyncOpenAI

    @classmethod
    def create(
        cls, api_key: str, timeout_seconds: float = 20.0
    ) -> "OpenAIInsightClient":
        """Create an OpenAI insight client."""
        return cls(client=AsyncOpenAI(api_key=api_key, timeout=timeout_seconds))

    async def generate(
        self, *, model: str, prompt: str, max_output_tokens: int
    ) -> str:
        """Call OpenAI Responses API with a plain text prompt."""
        response = await self.client.responses.create(
            model=model,
            input=prompt,
            max_output_tokens=max_output_tokens,
            store=False,
        )
        return response.output_text or ""
