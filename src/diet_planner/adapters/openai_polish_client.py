"""OpenAI Responses API client for rewording plan explanations."""

from dataclasses import dataclass

from openai import AsyncOpenAI

from diet_planner.services.polish import PolishClient


@dataclass
class OpenAIPolishClient(PolishClient):
    """Polish client backed by OpenAI Responses API."""

    client: AsyncOpenAI

    @classmethod
    def create(cls, api_key: str) -> "OpenAIPolishClient":
        """Create an OpenAI polish client."""
        return cls(client=AsyncOpenAI(api_key=api_key))

    async def rewrite(self, *, model: str, instructions: str, text: str) -> str:
        """Return the model's rewording of the text."""
        response = await self.client.responses.create(
            model=model,
            instructions=instructions,
            input=text,
            store=False,
        )
        output_text = response.output_text
        if not output_text:
            raise RuntimeError("OpenAI returned an empty response")
        return output_text

    async def close(self) -> None:
        await self.client.close()
