"""OpenAI Responses API client for food analysis."""

from dataclasses import dataclass

from openai import AsyncOpenAI

from calorie_scanner.services.vision import VisionClient


@dataclass
class OpenAIVisionClient(VisionClient):
    """Vision client backed by OpenAI Responses API."""

    client: AsyncOpenAI

    @classmethod
    def create(cls, api_key: str, timeout: float = 60.0) -> "OpenAIVisionClient":
        """Create an OpenAI vision client without automatic retries."""
        return cls(
            client=AsyncOpenAI(api_key=api_key, max_retries=0, timeout=timeout)
        )

    async def analyze(self, *, model: str, image_data_url: str, prompt: str) -> str:
        """Send the image and prompt, returning the raw output text."""
        response = await self.client.responses.create(
            model=model,
            input=[
                {
                    "role": "user",
                    "content": [
                        {"type": "input_image", "image_url": image_data_url},
                        {"type": "input_text", "text": prompt},
                    ],
                }
            ],
            text={"format": {"type": "json_object"}},
            store=False,
        )
        return response.output_text

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.client.close()
