"""OpenAI client for menu text and food image generation."""

import base64
import json
from dataclasses import dataclass

from openai import AsyncOpenAI

from chefnote.services.ai import ChefAiClient


@dataclass
class OpenAIChefClient(ChefAiClient):
    """AI client backed by the OpenAI Responses and Images APIs."""

    client: AsyncOpenAI

    @classmethod
    def create(cls, api_key: str) -> "OpenAIChefClient":
        """Create an OpenAI client."""
        return cls(client=AsyncOpenAI(api_key=api_key))

    async def generate_json(
        self, *, model: str, prompt: str, schema: dict[str, object], name: str
    ) -> dict[str, object]:
        """Call the Responses API with structured outputs."""
        response = await self.client.responses.create(
            model=model,
            input=[
                {
                    "role": "user",
                    "content": [{"type": "input_text", "text": prompt}],
                }
            ],
            text={
                "format": {
                    "type": "json_schema",
                    "name": name,
                    "strict": True,
                    "schema": schema,
                }
            },
            store=False,
        )
        output_text = response.output_text
        if not output_text:
            raise RuntimeError("OpenAI returned an empty response")
        return json.loads(output_text)

    async def generate_text(self, *, model: str, prompt: str) -> str:
        """Call the Responses API for plain text."""
        response = await self.client.responses.create(
            model=model, input=prompt, store=False
        )
        output_text = response.output_text
        if not output_text:
            raise RuntimeError("OpenAI returned an empty response")
        return output_text

    async def edit_image(
        self, *, model: str, image_bytes: bytes, mime_type: str, prompt: str
    ) -> bytes:
        """Edit an image and return the first result."""
        extension = mime_type.split("/")[-1] or "jpeg"
        response = await self.client.images.edit(
            model=model,
            image=(f"photo.{extension}", image_bytes, mime_type),
            prompt=prompt,
        )
        return _first_image(response)

    async def generate_image(self, *, model: str, prompt: str) -> bytes:
        """Generate an image and return the first result."""
        response = await self.client.images.generate(
            model=model, prompt=prompt, size="1024x1024"
        )
        return _first_image(response)

    async def close(self) -> None:
        """Close the underlying OpenAI HTTP session."""
        await self.client.close()


def _first_image(response: object) -> bytes:
    """Decode the first base64 image of an Images API response."""
    data = getattr(response, "data", None) or []
    for item in data:
        encoded = getattr(item, "b64_json", None)
        if encoded:
            return base64.b64decode(encoded)
    raise RuntimeError("OpenAI returned no image (safety filter or unknown error)")
