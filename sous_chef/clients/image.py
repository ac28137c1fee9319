"""Dish photo generation with a Gemini image model.

A response without an inline image part is a normal outcome and yields None.
Only backend failures (network, auth, quota) raise.
"""

import asyncio
import base64
from typing import Optional

from google import genai
from google.genai import errors, types

from sous_chef.prompts.prompts import build_image_prompt
from sous_chef.utils.errors import TransportError
from sous_chef.utils.logger import logger


DATA_URI_PREFIX = "data:image/png;base64,"


def extract_image_data_uri(response) -> Optional[str]:
    """Return the first inline image of the first candidate as a data URI.

    Args:
        response: GenerateContentResponse (or any object with the same shape).

    Returns:
        "data:image/png;base64,<payload>" or None when the response carries no image.
    """
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return None
    content = getattr(candidates[0], "content", None)
    for part in getattr(content, "parts", None) or []:
        inline_data = getattr(part, "inline_data", None)
        if inline_data is None or not inline_data.data:
            continue
        payload = inline_data.data
        # The SDK hands back raw bytes; an already-encoded payload is passed through
        if isinstance(payload, (bytes, bytearray)):
            payload = base64.b64encode(payload).decode("ascii")
        return f"{DATA_URI_PREFIX}{payload}"
    return None


class ImageGenerationClient:
    """Generates an illustrative photo for a dish."""

    def __init__(
        self,
        api_key: str,
        model: str,
        aspect_ratio: str = "16:9",
        client: Optional[genai.Client] = None,
    ) -> None:
        if client is None and not api_key:
            raise ValueError("GEMINI_API_KEY is required")
        self.model = model
        self.aspect_ratio = aspect_ratio
        self._client = client or genai.Client(api_key=api_key)

    async def generate(self, subject: str) -> Optional[str]:
        """Generate a food photo for the subject.

        Args:
            subject: What to photograph, typically the dish title.

        Returns:
            Data URI string, or None when the model returned no image part.

        Raises:
            TransportError: Network, auth or quota failure.
        """
        try:
            response = await asyncio.to_thread(
                self._client.models.generate_content,
                model=self.model,
                contents=build_image_prompt(subject),
                config=types.GenerateContentConfig(
                    image_config=types.ImageConfig(aspect_ratio=self.aspect_ratio),
                ),
            )
        except errors.APIError as e:
            raise TransportError(f"Gemini image API error: {e}", status_code=e.code) from e
        except Exception as e:
            raise TransportError(f"Gemini image call failed: {e}") from e

        image = extract_image_data_uri(response)
        if image is None:
            logger.info(f"No image part returned for '{subject}'", extra={"operation": "image"})
        else:
            logger.debug(
                f"Image generated for '{subject}' ({len(image) / 1024:.1f} KB data URI)",
                extra={"operation": "image"},
            )
        return image
