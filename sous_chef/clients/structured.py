"""Schema-validated structured generation on top of the Gemini API.

The backend is asked for JSON that follows a declared schema, but its answer
is never trusted: every response is parsed and validated locally against a
pydantic type before it reaches a caller.

Core pieces:
- ResponseContract: declared backend schema + local validator for one kind of call
- parse_structured_response(): untrusted text -> validated value (or SchemaValidationError)
- StructuredGenerationClient.generate(): single backend call, no retries
"""

import asyncio
import re
from dataclasses import dataclass
from typing import Any, Generic, Optional, TypeVar

from google import genai
from google.genai import errors, types
from pydantic import TypeAdapter, ValidationError

from sous_chef.utils.errors import SchemaValidationError, TransportError
from sous_chef.utils.logger import logger


T = TypeVar("T")

_FENCE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL)


@dataclass(frozen=True)
class ResponseContract(Generic[T]):
    """What a structured call declares to the backend and what it accepts back.

    Attributes:
        name: Human-readable name used in logs and error messages.
        schema: Schema sent to the backend as `response_schema`.
        adapter: Local validator producing the typed result.
    """

    name: str
    schema: types.Schema
    adapter: TypeAdapter


def _strip_code_fence(text: str) -> str:
    match = _FENCE.match(text)
    return match.group(1) if match else text


def parse_structured_response(response_text: Optional[str], contract: ResponseContract[T]) -> T:
    """Parse and validate raw backend text against a response contract.

    A single surrounding markdown code fence is tolerated. Nothing else is
    repaired: invalid JSON, missing fields, wrong types and unknown enum values
    all fail.

    Args:
        response_text: Raw text returned by the backend (may be None or empty).
        contract: Contract the response must satisfy.

    Returns:
        The validated value.

    Raises:
        SchemaValidationError: If the text is empty, not JSON, or violates the schema.
    """
    log_extra = {"operation": contract.name}
    text = (response_text or "").strip()
    if not text:
        raise SchemaValidationError(f"Empty response for {contract.name}", contract=contract.name)

    try:
        return contract.adapter.validate_json(_strip_code_fence(text))
    except ValidationError as e:
        details = e.errors(include_url=False)
        logger.warning(
            f"Rejected {contract.name} response: {e.error_count()} validation error(s)", extra=log_extra
        )
        logger.debug(f"Raw {contract.name} response: {text[:500]}", extra=log_extra)
        raise SchemaValidationError(
            f"Response for {contract.name} failed validation: {details[0]['msg'] if details else e}",
            contract=contract.name,
            errors=details,
        ) from e


class StructuredGenerationClient:
    """Text-generation client that only ever returns validated records."""

    def __init__(
        self,
        api_key: str,
        model: str,
        temperature: Optional[float] = None,
        client: Optional[genai.Client] = None,
    ) -> None:
        """Initialize the client.

        Args:
            api_key: Gemini API key.
            model: Model id used for every call.
            temperature: Optional sampling temperature.
            client: Pre-built genai.Client to share between components (optional).

        Raises:
            ValueError: If neither api_key nor client is provided.
        """
        if client is None and not api_key:
            raise ValueError("GEMINI_API_KEY is required")
        self.model = model
        self.temperature = temperature
        self._client = client or genai.Client(api_key=api_key)

    def _build_config(self, schema: types.Schema) -> types.GenerateContentConfig:
        options: dict[str, Any] = {
            "response_mime_type": "application/json",
            "response_schema": schema,
        }
        if self.temperature is not None:
            options["temperature"] = self.temperature
        return types.GenerateContentConfig(**options)

    async def _call_backend(self, prompt: str, contract: ResponseContract) -> Optional[str]:
        log_extra = {"operation": contract.name}
        try:
            response = await asyncio.to_thread(
                self._client.models.generate_content,
                model=self.model,
                contents=prompt,
                config=self._build_config(contract.schema),
            )
        except errors.APIError as e:
            logger.error(f"Gemini API error during {contract.name} generation: {e}", extra=log_extra)
            raise TransportError(f"Gemini API error: {e}", status_code=e.code) from e
        except Exception as e:
            logger.error(f"Gemini call failed during {contract.name} generation: {e}", extra=log_extra)
            raise TransportError(f"Gemini call failed: {e}") from e
        return response.text

    async def generate(self, prompt: str, contract: ResponseContract[T]) -> T:
        """Run one structured generation call.

        Args:
            prompt: Prompt text.
            contract: Declared schema and validator for the response.

        Returns:
            The validated value described by the contract.

        Raises:
            TransportError: Network, auth or quota failure.
            SchemaValidationError: Response does not satisfy the contract.
        """
        log_extra = {"operation": contract.name}
        logger.debug(f"Requesting {contract.name} from {self.model}", extra=log_extra)
        response_text = await self._call_backend(prompt, contract)
        result = parse_structured_response(response_text, contract)
        logger.debug(f"✓ {contract.name} validated", extra=log_extra)
        return result
