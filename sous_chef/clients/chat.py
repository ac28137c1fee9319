"""Raw streaming chat capability backed by Gemini async chats.

No schema enforcement happens here: the session yields text chunks as they
arrive. Backend failures surface as TransportError, both while opening the
stream and while it is being consumed.
"""

from typing import AsyncIterator, Optional, Protocol

from google import genai
from google.genai import errors, types

from sous_chef.utils.errors import TransportError
from sous_chef.utils.logger import logger


class ChatStreamSession(Protocol):
    async def send_stream(self, text: str) -> AsyncIterator[str]:
        """Open a stream for one user turn and return its text chunks."""
        ...


class ChatBackend(Protocol):
    def create_session(self, system_instruction: str) -> ChatStreamSession:
        """Start a multi-turn chat bound to a fixed system instruction."""
        ...


def _as_transport_error(e: Exception) -> TransportError:
    if isinstance(e, errors.APIError):
        return TransportError(f"Gemini chat API error: {e}", status_code=e.code)
    return TransportError(f"Gemini chat stream failed: {e}")


class GeminiChatSession:
    """One Gemini chat; keeps multi-turn history on the backend side."""

    def __init__(self, chat) -> None:
        self._chat = chat

    async def send_stream(self, text: str) -> AsyncIterator[str]:
        try:
            stream = await self._chat.send_message_stream(text)
        except Exception as e:
            raise _as_transport_error(e) from e
        return self._texts(stream)

    async def _texts(self, stream) -> AsyncIterator[str]:
        try:
            async for chunk in stream:
                if chunk.text:
                    yield chunk.text
        except Exception as e:
            raise _as_transport_error(e) from e


class GeminiChatBackend:
    """Creates Gemini chat sessions for the conversational assistant."""

    def __init__(
        self,
        api_key: str,
        model: str,
        client: Optional[genai.Client] = None,
    ) -> None:
        if client is None and not api_key:
            raise ValueError("GEMINI_API_KEY is required")
        self.model = model
        self._client = client or genai.Client(api_key=api_key)

    def create_session(self, system_instruction: str) -> GeminiChatSession:
        logger.debug(f"Opening chat session on {self.model}", extra={"operation": "chat"})
        chat = self._client.aio.chats.create(
            model=self.model,
            config=types.GenerateContentConfig(system_instruction=system_instruction),
        )
        return GeminiChatSession(chat)
