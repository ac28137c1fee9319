"""Unit tests for the Gemini streaming chat backend."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from google.genai import errors

from sous_chef.clients.chat import GeminiChatBackend, GeminiChatSession
from sous_chef.utils.errors import TransportError


async def _stream(*texts, fail_after=None):
    for index, text in enumerate(texts):
        if fail_after is not None and index == fail_after:
            raise ConnectionError("stream dropped")
        yield SimpleNamespace(text=text)


def _chat(stream=None, error=None):
    chat = MagicMock()
    chat.send_message_stream = AsyncMock(return_value=stream, side_effect=error)
    return chat


class TestGeminiChatBackend:
    """Test chat session creation."""

    def test_requires_api_key_or_client(self):
        with pytest.raises(ValueError, match="GEMINI_API_KEY"):
            GeminiChatBackend(api_key="", model="m")

    def test_create_session_passes_system_instruction(self, genai_client):
        backend = GeminiChatBackend(api_key="key", model="chat-model", client=genai_client)

        session = backend.create_session("You are a chef")

        assert isinstance(session, GeminiChatSession)
        kwargs = genai_client.aio.chats.create.call_args.kwargs
        assert kwargs["model"] == "chat-model"
        assert kwargs["config"].system_instruction == "You are a chef"


class TestGeminiChatSession:
    """Test chunk streaming and error mapping."""

    @pytest.mark.asyncio
    async def test_yields_chunk_texts_in_order(self):
        chat = _chat(stream=_stream("Hel", "lo", " world"))
        session = GeminiChatSession(chat)

        chunks = [chunk async for chunk in await session.send_stream("Hi")]

        assert chunks == ["Hel", "lo", " world"]
        chat.send_message_stream.assert_awaited_once_with("Hi")

    @pytest.mark.asyncio
    async def test_empty_chunks_are_skipped(self):
        session = GeminiChatSession(_chat(stream=_stream("a", None, "", "b")))

        chunks = [chunk async for chunk in await session.send_stream("Hi")]

        assert chunks == ["a", "b"]

    @pytest.mark.asyncio
    async def test_open_failure_becomes_transport_error(self):
        error = errors.ClientError(429, {"error": {"code": 429, "message": "quota", "status": "RESOURCE_EXHAUSTED"}})
        session = GeminiChatSession(_chat(error=error))

        with pytest.raises(TransportError) as exc:
            await session.send_stream("Hi")
        assert exc.value.status_code == 429

    @pytest.mark.asyncio
    async def test_mid_stream_failure_becomes_transport_error(self):
        session = GeminiChatSession(_chat(stream=_stream("Hel", "lo", fail_after=1)))
        received = []

        with pytest.raises(TransportError, match="stream dropped"):
            async for chunk in await session.send_stream("Hi"):
                received.append(chunk)
        assert received == ["Hel"]
