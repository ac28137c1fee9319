"""Stateful streaming conversation with the kitchen assistant.

State machine:
    IDLE --send()--> SENDING --stream opened--> STREAMING --done/error--> IDLE

While a turn is in flight (SENDING or STREAMING) further sends are ignored.
The transcript only grows; the one exception is its last element, the
assistant reply, which is replaced by index as chunks arrive. Observers
receive the full reply text accumulated so far after every chunk; when a
stream fails they get one separate "replaced" notification carrying the
fallback reply, so chunk notifications never shrink.

All state changes happen on the asyncio event loop. The pending check and the
transcript appends that follow it contain no `await`, so two concurrent
send() calls can never both start a turn.
"""

import uuid
from enum import Enum
from typing import Callable, Optional

from sous_chef.clients.chat import ChatBackend, ChatStreamSession
from sous_chef.models.models import ChatMessage
from sous_chef.prompts.prompts import CHEF_PERSONA, FALLBACK_REPLY, GREETING
from sous_chef.utils.errors import safe_execute_sync
from sous_chef.utils.logger import logger


ReplyObserver = Callable[[str], None]


class SessionState(str, Enum):
    IDLE = "idle"
    SENDING = "sending"
    STREAMING = "streaming"


class ConversationSession:
    """Chat session with a fixed chef persona and a growing transcript."""

    def __init__(
        self,
        backend: ChatBackend,
        persona: str = CHEF_PERSONA,
        greeting: str = GREETING,
        fallback_reply: str = FALLBACK_REPLY,
    ) -> None:
        self._backend = backend
        self._persona = persona
        self._fallback_reply = fallback_reply
        self._chat: Optional[ChatStreamSession] = None
        self._transcript: list[ChatMessage] = [ChatMessage(role="assistant", text=greeting)]
        self._state = SessionState.IDLE
        self._observers: list[tuple[ReplyObserver, Optional[ReplyObserver]]] = []
        self.session_id = uuid.uuid4().hex[:12]
        self._log_extra = {"session_id": self.session_id, "operation": "chat"}

    @property
    def persona(self) -> str:
        return self._persona

    @property
    def transcript(self) -> tuple[ChatMessage, ...]:
        """Snapshot of the conversation so far (never empty)."""
        return tuple(message.model_copy() for message in self._transcript)

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def pending(self) -> bool:
        return self._state is not SessionState.IDLE

    def subscribe(
        self,
        on_chunk: ReplyObserver,
        on_replaced: Optional[ReplyObserver] = None,
    ) -> Callable[[], None]:
        """Register callbacks for reply updates.

        Args:
            on_chunk: Receives the cumulative reply text after each chunk.
                Successive calls within a turn only ever extend the text.
            on_replaced: Receives the fallback reply when a failed stream
                replaces whatever was shown for the current turn.

        Returns:
            Callable that removes both callbacks.
        """
        entry = (on_chunk, on_replaced)
        self._observers.append(entry)

        def unsubscribe() -> None:
            if entry in self._observers:
                self._observers.remove(entry)

        return unsubscribe

    def _replace_reply(self, text: str) -> None:
        self._transcript[-1] = ChatMessage(role="assistant", text=text)

    def _notify(self, text: str, replaced: bool = False) -> None:
        for on_chunk, on_replaced in list(self._observers):
            callback = on_replaced if replaced else on_chunk
            if callback is None:
                continue
            safe_execute_sync(lambda: callback(text), "Chat observer", log_level="error")

    async def send(self, user_text: str) -> Optional[ChatMessage]:
        """Send one user turn and stream the assistant reply into the transcript.

        Blank text, or a call while another turn is in flight, is ignored.

        Args:
            user_text: Message typed by the user.

        Returns:
            The final assistant message, or None if the call was ignored.
        """
        text = (user_text or "").strip()
        if not text:
            logger.debug("Ignoring blank chat message", extra=self._log_extra)
            return None
        if self.pending:
            logger.debug(f"Ignoring chat message while {self._state.value}", extra=self._log_extra)
            return None

        self._transcript.append(ChatMessage(role="user", text=text))
        self._transcript.append(ChatMessage(role="assistant", text=""))
        self._state = SessionState.SENDING

        reply = ""
        chunk_count = 0
        try:
            if self._chat is None:
                self._chat = self._backend.create_session(self._persona)
            stream = await self._chat.send_stream(text)
            self._state = SessionState.STREAMING
            async for chunk in stream:
                reply += chunk
                chunk_count += 1
                self._replace_reply(reply)
                self._notify(reply)
            logger.debug(
                f"✓ Chat reply complete ({chunk_count} chunks, {len(reply)} chars)", extra=self._log_extra
            )
        except Exception as e:
            logger.warning(f"Chat stream failed after {chunk_count} chunks: {e}", extra=self._log_extra)
            self._replace_reply(self._fallback_reply)
            self._notify(self._fallback_reply, replaced=True)
        finally:
            self._state = SessionState.IDLE

        return self._transcript[-1].model_copy()
