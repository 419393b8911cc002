"""Chat controller: the caller side of the streaming pipeline.

Owns the displayed conversation and the session list, and is what UI event
handlers talk to. Every streamed chunk goes through the correlator's
staleness guard before the reducer sees it.
"""

import asyncio
import logging
import uuid
from collections.abc import Callable
from functools import partial

from pydantic import ValidationError

from src.config import ChatClientConfig, get_client_config
from src.models.schemas import (
    ChatInfoChunk,
    ChatMessageRequest,
    ConversationState,
    Message,
    StreamChunk,
)
from src.sessions.service import ChatService, ChatServiceError, format_messages_for_ui
from src.sessions.store import SessionStore
from src.streaming.correlator import SessionCorrelator, StreamBinding
from src.streaming.errors import StreamError
from src.streaming.orchestrator import StreamHandle, StreamOrchestrator
from src.streaming.reducer import reduce

logger = logging.getLogger(__name__)

# notifier(message, type) where type is "positive" or "negative"
Notifier = Callable[[str, str], None]

STREAM_FAILED_NOTICE = "Failed to get response from server"


def _log_notice(message: str, kind: str) -> None:
    if kind == "negative":
        logger.error(message)
    else:
        logger.info(message)


class ChatController:
    """Conversation and session state for one chat view."""

    def __init__(
        self,
        orchestrator: StreamOrchestrator | None = None,
        service: ChatService | None = None,
        sessions: SessionStore | None = None,
        notifier: Notifier | None = None,
        config: ChatClientConfig | None = None,
    ) -> None:
        """Initialize the controller.

        Args:
            orchestrator: Stream runner; built from config if not provided.
            service: Session CRUD client; built from config if not provided.
            sessions: Session list; starts empty if not provided.
            notifier: User-facing notice channel; logs if not provided.
            config: Client configuration, loaded from environment if needed.
        """
        if orchestrator is None or service is None:
            config = config or get_client_config()
        self._orchestrator = orchestrator or StreamOrchestrator(config)
        self._service = service or ChatService(config)
        self._notify = notifier if notifier is not None else _log_notice
        self._correlator = SessionCorrelator()
        self._stream: StreamHandle | None = None
        self.sessions = sessions if sessions is not None else SessionStore()
        self.state = ConversationState()

    @property
    def is_streaming(self) -> bool:
        return self._stream is not None and not self._stream.done()

    def _abandon_stream(self) -> None:
        if self.is_streaming:
            logger.info("Abandoning in-flight chat stream")
            self._stream.cancel()
        self._stream = None
        self._correlator.invalidate()

    def _on_chunk(self, binding: StreamBinding, chunk: StreamChunk) -> None:
        active = self.state.active_session_id
        if not self._correlator.is_relevant(binding, active):
            return

        is_new = isinstance(chunk, ChatInfoChunk) and self._correlator.is_new_session(
            binding, active
        )
        transition = reduce(self.state, chunk, is_new)
        self.state = transition.state

        if transition.new_session is not None:
            self._correlator.adopt(binding, transition.new_session.id)
            self.sessions.add(transition.new_session)
        if transition.completed_session_id is not None:
            self.sessions.touch(transition.completed_session_id)
        if transition.error is not None:
            self._notify(transition.error, "negative")

    async def send(self, content: str) -> None:
        """Send a user message and stream the assistant reply into state.

        Blank messages are ignored, as is sending while a reply is still
        streaming. Stream failures are reported through the notifier.
        """
        if not content.strip():
            return
        if self.is_streaming:
            logger.warning("Ignoring message sent while a reply is still streaming")
            return

        # New chats send no chat_id; the server answers with a chat_info chunk
        try:
            request = ChatMessageRequest(message=content, chat_id=self.state.active_session_id)
        except ValidationError as e:
            logger.error(f"Cannot send to session {self.state.active_session_id!r}: {e}")
            self._notify(STREAM_FAILED_NOTICE, "negative")
            return

        user_message = Message(id=uuid.uuid4().hex, content=content, role="user")
        self.state = self.state.model_copy(
            update={"messages": (*self.state.messages, user_message), "typing": True}
        )

        binding = self._correlator.bind(self.state.active_session_id)
        handle = self._orchestrator.start(request, partial(self._on_chunk, binding))
        self._stream = handle

        try:
            await handle.wait()
        except asyncio.CancelledError:
            if not handle.cancelled:
                raise
            logger.info("Chat stream cancelled")
            return
        except StreamError as e:
            logger.error(f"Stream error: {e}")
            if self._correlator.is_relevant(binding, self.state.active_session_id):
                self.state = self.state.model_copy(update={"typing": False})
                self._notify(STREAM_FAILED_NOTICE, "negative")
            return
        finally:
            if self._stream is handle:
                self._stream = None

        # Connection closed without a status chunk still ends the turn
        if self.state.typing and self._correlator.is_relevant(
            binding, self.state.active_session_id
        ):
            self.state = self.state.model_copy(update={"typing": False})

    def new_chat(self) -> None:
        """Clear the view so the next message starts a new chat."""
        self._abandon_stream()
        self.state = ConversationState()

    async def select_session(self, session_id: str) -> None:
        """Switch to an existing session and load its messages."""
        self._abandon_stream()
        self.state = ConversationState(active_session_id=session_id)

        try:
            summaries = await self._service.get_chat_messages(session_id)
        except ChatServiceError as e:
            logger.error(f"Error fetching messages for session {session_id}: {e}")
            self._notify("Failed to load messages", "negative")
            return

        if self.state.active_session_id != session_id:
            return
        # A turn may have started while history was loading; keep it last
        history = format_messages_for_ui(summaries)
        self.state = self.state.model_copy(
            update={"messages": (*history, *self.state.messages)}
        )

    async def load_sessions(self) -> None:
        """Fetch active and archived sessions into the session list."""
        try:
            active = await self._service.get_chats_with_message_counts(archived=False)
            archived = await self._service.get_chats_with_message_counts(archived=True)
        except ChatServiceError as e:
            logger.error(f"Error fetching chat sessions: {e}")
            self._notify("Failed to load chat history", "negative")
            return
        self.sessions.replace_all([*active, *archived])

    async def rename_session(self, session_id: str, title: str) -> bool:
        ok = await self.sessions.rename(session_id, title, self._service)
        if ok:
            self._notify("Chat renamed successfully", "positive")
        else:
            self._notify("Failed to rename chat", "negative")
        return ok

    async def set_archived(self, session_id: str, archived: bool) -> bool:
        ok = await self.sessions.set_archived(session_id, archived, self._service)
        action = "archive" if archived else "unarchive"
        if ok:
            self._notify(f"Chat {action}d successfully", "positive")
        else:
            self._notify(f"Failed to {action} chat", "negative")
        return ok

    async def archive_all(self) -> bool:
        ok = await self.sessions.archive_all(self._service)
        if not ok:
            self._notify("Failed to archive chats", "negative")
        return ok
