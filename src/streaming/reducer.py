"""Conversation reducer for streamed chat chunks.

Pure state transitions: the reducer never mutates its input and never
touches the session list itself. Session-list effects are returned on the
Transition for the caller to apply.
"""

import uuid
from dataclasses import dataclass
from datetime import datetime

from src.models.schemas import (
    NEW_CHAT_TITLE,
    ChatInfoChunk,
    ChatSession,
    ConversationState,
    ErrorChunk,
    Message,
    StatusChunk,
    StreamChunk,
    TextDeltaChunk,
)


@dataclass(frozen=True)
class Transition:
    """Result of applying one chunk.

    Attributes:
        state: The next conversation state.
        new_session: Session synthesized for a newly created chat.
        completed_session_id: Session whose last message time should refresh.
        error: Message to surface on the caller's failure channel.
    """

    state: ConversationState
    new_session: ChatSession | None = None
    completed_session_id: str | None = None
    error: str | None = None


def _append_delta(state: ConversationState, delta: str, now: datetime) -> ConversationState:
    messages = state.messages
    last = messages[-1] if messages else None

    # Role of the tail alone decides extend vs append.
    if last is not None and last.role == "assistant":
        extended = last.model_copy(update={"content": last.content + delta})
        messages = (*messages[:-1], extended)
    else:
        seeded = Message(
            id=f"assistant-{uuid.uuid4().hex}",
            content=delta,
            role="assistant",
            timestamp=now,
        )
        messages = (*messages, seeded)

    return state.model_copy(update={"messages": messages, "typing": True})


def reduce(
    state: ConversationState,
    chunk: StreamChunk,
    is_new_session: bool,
    now: datetime | None = None,
) -> Transition:
    """Apply one stream chunk to the conversation.

    Args:
        state: Current conversation state.
        chunk: A classified stream chunk.
        is_new_session: Whether the stream is bootstrapping a new chat.
        now: Clock value for synthesized records (defaults to now).

    Returns:
        Transition with the next state and any session-list effects.
    """
    now = now or datetime.now()

    match chunk:
        case ChatInfoChunk(data=info):
            if not is_new_session:
                return Transition(state)
            session_id = str(info.chat_id)
            session = ChatSession(
                id=session_id,
                title=info.title or NEW_CHAT_TITLE,
                created_at=now,
                last_message_time=now,
                # The user message that opened the chat
                message_count=1,
            )
            return Transition(
                state.model_copy(update={"active_session_id": session_id}),
                new_session=session,
            )

        case TextDeltaChunk(data=text):
            return Transition(_append_delta(state, text.delta, now))

        case StatusChunk() if chunk.is_complete:
            completed = chunk.data.chat_id
            return Transition(
                state.model_copy(update={"typing": False}),
                completed_session_id=str(completed) if completed is not None else None,
            )

        case ErrorChunk(data=error):
            return Transition(
                state.model_copy(update={"typing": False}),
                error=error.message,
            )

        case _:
            # Other status values are reserved for future lifecycle states.
            return Transition(state)
