"""Pydantic models shared by the streaming pipeline and session layer.

Provides type safety and validation for everything crossing the wire.

Models:
    - Message, ChatSession: conversation and session-list records
    - ConversationState: immutable state advanced by the reducer
    - ChatMessageRequest: payload for the streaming endpoint
    - StreamChunk: tagged union of chat_info, text_delta, status, error
    - ChatSummary, MessageSummary: session CRUD responses
"""

from src.models.schemas import (
    NEW_CHAT_TITLE,
    STATUS_COMPLETE,
    UNTITLED_CHAT_TITLE,
    ChatInfoChunk,
    ChatInfoData,
    ChatMessageRequest,
    ChatSession,
    ChatSummary,
    ConversationState,
    ErrorChunk,
    ErrorData,
    Message,
    MessageSummary,
    StatusChunk,
    StatusData,
    StreamChunk,
    TextDeltaChunk,
    TextDeltaData,
)

__all__ = [
    "NEW_CHAT_TITLE",
    "STATUS_COMPLETE",
    "UNTITLED_CHAT_TITLE",
    "ChatInfoChunk",
    "ChatInfoData",
    "ChatMessageRequest",
    "ChatSession",
    "ChatSummary",
    "ConversationState",
    "ErrorChunk",
    "ErrorData",
    "Message",
    "MessageSummary",
    "StatusChunk",
    "StatusData",
    "StreamChunk",
    "TextDeltaChunk",
    "TextDeltaData",
]
