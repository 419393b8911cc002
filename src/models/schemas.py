from datetime import datetime
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

NEW_CHAT_TITLE = "New Chat"
UNTITLED_CHAT_TITLE = "Untitled Chat"
STATUS_COMPLETE = "complete"


class Message(BaseModel):
    """A single message in the displayed conversation.

    Attributes:
        id: Client- or server-assigned message identifier.
        content: The message text.
        role: The speaker, either user or assistant.
        timestamp: When the message was created.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    content: str
    role: Literal["user", "assistant"]
    timestamp: datetime = Field(default_factory=datetime.now)


class ChatSession(BaseModel):
    """A chat session as shown in the session list.

    Attributes:
        id: Server-assigned chat identifier, as a string.
        title: Display title.
        created_at: When the session record was created.
        last_message_time: Time of the most recent completed turn.
        message_count: Number of messages, when known.
        is_archived: Whether the session is archived.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    created_at: datetime = Field(default_factory=datetime.now)
    last_message_time: datetime | None = None
    message_count: int | None = Field(None, ge=0)
    is_archived: bool = False


class ConversationState(BaseModel):
    """Conversation held by the caller and advanced only by the reducer.

    Attributes:
        messages: Ordered messages of the active conversation.
        typing: Whether an assistant reply is being generated.
        active_session_id: Session being displayed, None for a new chat.
    """

    model_config = ConfigDict(frozen=True)

    messages: tuple[Message, ...] = ()
    typing: bool = False
    active_session_id: str | None = None


class ChatMessageRequest(BaseModel):
    """Request payload for the streaming chat endpoint.

    Attributes:
        message: User's question or prompt.
        chat_id: Existing chat to continue, None to start a new one.
    """

    message: str = Field(..., min_length=1)
    chat_id: int | None = None

    @field_validator("message", mode="before")
    @classmethod
    def strip_message(cls, v: str) -> str:
        """Strip whitespace from message before validation."""
        if isinstance(v, str):
            return v.strip()
        return v


# Stream chunks. The backend wraps every payload as {"type": ..., "data": {...}}.


class ChatInfoData(BaseModel):
    chat_id: int
    title: str | None = None


class TextDeltaData(BaseModel):
    delta: str


class StatusData(BaseModel):
    status: str
    chat_id: int | None = None


class ErrorData(BaseModel):
    message: str


class ChatInfoChunk(BaseModel):
    """Announces the server-assigned session of the stream."""

    model_config = ConfigDict(frozen=True)

    type: Literal["chat_info"] = "chat_info"
    data: ChatInfoData


class TextDeltaChunk(BaseModel):
    """Incremental fragment of assistant output."""

    model_config = ConfigDict(frozen=True)

    type: Literal["text_delta"] = "text_delta"
    data: TextDeltaData


class StatusChunk(BaseModel):
    """Lifecycle signal; status "complete" ends the turn."""

    model_config = ConfigDict(frozen=True)

    type: Literal["status"] = "status"
    data: StatusData

    @property
    def is_complete(self) -> bool:
        return self.data.status == STATUS_COMPLETE


class ErrorChunk(BaseModel):
    """In-band failure for the current turn."""

    model_config = ConfigDict(frozen=True)

    type: Literal["error"] = "error"
    data: ErrorData


StreamChunk = Annotated[
    ChatInfoChunk | TextDeltaChunk | StatusChunk | ErrorChunk,
    Field(discriminator="type"),
]


class ChatSummary(BaseModel):
    """Chat entry returned by the chat list endpoint."""

    id: int
    title: str | None = None
    created_at: datetime | None = None
    updated_at: datetime
    is_archived: bool = False
    message_count: int | None = None


class MessageSummary(BaseModel):
    """Message entry returned by the chat messages endpoint."""

    id: int | str
    role: Literal["user", "assistant"]
    content: str
    created_at: datetime
