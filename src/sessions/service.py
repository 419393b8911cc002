"""Chat service for the backend session CRUD endpoints.

Lists chats and their messages, renames and archives chats. Every failure
is raised as ChatServiceError so optimistic callers can roll back.
"""

import logging
from typing import Any

import httpx
from pydantic import TypeAdapter, ValidationError

from src.config import ChatClientConfig, get_client_config
from src.models.schemas import (
    UNTITLED_CHAT_TITLE,
    ChatSession,
    ChatSummary,
    Message,
    MessageSummary,
)

logger = logging.getLogger(__name__)

_chat_list = TypeAdapter(list[ChatSummary])
_message_list = TypeAdapter(list[MessageSummary])


class ChatServiceError(Exception):
    """Raised when a session CRUD request fails."""

    pass


class AuthenticationError(ChatServiceError):
    """Raised when no credentials are available outside admin mode."""

    pass


class ChatService:
    """Async client for the chat collection endpoints."""

    def __init__(
        self,
        config: ChatClientConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config or get_client_config()
        self._transport = transport

    def _headers(self) -> dict[str, str]:
        if not self._config.admin_mode and not self._config.auth_token:
            raise AuthenticationError("User not authenticated")
        return self._config.auth_headers()

    async def _request(
        self,
        method: str,
        path: str,
        failure: str,
        **kwargs: Any,
    ) -> httpx.Response:
        """Send one request to the chat collection.

        Raises:
            AuthenticationError: If no token is configured outside admin mode.
            ChatServiceError: On connection failure or non-success status.
        """
        headers = self._headers()
        async with httpx.AsyncClient(
            transport=self._transport,
            timeout=self._config.request_timeout,
        ) as client:
            try:
                response = await client.request(
                    method,
                    f"{self._config.chat_url}{path}",
                    headers=headers,
                    **kwargs,
                )
                response.raise_for_status()
            except httpx.HTTPStatusError as e:
                logger.error(f"{failure}: HTTP {e.response.status_code}")
                raise ChatServiceError(failure) from e
            except httpx.RequestError as e:
                logger.error(f"{failure}: {e}")
                raise ChatServiceError(failure) from e
        return response

    async def get_chats(
        self,
        skip: int = 0,
        limit: int = 100,
        archived: bool | None = None,
    ) -> list[ChatSummary]:
        """Get chat history for the current user.

        Args:
            skip: Number of chats to skip.
            limit: Maximum number of chats to return.
            archived: Filter on archive state; None returns both.
        """
        params: dict[str, Any] = {"skip": skip, "limit": limit}
        if archived is not None:
            params["archived"] = str(archived).lower()

        failure = "Failed to fetch chat history"
        response = await self._request("GET", "", failure, params=params)
        try:
            return _chat_list.validate_json(response.content)
        except ValidationError as e:
            raise ChatServiceError(failure) from e

    async def get_chats_with_message_counts(
        self,
        skip: int = 0,
        limit: int = 100,
        archived: bool = False,
    ) -> list[ChatSession]:
        """Get chats in session-list form, with archive state set."""
        chats = await self.get_chats(skip, limit, archived=archived)
        return [
            session.model_copy(update={"is_archived": archived})
            for session in format_chats_for_ui(chats)
        ]

    async def get_chat_messages(
        self,
        chat_id: int | str,
        skip: int = 0,
        limit: int = 100,
    ) -> list[MessageSummary]:
        """Get messages for a specific chat."""
        failure = f"Failed to fetch messages for chat {chat_id}"
        response = await self._request(
            "GET",
            f"/{chat_id}/messages",
            failure,
            params={"skip": skip, "limit": limit},
        )
        try:
            return _message_list.validate_json(response.content)
        except ValidationError as e:
            raise ChatServiceError(failure) from e

    async def rename_chat(self, chat_id: int | str, title: str) -> None:
        await self._request(
            "PATCH", f"/{chat_id}", f"Failed to rename chat {chat_id}", json={"title": title}
        )

    async def set_archived(self, chat_id: int | str, archived: bool) -> None:
        action = "archive" if archived else "unarchive"
        await self._request(
            "PATCH",
            f"/{chat_id}/archive",
            f"Failed to {action} chat {chat_id}",
            json={"is_archived": archived},
        )

    async def archive_all(self) -> None:
        await self._request("POST", "/archive-all", "Failed to archive all chats")


def format_chats_for_ui(chats: list[ChatSummary]) -> list[ChatSession]:
    """Convert API chat summaries to session-list records."""
    return [
        ChatSession(
            id=str(chat.id),
            title=chat.title or UNTITLED_CHAT_TITLE,
            created_at=chat.created_at or chat.updated_at,
            last_message_time=chat.updated_at,
            message_count=chat.message_count or 0,
            is_archived=chat.is_archived,
        )
        for chat in chats
    ]


def format_messages_for_ui(messages: list[MessageSummary]) -> list[Message]:
    """Convert API messages to conversation messages."""
    return [
        Message(
            id=str(message.id),
            role=message.role,
            content=message.content,
            timestamp=message.created_at,
        )
        for message in messages
    ]
