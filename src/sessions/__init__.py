"""Session list state and the backend session CRUD client.

Responsibilities:
    - Fetching chats and chat messages from the backend
    - Optimistic rename and archive with rollback
    - Keeping the locally synthesized sessions in one ordered list

The streaming pipeline never calls the backend through this package; it only
hands synthesized sessions and completion touches to the store.
"""

from src.sessions.service import (
    AuthenticationError,
    ChatService,
    ChatServiceError,
    format_chats_for_ui,
    format_messages_for_ui,
)
from src.sessions.store import SessionStore

__all__ = [
    "AuthenticationError",
    "ChatService",
    "ChatServiceError",
    "SessionStore",
    "format_chats_for_ui",
    "format_messages_for_ui",
]
