"""Chat view state for UI event handlers.

Responsibilities:
    - Appending the pending user message and starting the reply stream
    - Applying streamed chunks to the conversation and session list
    - Session switching, new chats, and session list refresh
    - Optimistic rename and archive with user notices

Contains no rendering. UI code calls the controller and reads its state.
"""

from src.chat.controller import ChatController, Notifier

__all__ = ["ChatController", "Notifier"]
