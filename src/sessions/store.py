"""Session list with optimistic rename and archive.

Local changes are applied first and rolled back when the backend call
fails. Sessions are never removed here; archival is the backend's concern.
"""

import logging
from datetime import datetime

from src.models.schemas import ChatSession
from src.sessions.service import ChatService, ChatServiceError

logger = logging.getLogger(__name__)


class SessionStore:
    """Ordered chat sessions, newest first."""

    def __init__(self, sessions: list[ChatSession] | None = None) -> None:
        self._sessions: list[ChatSession] = list(sessions or [])

    @property
    def sessions(self) -> list[ChatSession]:
        return list(self._sessions)

    def __len__(self) -> int:
        return len(self._sessions)

    def get(self, session_id: str) -> ChatSession | None:
        return next((s for s in self._sessions if s.id == session_id), None)

    def replace_all(self, sessions: list[ChatSession]) -> None:
        self._sessions = list(sessions)

    def add(self, session: ChatSession) -> bool:
        """Prepend a session unless one with the same id is already listed.

        Returns:
            True if the session was added.
        """
        if self.get(session.id) is not None:
            return False
        self._sessions.insert(0, session)
        return True

    def _update(self, session_id: str, **changes: object) -> ChatSession | None:
        """Replace a session with an updated copy, returning the previous one."""
        for index, session in enumerate(self._sessions):
            if session.id == session_id:
                self._sessions[index] = session.model_copy(update=changes)
                return session
        return None

    def touch(self, session_id: str, when: datetime | None = None) -> bool:
        """Refresh the last message time of a session.

        Returns:
            True if the session is listed.
        """
        return self._update(session_id, last_message_time=when or datetime.now()) is not None

    def active_sessions(self) -> list[ChatSession]:
        return [s for s in self._sessions if not s.is_archived]

    def archived_sessions(self) -> list[ChatSession]:
        return [s for s in self._sessions if s.is_archived]

    async def rename(self, session_id: str, title: str, service: ChatService) -> bool:
        """Rename a session optimistically.

        Args:
            session_id: Session to rename.
            title: New title.
            service: Backend client used to persist the change.

        Returns:
            True on success, False if the session is unknown or the backend
            rejected the change (the previous title is restored).
        """
        previous = self._update(session_id, title=title)
        if previous is None:
            logger.warning(f"Chat {session_id} not found for renaming")
            return False

        try:
            await service.rename_chat(session_id, title)
        except ChatServiceError as e:
            logger.warning(f"Rolling back rename of chat {session_id}: {e}")
            self._update(session_id, title=previous.title)
            return False

        logger.info(f"Renamed chat {session_id} to {title!r}")
        return True

    async def set_archived(self, session_id: str, archived: bool, service: ChatService) -> bool:
        """Archive or unarchive a session optimistically.

        Returns:
            True on success, False if the session is unknown or the backend
            rejected the change (the previous state is restored).
        """
        previous = self._update(session_id, is_archived=archived)
        if previous is None:
            logger.warning(f"Chat {session_id} not found for archiving")
            return False

        try:
            await service.set_archived(session_id, archived)
        except ChatServiceError as e:
            logger.warning(f"Rolling back archive state of chat {session_id}: {e}")
            self._update(session_id, is_archived=previous.is_archived)
            return False
        return True

    async def archive_all(self, service: ChatService) -> bool:
        """Archive every active session, restoring all of them on failure."""
        archived_ids = [s.id for s in self.active_sessions()]
        for session_id in archived_ids:
            self._update(session_id, is_archived=True)

        try:
            await service.archive_all()
        except ChatServiceError as e:
            logger.warning(f"Rolling back archive-all: {e}")
            for session_id in archived_ids:
                self._update(session_id, is_archived=False)
            return False
        return True
