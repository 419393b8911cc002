"""Session correlator: ties in-flight streams to the displayed conversation.

A stream captures its target session when it starts. Every chunk it
delivers is checked against the currently active session, and chunks from
streams the user has since moved away from are dropped.
"""

import logging
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass
class StreamBinding:
    """Target captured for one stream.

    Attributes:
        target_session_id: Session the stream writes into, None for a new chat.
        epoch: Correlator epoch at bind time.
        adopted: Whether a chat_info has already assigned the session id.
    """

    target_session_id: str | None
    epoch: int
    adopted: bool = False


class SessionCorrelator:
    """Decides session bootstrap and staleness for streamed chunks.

    Delivery is single-threaded, so check-and-set on a binding is atomic
    with respect to its own stream.
    """

    def __init__(self) -> None:
        self._epoch = 0

    @property
    def epoch(self) -> int:
        return self._epoch

    def bind(self, active_session_id: str | None) -> StreamBinding:
        """Capture the target of a stream that is about to start.

        Starting a stream supersedes any earlier binding.
        """
        self._epoch += 1
        return StreamBinding(target_session_id=active_session_id, epoch=self._epoch)

    def invalidate(self) -> None:
        """Mark every existing binding stale (session switched or cleared)."""
        self._epoch += 1

    def is_relevant(self, binding: StreamBinding, active_session_id: str | None) -> bool:
        """Whether a chunk from this binding may touch the active conversation."""
        if binding.epoch != self._epoch:
            logger.debug(f"Dropping chunk from superseded stream (epoch {binding.epoch})")
            return False
        if binding.target_session_id != active_session_id:
            logger.debug(
                f"Dropping chunk for session {binding.target_session_id!r}; "
                f"active session is {active_session_id!r}"
            )
            return False
        return True

    def is_new_session(self, binding: StreamBinding, active_session_id: str | None) -> bool:
        """Whether a chat_info seen now should bootstrap a new session."""
        return active_session_id is None and not binding.adopted

    def adopt(self, binding: StreamBinding, session_id: str) -> None:
        """Retarget a binding at the session a chat_info just announced."""
        binding.target_session_id = session_id
        binding.adopted = True
        logger.info(f"Stream adopted new chat session {session_id}")
