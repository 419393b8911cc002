"""Stream orchestrator: owns the lifecycle of one streaming chat request.

Opens the HTTP stream with httpx, decodes and classifies chunks, and hands
each one to the caller's sink in arrival order. Retries and user
notification are left to the caller.
"""

import asyncio
import logging
from collections.abc import Callable
from contextlib import aclosing

import httpx

from src.config import ChatClientConfig, get_client_config
from src.models.schemas import ChatMessageRequest, StreamChunk
from src.streaming.decoder import decode_stream
from src.streaming.dispatcher import classify
from src.streaming.errors import ChunkRejectedError, TransportError

logger = logging.getLogger(__name__)

ChunkSink = Callable[[StreamChunk], None]


class StreamHandle:
    """A running stream that the caller can cancel or await.

    After cancel() returns, the sink is never invoked again, even for
    chunks already decoded from the transport unit being processed.
    """

    def __init__(self) -> None:
        self._task: asyncio.Task[None] | None = None
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def done(self) -> bool:
        return self._task is not None and self._task.done()

    def cancel(self) -> None:
        """Abandon the stream and release its connection."""
        self._cancelled = True
        if self._task is not None:
            self._task.cancel()

    async def wait(self) -> None:
        """Wait for the stream to finish.

        Raises:
            StreamError: If the stream failed.
            asyncio.CancelledError: If the stream was cancelled.
        """
        if self._task is None:
            raise RuntimeError("Stream has not been started")
        await self._task


class StreamOrchestrator:
    """Runs chat streams against the backend.

    Holds no per-stream state: each call opens and releases its own
    connection, and callers must not run two streams into one conversation.
    """

    def __init__(
        self,
        config: ChatClientConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            config: Optional client configuration.
                    Loads from environment if not provided.
            transport: Optional httpx transport (tests, custom networking).
        """
        self._config = config or get_client_config()
        self._transport = transport

    async def stream(
        self,
        request: ChatMessageRequest,
        on_chunk: ChunkSink,
        handle: StreamHandle | None = None,
    ) -> None:
        """Stream one chat turn, invoking on_chunk per chunk in order.

        Args:
            request: Message and optional chat id to send.
            on_chunk: Sink called synchronously once per classified chunk.
            handle: Handle whose cancellation stops delivery.

        Raises:
            TransportError: On connection failure or non-success status.
            DecodeError: On malformed stream framing.
        """
        headers = {"Accept": "application/x-ndjson, text/event-stream"}
        headers.update(self._config.auth_headers())
        delivered = 0

        async with httpx.AsyncClient(
            transport=self._transport,
            timeout=self._config.stream_timeout,
        ) as client:
            try:
                async with client.stream(
                    "POST",
                    self._config.stream_url,
                    json=request.model_dump(exclude_none=True),
                    headers=headers,
                ) as response:
                    response.raise_for_status()
                    logger.info(f"Chat stream opened (chat_id={request.chat_id})")

                    async with aclosing(decode_stream(response.aiter_bytes())) as values:
                        async for value in values:
                            if handle is not None and handle.cancelled:
                                logger.info("Chat stream cancelled by caller")
                                return
                            try:
                                chunk = classify(value)
                            except ChunkRejectedError as e:
                                logger.warning(f"Skipping stream chunk: {e}")
                                continue
                            on_chunk(chunk)
                            delivered += 1
            except httpx.HTTPStatusError as e:
                raise TransportError(
                    f"HTTP {e.response.status_code}",
                    status_code=e.response.status_code,
                ) from e
            except httpx.RequestError as e:
                raise TransportError(f"Connection failed: {e}") from e
            finally:
                logger.info(f"Chat stream closed after {delivered} chunk(s)")

    def start(self, request: ChatMessageRequest, on_chunk: ChunkSink) -> StreamHandle:
        """Run stream() as a task on the running event loop.

        Returns:
            Handle for cancelling or awaiting the stream.
        """
        handle = StreamHandle()
        handle._task = asyncio.create_task(self.stream(request, on_chunk, handle))
        return handle
