"""Chunk decoder for the chat stream body.

Turns transport units (bytes or text, as delivered by httpx) into decoded
JSON values. Frames are newline-delimited; Server-Sent Events lines are
accepted too, so the same decoder reads NDJSON and text/event-stream bodies.
"""

import codecs
import json
import logging
from collections.abc import AsyncIterable, AsyncIterator, Iterator
from typing import Any

from src.streaming.errors import DecodeError

logger = logging.getLogger(__name__)

SSE_DATA_PREFIX = "data:"
# SSE fields carrying no payload for this protocol
SSE_IGNORED_PREFIXES = ("event:", "id:", "retry:", ":")

_json_decoder = json.JSONDecoder()


def _frame_payload(line: str) -> str:
    """Return the JSON text of one frame, or an empty string to skip it."""
    line = line.strip()
    if not line:
        return ""
    if line.startswith(SSE_DATA_PREFIX):
        return line[len(SSE_DATA_PREFIX):].strip()
    if line.startswith(SSE_IGNORED_PREFIXES):
        return ""
    return line


def _parse_frame(payload: str) -> Iterator[Any]:
    """Yield every JSON value in a frame.

    A frame normally holds one object, but backends that flush several
    objects without a separator are tolerated.

    Raises:
        DecodeError: If any part of the frame is not valid JSON.
    """
    pos = 0
    end = len(payload)
    while pos < end:
        try:
            value, pos = _json_decoder.raw_decode(payload, pos)
        except json.JSONDecodeError as e:
            raise DecodeError(f"Malformed stream frame: {payload[:200]!r}") from e
        yield value
        while pos < end and payload[pos].isspace():
            pos += 1


class ChunkDecoder:
    """Incremental decoder holding partial frames between transport units.

    Feed units in arrival order with feed(), then call finish() once the
    transport is exhausted.
    """

    def __init__(self, encoding: str = "utf-8") -> None:
        self._text_decoder = codecs.getincrementaldecoder(encoding)()
        # Text of the incomplete last frame, kept in pieces until its newline arrives
        self._pending: list[str] = []

    def feed(self, unit: bytes | str) -> Iterator[Any]:
        """Buffer a transport unit and iterate the values it completed.

        The unit is buffered immediately; frames are parsed as the returned
        iterator is consumed, so values ahead of a malformed frame are still
        delivered in order.

        Raises:
            DecodeError: If the bytes are not valid text, or (while
                iterating) a completed frame is malformed.
        """
        if isinstance(unit, bytes):
            try:
                unit = self._text_decoder.decode(unit)
            except UnicodeDecodeError as e:
                raise DecodeError(f"Stream is not valid text: {e}") from e

        head, *lines = unit.split("\n")
        self._pending.append(head)
        if not lines:
            return self._parse_frames([])

        frames = ["".join(self._pending), *lines[:-1]]
        self._pending = [lines[-1]]
        return self._parse_frames(frames)

    def finish(self) -> Iterator[Any]:
        """Flush the buffer at end of transport.

        Returns:
            Values from a final frame that had no trailing newline.

        Raises:
            DecodeError: If the leftover buffer is not valid JSON.
        """
        try:
            tail = self._text_decoder.decode(b"", final=True)
        except UnicodeDecodeError as e:
            raise DecodeError(f"Stream ended inside a character: {e}") from e

        remaining = "".join(self._pending) + tail
        self._pending = []
        return self._parse_frames([remaining])

    @staticmethod
    def _parse_frames(frames: list[str]) -> Iterator[Any]:
        for frame in frames:
            payload = _frame_payload(frame)
            if payload:
                yield from _parse_frame(payload)


async def decode_stream(units: AsyncIterable[bytes | str]) -> AsyncIterator[Any]:
    """Decode a streaming body into JSON values, preserving arrival order.

    Args:
        units: Transport units, e.g. ``response.aiter_bytes()``.

    Yields:
        Each decoded JSON value as soon as its frame is complete.

    Raises:
        DecodeError: On a malformed frame or an unparsable trailing buffer.
            The sequence ends at the first error.
    """
    decoder = ChunkDecoder()
    async for unit in units:
        for value in decoder.feed(unit):
            yield value
    for value in decoder.finish():
        yield value
