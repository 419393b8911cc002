"""Incremental chat-response streaming pipeline.

Turns a streaming HTTP body into conversation updates as chunks arrive.

Components:
    - decoder: framing and JSON decoding of transport units
    - dispatcher: discriminant-based classification into typed chunks
    - reducer: pure (state, chunk) -> state transitions
    - orchestrator: request lifecycle, cancellation, error translation
    - correlator: session bootstrap and staleness guards

Delivery is single-threaded on the asyncio loop; ordering is preserved end to end.
"""

from src.streaming.correlator import SessionCorrelator, StreamBinding
from src.streaming.decoder import ChunkDecoder, decode_stream
from src.streaming.dispatcher import classify
from src.streaming.errors import (
    ChunkRejectedError,
    DecodeError,
    InvalidChunkError,
    StreamError,
    TransportError,
    UnknownChunkTypeError,
)
from src.streaming.orchestrator import StreamHandle, StreamOrchestrator
from src.streaming.reducer import Transition, reduce

__all__ = [
    "ChunkDecoder",
    "ChunkRejectedError",
    "DecodeError",
    "InvalidChunkError",
    "SessionCorrelator",
    "StreamBinding",
    "StreamError",
    "StreamHandle",
    "StreamOrchestrator",
    "Transition",
    "TransportError",
    "UnknownChunkTypeError",
    "classify",
    "decode_stream",
    "reduce",
]
