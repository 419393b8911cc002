"""Shared helpers for building stream bodies and fake backends in tests."""

import asyncio
import json
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from fastapi import FastAPI


@dataclass
class FakeBackend:
    """Mutable state behind the fake backend app."""

    app: FastAPI
    stream_units: list[bytes] = field(default_factory=list)
    stream_status: int = 200
    chats: list[dict[str, Any]] = field(default_factory=list)
    messages: dict[int, list[dict[str, Any]]] = field(default_factory=dict)
    fail_writes: bool = False
    requests: list[dict[str, Any]] = field(default_factory=list)


def ndjson(*chunks: dict[str, Any]) -> list[bytes]:
    """Encode chunks as newline-delimited JSON, one transport unit each."""
    return [json.dumps(chunk).encode() + b"\n" for chunk in chunks]


def radiation_safety_chunks(final: dict[str, Any] | None = None) -> list[dict[str, Any]]:
    """The canonical new-chat stream: chat_info, two deltas, then final chunk."""
    return [
        {"type": "chat_info", "data": {"chat_id": 42, "title": "Radiation Safety"}},
        {"type": "text_delta", "data": {"delta": "Hel"}},
        {"type": "text_delta", "data": {"delta": "lo"}},
        final or {"type": "status", "data": {"status": "complete", "chat_id": 42}},
    ]


async def wait_until(predicate: Callable[[], bool], attempts: int = 200) -> None:
    """Yield to the event loop until predicate holds."""
    for _ in range(attempts):
        if predicate():
            return
        await asyncio.sleep(0)
    raise AssertionError("Condition not reached")
