"""Pytest fixtures and shared test configuration.

Provides reusable fixtures for unit and integration tests.

Fixtures:
    - client_config: Configuration pointing at the in-process test backend
    - backend: FastAPI stand-in for the chat backend, with recorded requests
    - backend_transport: ASGI transport routing httpx calls to the backend
    - chunked_transport: Factory for mock transports streaming raw units
"""

import asyncio
from collections.abc import AsyncIterator, Callable
from dataclasses import dataclass
from typing import Any

import httpx
import pytest
from fastapi import FastAPI, Header, HTTPException, Request
from fastapi.responses import StreamingResponse

from src.config import ChatClientConfig
from tests.helpers import FakeBackend

TEST_TOKEN = "test-token"


@pytest.fixture
def client_config() -> ChatClientConfig:
    """Return configuration aimed at the test backend.

    Returns:
        Config with a bearer token and admin mode disabled.
    """
    return ChatClientConfig(
        api_base_url="http://test",
        chat_endpoint="/chat",
        stream_endpoint="/chat/stream",
        auth_token=TEST_TOKEN,
        admin_mode=False,
        request_timeout=5.0,
        stream_timeout=None,
    )


@pytest.fixture
def backend() -> FakeBackend:
    """Create a FastAPI stand-in for the chat backend.

    Returns:
        FakeBackend whose fields drive the app's responses.
    """
    app = FastAPI()
    state = FakeBackend(app=app)

    def check_auth(authorization: str | None) -> None:
        if authorization != f"Bearer {TEST_TOKEN}":
            raise HTTPException(status_code=401, detail="Not authenticated")

    def find_chat(chat_id: int) -> dict[str, Any]:
        for chat in state.chats:
            if chat["id"] == chat_id:
                return chat
        raise HTTPException(status_code=404, detail="Chat not found")

    @app.post("/chat/stream")
    async def chat_stream(
        request: Request, authorization: str | None = Header(None)
    ) -> StreamingResponse:
        check_auth(authorization)
        state.requests.append({"path": "/chat/stream", "body": await request.json()})
        if state.stream_status != 200:
            raise HTTPException(status_code=state.stream_status, detail="Stream failed")

        async def generate() -> AsyncIterator[bytes]:
            for unit in state.stream_units:
                yield unit

        return StreamingResponse(generate(), media_type="application/x-ndjson")

    @app.get("/chat")
    async def list_chats(
        skip: int = 0,
        limit: int = 100,
        archived: bool | None = None,
        authorization: str | None = Header(None),
    ) -> list[dict[str, Any]]:
        check_auth(authorization)
        state.requests.append({"path": "/chat", "archived": archived})
        chats = [c for c in state.chats if archived is None or c["is_archived"] == archived]
        return chats[skip : skip + limit]

    @app.get("/chat/{chat_id}/messages")
    async def list_messages(
        chat_id: int, authorization: str | None = Header(None)
    ) -> list[dict[str, Any]]:
        check_auth(authorization)
        find_chat(chat_id)
        return state.messages.get(chat_id, [])

    @app.patch("/chat/{chat_id}")
    async def rename_chat(
        chat_id: int, request: Request, authorization: str | None = Header(None)
    ) -> dict[str, Any]:
        check_auth(authorization)
        if state.fail_writes:
            raise HTTPException(status_code=500, detail="Write failed")
        chat = find_chat(chat_id)
        chat["title"] = (await request.json())["title"]
        return chat

    @app.patch("/chat/{chat_id}/archive")
    async def archive_chat(
        chat_id: int, request: Request, authorization: str | None = Header(None)
    ) -> dict[str, Any]:
        check_auth(authorization)
        if state.fail_writes:
            raise HTTPException(status_code=500, detail="Write failed")
        chat = find_chat(chat_id)
        chat["is_archived"] = (await request.json())["is_archived"]
        return chat

    @app.post("/chat/archive-all")
    async def archive_all(authorization: str | None = Header(None)) -> dict[str, str]:
        check_auth(authorization)
        if state.fail_writes:
            raise HTTPException(status_code=500, detail="Write failed")
        for chat in state.chats:
            chat["is_archived"] = True
        return {"status": "ok"}

    return state


@pytest.fixture
def backend_transport(backend: FakeBackend) -> httpx.ASGITransport:
    """Route httpx requests to the fake backend in-process."""
    return httpx.ASGITransport(app=backend.app)


class ChunkedByteStream(httpx.AsyncByteStream):
    """Response body delivered as explicit transport units.

    The body waits for ``gate`` (when given) before its first unit. With
    hang=True it never ends after the last unit, like a backend still
    generating a reply.
    """

    def __init__(
        self,
        units: list[bytes],
        hang: bool = False,
        gate: asyncio.Event | None = None,
    ) -> None:
        self._units = units
        self._hang = hang
        self._gate = gate
        self.closed = False

    async def __aiter__(self) -> AsyncIterator[bytes]:
        if self._gate is not None:
            await self._gate.wait()
        for unit in self._units:
            yield unit
            await asyncio.sleep(0)
        if self._hang:
            await asyncio.Event().wait()

    async def aclose(self) -> None:
        self.closed = True


@dataclass
class ChunkedTransport:
    transport: httpx.MockTransport
    stream: ChunkedByteStream
    requests: list[httpx.Request]
    gate: asyncio.Event | None = None


@pytest.fixture
def chunked_transport() -> Callable[..., ChunkedTransport]:
    """Factory for mock transports that stream the given units.

    Returns:
        Callable(units, status_code=200, hang=False, gated=False) -> ChunkedTransport.
        With gated=True the body is held until ``gate.set()``.
    """

    def factory(
        units: list[bytes],
        status_code: int = 200,
        hang: bool = False,
        gated: bool = False,
    ) -> ChunkedTransport:
        gate = asyncio.Event() if gated else None
        stream = ChunkedByteStream(units, hang=hang, gate=gate)
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(status_code, stream=stream)

        return ChunkedTransport(httpx.MockTransport(handler), stream, requests, gate)

    return factory
