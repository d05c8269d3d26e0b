"""Shared fixtures: an in-memory websocket double and a test app."""
from __future__ import annotations

import asyncio
import json

import pytest
from fastapi.testclient import TestClient

from app.config import Settings
from app.main import create_app


class FakeWebSocket:
    """Records sent frames and replays scripted inbound frames.

    ``inbound`` items are text or bytes frames; once exhausted the socket
    reports a client disconnect, unless ``hold_open`` is set, in which case
    ``receive`` blocks until ``close`` is called.
    """

    def __init__(self, inbound=(), *, fail_send=False, send_delay=0.0, close_delay=0.0,
                 hold_open=False):
        self.inbound = list(inbound)
        self.sent: list[str] = []
        self.accepted = False
        self.closed_with: int | None = None
        self.fail_send = fail_send
        self.send_delay = send_delay
        self.close_delay = close_delay
        self.hold_open = hold_open
        self._closed = asyncio.Event()

    async def accept(self) -> None:
        self.accepted = True

    async def receive(self) -> dict:
        await asyncio.sleep(0)
        if self.inbound and self.closed_with is None:
            frame = self.inbound.pop(0)
            key = "bytes" if isinstance(frame, bytes) else "text"
            return {"type": "websocket.receive", key: frame}
        if self.hold_open and self.closed_with is None:
            await self._closed.wait()
        return {"type": "websocket.disconnect", "code": 1000}

    async def send_text(self, data: str) -> None:
        if self.send_delay:
            await asyncio.sleep(self.send_delay)
        if self.fail_send or self.closed_with is not None:
            raise RuntimeError("connection closed")
        self.sent.append(data)

    async def close(self, code: int = 1000) -> None:
        if self.close_delay:
            await asyncio.sleep(self.close_delay)
        self.closed_with = code
        self._closed.set()

    @property
    def counts(self) -> list[int]:
        return [json.loads(frame)["c"] for frame in self.sent]


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        static_dir=str(tmp_path / "static"),
        send_timeout_seconds=0.5,
    )


@pytest.fixture
def client(settings):
    with TestClient(create_app(settings)) as test_client:
        yield test_client
