"""Registry of live websocket sessions.

Holds no business state. Broadcasts iterate over a snapshot returned by
``all()``, so sessions may connect or drop while a publish is in flight.
"""
from __future__ import annotations

import asyncio
import logging
import threading
import time
import uuid
from dataclasses import dataclass, field
from typing import Any

from app.schemas.messages import encode_count

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class Session:
    """One live client connection."""
    websocket: Any
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    connected_at: float = field(default_factory=time.time)
    # Highest count already delivered; -1 until the baseline goes out.
    last_sent: int = -1
    send_lock: asyncio.Lock = field(default_factory=asyncio.Lock, repr=False)

    async def send_count(self, count: int, timeout: float | None = None) -> bool:
        """Deliver ``count`` unless this session already shows a newer value.

        Caller must hold ``send_lock``.  Transport errors propagate.
        """
        if count <= self.last_sent:
            return False
        payload = encode_count(count)
        if timeout is None:
            await self.websocket.send_text(payload)
        else:
            await asyncio.wait_for(self.websocket.send_text(payload), timeout)
        self.last_sent = count
        return True


class ConnectionRegistry:
    def __init__(self) -> None:
        self._sessions: dict[str, Session] = {}
        self._lock = threading.Lock()

    def add(self, session: Session) -> None:
        with self._lock:
            self._sessions[session.id] = session
            total = len(self._sessions)
        logger.info("[%s] Session registered (%d active)", session.id, total)

    def remove(self, session: Session) -> bool:
        with self._lock:
            removed = self._sessions.pop(session.id, None) is not None
            total = len(self._sessions)
        if removed:
            logger.info("[%s] Session unregistered (%d active)", session.id, total)
        return removed

    def all(self) -> list[Session]:
        with self._lock:
            return list(self._sessions.values())

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session: object) -> bool:
        return isinstance(session, Session) and session.id in self._sessions
