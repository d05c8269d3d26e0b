"""Per-connection state machine for the counter websocket.

  CONNECTING ──accept──▶ ACTIVE ──close / error──▶ CLOSED

On activation the session receives the current count as its baseline before
it is visible to broadcasts.  While active, every ``pressed`` signal
increments the shared count and publishes the result to all sessions;
every other frame is dropped.  There is no retry or reconnect logic here.
"""
from __future__ import annotations

import asyncio
import enum
import logging
from typing import Any

from starlette.websockets import WebSocketDisconnect

from app.schemas.messages import decode_signal
from app.services.broadcast import BroadcastDispatcher
from app.services.connection_registry import ConnectionRegistry, Session
from app.services.counter_authority import CounterAuthority, CounterUnavailableError

logger = logging.getLogger(__name__)


class SessionState(enum.Enum):
    CONNECTING = "connecting"
    ACTIVE = "active"
    CLOSED = "closed"


class SessionHandler:
    def __init__(
        self,
        websocket: Any,
        registry: ConnectionRegistry,
        authority: CounterAuthority,
        dispatcher: BroadcastDispatcher,
    ) -> None:
        self.session = Session(websocket=websocket)
        self.state = SessionState.CONNECTING
        self._registry = registry
        self._authority = authority
        self._dispatcher = dispatcher

    async def run(self) -> None:
        """Drive the session until the transport closes."""
        if self.state is not SessionState.CONNECTING:
            raise RuntimeError(f"session already {self.state.value}")
        try:
            await self._activate()
            await self._receive_loop()
        except WebSocketDisconnect:
            pass
        except asyncio.TimeoutError:
            logger.info("[%s] Baseline delivery timed out after %.1fs; closing session",
                        self.session.id, self._dispatcher.send_timeout)
            await self._dispatcher.close_session(self.session)
        except CounterUnavailableError:
            logger.warning("[%s] Counter unavailable; closing session", self.session.id)
            await self._dispatcher.close_session(self.session)
        except Exception:
            logger.exception("[%s] Session handler crashed", self.session.id)
            await self._dispatcher.close_session(self.session)
        finally:
            self._close()

    async def _activate(self) -> None:
        await self.session.websocket.accept()
        async with self.session.send_lock:
            self._registry.add(self.session)
            await self.session.send_count(
                self._authority.current(), self._dispatcher.send_timeout
            )
        self.state = SessionState.ACTIVE
        logger.info("[%s] Session active, baseline count=%d",
                    self.session.id, self.session.last_sent)

    async def _receive_loop(self) -> None:
        websocket = self.session.websocket
        while self.state is SessionState.ACTIVE:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                return
            raw = message.get("text")
            if raw is None:
                raw = message.get("bytes")
            await self.on_message(raw)

    async def on_message(self, raw: str | bytes | None) -> None:
        if decode_signal(raw) is None:
            return
        count = self._authority.increment()
        await self._dispatcher.publish(count)

    def _close(self) -> None:
        self.state = SessionState.CLOSED
        self._registry.remove(self.session)
        logger.info("[%s] Session closed", self.session.id)
