"""Process-wide wiring of the realtime counter.

One ``CounterService`` is created per application (see ``app.main``) and kept
on ``app.state``; route handlers pull it from there instead of importing
module-level singletons.  Everything resets when the server restarts.
"""
from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Any

from app.config import Settings
from app.services.broadcast import BroadcastDispatcher
from app.services.connection_registry import ConnectionRegistry
from app.services.counter_authority import CounterAuthority
from app.services.session_handler import SessionHandler

logger = logging.getLogger(__name__)


@dataclass
class CounterService:
    registry: ConnectionRegistry
    authority: CounterAuthority
    dispatcher: BroadcastDispatcher
    # Backs the plain-HTTP ``GET /api/counter`` endpoint, separate from the shared count.
    requests: CounterAuthority = field(default_factory=CounterAuthority)
    started_at: float = field(default_factory=time.time)
    visitors: int = 0

    @classmethod
    def from_settings(cls, settings: Settings) -> CounterService:
        registry = ConnectionRegistry()
        return cls(
            registry=registry,
            authority=CounterAuthority(),
            dispatcher=BroadcastDispatcher(registry, settings.send_timeout_seconds),
        )

    @property
    def uptime_seconds(self) -> int:
        return int(time.time() - self.started_at)

    def new_session(self, websocket: Any) -> SessionHandler:
        self.visitors += 1
        return SessionHandler(websocket, self.registry, self.authority, self.dispatcher)

    async def shutdown(self) -> None:
        """Stop accepting increments and close every live session."""
        self.authority.close()
        sessions = self.registry.all()
        for session in sessions:
            self.registry.remove(session)
        await asyncio.gather(*(self.dispatcher.close_session(s) for s in sessions))
        logger.info("Counter service stopped: count=%d, closed %d session(s)",
                    self.authority.current(), len(sessions))
