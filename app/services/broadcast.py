"""Fan-out of count updates to every registered session.

Delivery is at-most-once with no retries.  A session whose send fails or
exceeds the timeout is dropped from the registry and closed; the others
still get the update.  Because every update carries the full count, a
session that misses one simply catches up on the next.
"""
from __future__ import annotations

import asyncio
import logging

from app.services.connection_registry import ConnectionRegistry, Session

logger = logging.getLogger(__name__)

# Standard "going away" close code.
CLOSE_GOING_AWAY = 1001


class BroadcastDispatcher:
    def __init__(self, registry: ConnectionRegistry, send_timeout: float = 2.0) -> None:
        self._registry = registry
        self.send_timeout = send_timeout

    async def publish(self, count: int) -> int:
        """Send ``count`` to all sessions; return how many received it."""
        sessions = self._registry.all()
        if not sessions:
            return 0
        results = await asyncio.gather(
            *(self._deliver(session, count) for session in sessions)
        )
        delivered = sum(results)
        logger.debug("Published count=%d to %d/%d sessions", count, delivered, len(sessions))
        return delivered

    async def _deliver(self, session: Session, count: int) -> bool:
        try:
            return await asyncio.wait_for(self._send(session, count), self.send_timeout)
        except asyncio.TimeoutError:
            reason = f"timed out after {self.send_timeout:.1f}s"
        except Exception as exc:
            reason = f"failed ({exc})"

        if self._registry.remove(session):
            logger.info("[%s] Delivery %s; dropping session", session.id, reason)
            await self.close_session(session)
        return False

    async def _send(self, session: Session, count: int) -> bool:
        async with session.send_lock:
            # dropped while this delivery was queued behind another
            if session not in self._registry:
                return False
            return await session.send_count(count)

    async def close_session(self, session: Session) -> None:
        """Close the transport, bounded by the send timeout; errors are logged only."""
        try:
            await asyncio.wait_for(
                session.websocket.close(code=CLOSE_GOING_AWAY), self.send_timeout
            )
        except Exception as exc:
            logger.debug("[%s] Close raised: %s", session.id, exc)
