"""
Realtime counter websocket.

  WS /api/socket   (path configurable via SOCKET_PATH)

    client → server   {"t": "pressed"}
    server → client   {"t": "count", "c": <int>}

The path is registered by ``app.main.create_app`` from settings.
"""
from fastapi import WebSocket

from app.services.counter_service import CounterService


async def counter_socket(websocket: WebSocket) -> None:
    """Run one client session against the application's shared counter."""
    service: CounterService = websocket.app.state.counter
    await service.new_session(websocket).run()
