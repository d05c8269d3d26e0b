"""Wire messages exchanged over the counter websocket.

  client → server   {"t": "pressed"}
  server → client   {"t": "count", "c": <int>}

Anything a client sends that is not a ``pressed`` signal is dropped without
a reply, so new client message types can be introduced without breaking
older servers.
"""
from __future__ import annotations

import logging
from typing import Literal

from pydantic import BaseModel, ConfigDict

logger = logging.getLogger(__name__)


class IncrementSignal(BaseModel):
    model_config = ConfigDict(extra="ignore")

    t: Literal["pressed"]


class CountUpdate(BaseModel):
    t: Literal["count"] = "count"
    c: int


def decode_signal(raw: str | bytes | None) -> IncrementSignal | None:
    """Parse one inbound frame; return ``None`` for anything unrecognised."""
    if raw is None:
        return None
    try:
        return IncrementSignal.model_validate_json(raw)
    except ValueError as exc:
        # ValidationError, or undecodable bytes
        logger.debug("Dropping inbound message: %s", exc)
        return None


def encode_count(count: int) -> str:
    return CountUpdate(c=count).model_dump_json()
