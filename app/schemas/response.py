from pydantic import BaseModel


# ── GET /api/ip ───────────────────────────────────────────────────────────────
class IpResponse(BaseModel):
    ip: str


# ── GET /api/stats ────────────────────────────────────────────────────────────
class StatsResponse(BaseModel):
    count: int               # shared counter value
    sessions: int            # live websocket sessions
    visitors: int            # websocket sessions accepted since start
    uptime_seconds: int
