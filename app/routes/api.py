"""
Plain HTTP endpoints next to the realtime counter.

  GET /api/hello     liveness text
  GET /api/counter   per-process request counter ("Request N")
  GET /api/ip        caller's address
  GET /api/stats     shared count, live sessions, visitors, uptime
"""
import logging

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import PlainTextResponse

from app.schemas.response import IpResponse, StatsResponse
from app.services.counter_service import CounterService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["counter"])


def _service(request: Request) -> CounterService:
    return request.app.state.counter


@router.get("/hello", response_class=PlainTextResponse)
async def hello() -> str:
    return "Hello world"


@router.get("/counter", response_class=PlainTextResponse)
async def request_counter(request: Request) -> str:
    """Count calls to this endpoint; unrelated to the websocket counter."""
    n = _service(request).requests.increment()
    return f"Request {n}"


@router.get("/ip", response_model=IpResponse)
async def client_ip(request: Request) -> IpResponse:
    host = request.client.host if request.client else "unknown"
    return IpResponse(ip=host)


@router.get("/stats", response_model=StatsResponse)
async def stats(request: Request) -> StatsResponse:
    service = _service(request)
    return StatsResponse(
        count=service.authority.current(),
        sessions=len(service.registry),
        visitors=service.visitors,
        uptime_seconds=service.uptime_seconds,
    )


@router.api_route("/counter", methods=["HEAD", "POST", "PUT"], include_in_schema=False)
async def request_counter_not_allowed() -> None:
    raise HTTPException(status_code=405, detail="Method Not Allowed")
