import logging
from contextlib import asynccontextmanager
from pathlib import Path

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import HTMLResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import Settings, get_settings
from app.routes.api import router as api_router
from app.routes.socket import counter_socket
from app.services.counter_service import CounterService

logger = logging.getLogger(__name__)

NOT_FOUND_PAGE = "<h1>404</h1>"


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(application: FastAPI):
        application.state.counter = CounterService.from_settings(settings)
        logger.info("Counter service ready on %s", settings.socket_path)
        try:
            yield
        finally:
            await application.state.counter.shutdown()

    application = FastAPI(
        title="Shared Counter",
        version="0.1.0",
        description="Realtime shared counter: any client presses, every client sees the new count.",
        lifespan=lifespan,
    )

    application.add_middleware(GZipMiddleware)
    application.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.allowed_origin],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @application.middleware("http")
    async def default_headers(request: Request, call_next):
        response = await call_next(request)
        response.headers.setdefault("Server", settings.server_header)
        response.headers.setdefault("Access-Control-Allow-Origin", settings.allowed_origin)
        response.headers.setdefault("Content-Security-Policy", settings.content_security_policy)
        return response

    @application.exception_handler(StarletteHTTPException)
    async def render_404(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404:
            return HTMLResponse(NOT_FOUND_PAGE, status_code=404)
        return await http_exception_handler(request, exc)

    application.include_router(api_router)
    application.add_api_websocket_route(settings.socket_path, counter_socket)

    static_dir = Path(settings.static_dir)
    if static_dir.is_dir():
        application.mount("/", StaticFiles(directory=str(static_dir), html=True), name="static")

    return application


def run() -> None:
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port,
                log_level=settings.log_level.lower(), server_header=False)


app = create_app()

if __name__ == "__main__":
    run()
