# room_relay/main.py
import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from http import HTTPStatus

from room_relay.api.routes import health, rooms, sessions, tokens
from room_relay.core.config import get_settings
from room_relay.core.errors import UpstreamError
from room_relay.core.logging import configure_logging

logger = logging.getLogger(__name__)


async def upstream_error_handler(request: Request, exc: UpstreamError) -> Response:
    """
    Pass the provider's status and body through when there is one; otherwise
    answer with a bare 500.
    """
    logger.error("%s %s failed upstream: %s", request.method, request.url.path, exc)
    if exc.status_code is None:
        return PlainTextResponse(
            "Internal Server Error", status_code=HTTPStatus.INTERNAL_SERVER_ERROR
        )
    content = exc.body if exc.body is not None else {"message": str(exc)}
    return JSONResponse(status_code=exc.status_code, content=content)


def create_app() -> FastAPI:
    """
    Application factory for the Room Relay service.
    """
    settings = get_settings()
    configure_logging(settings.LOG_LEVEL)

    app = FastAPI(
        title=settings.APP_NAME,
        description=(
            "Backend relay between client apps and the video-room provider.\n"
            "Mints provider tokens, forwards room operations, walks paginated\n"
            "session listings and computes per-session usage analytics."
        ),
        version="0.1.0",
    )

    app.add_exception_handler(UpstreamError, upstream_error_handler)

    # Routers
    app.include_router(health.router)
    app.include_router(rooms.router)
    app.include_router(sessions.router)
    app.include_router(tokens.router)

    return app


app = create_app()
