"""FastAPI application factory."""

import asyncio
import contextlib
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from live_quiz.api.quizzes import router as quizzes_router
from live_quiz.api.realtime import router as realtime_router
from live_quiz.api.sessions import router as sessions_router
from live_quiz.app_logging import configure_logging
from live_quiz.config import parse_allowed_origins
from live_quiz.containers import AppContainer
from live_quiz.domain.errors import LiveQuizError


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        sweeper = asyncio.create_task(_sweep_expired_quizzes(app.state.container))
        yield
        sweeper.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await sweeper
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.add_middleware(
        CORSMiddleware,
        allow_origins=parse_allowed_origins(container.settings.cors_allowed_origins),
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )
    app.include_router(sessions_router)
    app.include_router(quizzes_router)
    app.include_router(realtime_router)

    @app.exception_handler(LiveQuizError)
    async def handle_live_quiz_error(
        request: Request, exc: LiveQuizError
    ) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error(
                "Request failed",
                exc_info=exc,
                extra={"path": request.url.path},
            )
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return JSONResponse(status_code=400, content={"error": "Invalid request body"})

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app


async def _sweep_expired_quizzes(container: AppContainer) -> None:
    """Finalize quizzes whose answer window elapsed, until cancelled."""
    logger = logging.getLogger(__name__)
    interval = container.settings.quiz_sweep_interval_seconds
    while True:
        await asyncio.sleep(interval)
        try:
            finalized = await container.quiz_service.finalize_expired()
        except Exception:
            logger.exception("Quiz expiry sweep failed")
            continue
        if finalized:
            logger.info("Finalized expired quizzes", extra={"count": finalized})
