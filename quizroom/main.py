"""
Main FastAPI application for the live classroom quiz tool
"""

import asyncio
import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse
from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError

import quizroom.config
from quizroom.database import Database
from quizroom.log import configure_logging
from quizroom.routes import debug, participant, presenter, session

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(fastapi_app: FastAPI) -> AsyncIterator[None]:
    """Create the shared Database once per process and dispose it at shutdown"""
    settings = quizroom.config.settings
    configure_logging(settings.log_level)

    database = Database.from_settings(settings)
    await database.create_tables()
    fastapi_app.state.database = database
    logger.info("Database ready")

    try:
        yield
    finally:
        await database.dispose()
        logger.info("Database connections closed")


app = FastAPI(
    title="Quiz Room",
    description="Live classroom quizzes: rooms, questions and answer analytics",
    version="0.1.0",
    lifespan=lifespan,
)

# Include routers
app.include_router(session.router, tags=["session"])
app.include_router(presenter.router, tags=["presenter"])
app.include_router(participant.router, tags=["participant"])
app.include_router(debug.router, tags=["debug"])


@app.middleware("http")
async def request_timeout(
    request: Request,
    call_next: Callable[[Request], Awaitable[Response]],
) -> Response:
    """Cancel requests that run longer than the configured timeout"""
    timeout = quizroom.config.settings.request_timeout
    try:
        return await asyncio.wait_for(call_next(request), timeout=timeout)
    except asyncio.TimeoutError:
        logger.error("%s %s timed out after %ss", request.method, request.url.path, timeout)
        return JSONResponse(status_code=504, content={"detail": "Request timed out"})


@app.exception_handler(IntegrityError)
async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    """Constraint violations are the caller's fault"""
    logger.warning("Constraint violation on %s: %s", request.url.path, exc.orig)
    return JSONResponse(
        status_code=422,
        content={"detail": "Request violates a database constraint"},
    )


@app.exception_handler(DBAPIError)
@app.exception_handler(PoolTimeoutError)
async def storage_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Storage failures are surfaced, never retried"""
    logger.error("Storage failure on %s: %s", request.url.path, exc)
    return JSONResponse(status_code=503, content={"detail": "Storage unavailable"})


@app.get("/")
async def root() -> dict[str, str]:
    """Health check endpoint"""
    return {"status": "ok", "message": "Quiz Room API"}


@app.get("/health")
async def health() -> dict[str, str]:
    """Health check endpoint for monitoring"""
    return {"status": "healthy"}
