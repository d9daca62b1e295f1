from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, RedirectResponse
from sqlalchemy import text

from brewlog.config import settings
from brewlog.db.session import async_session, shutdown
from brewlog.dependencies import DB
from brewlog.exceptions import AppError, UnexpectedError
from brewlog.logging import get_logger
from brewlog.middleware import RequestIDMiddleware
from brewlog.routers import roast, roaster
from brewlog.schemas.error import ErrorResponse
from brewlog.services.usage import UsageRecorder, session_writer

logger = get_logger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal server error"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Startup: start the AI usage recorder.

    Shutdown: flush pending usage records, then close database connections.
    """
    recorder = UsageRecorder(session_writer(async_session), maxsize=settings.usage_queue_size)
    recorder.start()
    app.state.usage_recorder = recorder
    yield
    await recorder.stop()
    await shutdown()


app = FastAPI(title="Brewlog", lifespan=lifespan)
app.add_middleware(RequestIDMiddleware)
app.include_router(roaster.router)
app.include_router(roast.router)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Map application errors to their status code and the standard envelope.

    Unexpected errors are logged in full; the client only sees a generic message.
    """
    if isinstance(exc, UnexpectedError) or exc.status_code >= 500:
        logger.error("unexpected_error", error=exc.message, path=request.url.path)
        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse.build(exc.code, INTERNAL_ERROR_MESSAGE),
        )

    logger.warning("request_rejected", code=exc.code, error=exc.message, path=request.url.path)
    return JSONResponse(
        status_code=exc.status_code, content=ErrorResponse.build(exc.code, exc.message)
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log unhandled exceptions and return a safe error response.

    - Logs full exception with traceback (includes request_id from context)
    - Returns generic error to client (no stack traces leaked)
    """
    logger.exception("unhandled_exception", path=request.url.path, method=request.method)
    return JSONResponse(
        status_code=500,
        content=ErrorResponse.build("internal_error", INTERNAL_ERROR_MESSAGE),
    )


@app.get("/", include_in_schema=False)
async def index() -> RedirectResponse:
    return RedirectResponse("/roasters", status_code=303)


@app.get("/health")
async def health(db: DB) -> dict[str, str]:
    """Health check endpoint that verifies database connectivity."""
    await db.execute(text("SELECT 1"))
    return {"status": "ok"}
