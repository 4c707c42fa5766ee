from __future__ import annotations

import logging
from datetime import datetime

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from interview_booking.core.config import settings
from interview_booking.core.errors import NOT_FOUND_ERRORS, BookingError, ConcurrentModification
from interview_booking.db.base import Base
from interview_booking.db.session import engine
from interview_booking.middleware.logging import RequestLoggingMiddleware
from interview_booking.middleware.request_context import RequestContextMiddleware
from interview_booking.routers import bookings, interviewers, time_slots

import interview_booking.models  # noqa: F401  registers tables on Base.metadata

logging.basicConfig(level=settings.log_level)
logger = logging.getLogger("ib")


def error_status(exc: BookingError) -> int:
    if isinstance(exc, NOT_FOUND_ERRORS):
        return status.HTTP_404_NOT_FOUND
    if isinstance(exc, ConcurrentModification):
        return status.HTTP_409_CONFLICT
    return status.HTTP_400_BAD_REQUEST


async def handle_booking_error(request: Request, exc: BookingError) -> JSONResponse:
    status_code = error_status(exc)
    log = logger.warning if exc.retryable else logger.info
    log(
        "request_rejected",
        extra={
            "request_id": getattr(request.state, "request_id", None),
            "error": exc.code,
            "status_code": status_code,
        },
    )
    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "error": exc.code,
            "message": exc.message,
            "retryable": exc.retryable,
            "timestamp": datetime.utcnow().isoformat(),
        },
    )


def create_app() -> FastAPI:
    app = FastAPI(title=settings.app_name, version="0.1.0")

    app.add_middleware(RequestLoggingMiddleware)
    # Added last so it wraps the logging middleware and sets the id first.
    app.add_middleware(RequestContextMiddleware)

    app.add_exception_handler(BookingError, handle_booking_error)

    @app.get("/health")
    async def health_check():
        return {"status": "ok", "environment": settings.environment}

    @app.on_event("startup")
    async def _create_tables() -> None:
        if not settings.auto_create_tables:
            return
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    app.include_router(bookings.router)
    app.include_router(interviewers.router)
    app.include_router(time_slots.router)

    return app


app = create_app()
