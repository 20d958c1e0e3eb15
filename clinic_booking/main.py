import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from clinic_booking.api import bookings
from clinic_booking.core.config import Settings, settings as default_settings
from clinic_booking.core.errors import BookingError
from clinic_booking.core.logger import logger, setup_logging
from clinic_booking.services.notification_service import Mailer, NotificationDispatcher
from clinic_booking.storage.factory import build_store


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or default_settings
    setup_logging(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup
        store = build_store(settings)
        mailer = Mailer(settings)
        app.state.store = store
        app.state.dispatcher = NotificationDispatcher(mailer, settings)
        app.state.started_at = time.monotonic()

        logger.info("🚀 Booking system started!")
        logger.info(f"📍 Environment: {settings.ENVIRONMENT}")
        logger.info(f"🌐 Server running on: http://{settings.HOST}:{settings.PORT}")
        if settings.STORAGE_BACKEND.lower() == "json":
            logger.info(f"📁 Bookings saved to: {settings.BOOKINGS_FILE}")
        else:
            logger.info(f"📁 Bookings saved to: {settings.DATABASE_URL}")
        mailer.verify()
        yield
        # Shutdown
        store.close()
        logger.info("🛑 Shutting down booking system")

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        lifespan=lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_methods=['*'],
        allow_headers=['*'],
    )

    @app.exception_handler(BookingError)
    async def booking_error_handler(request: Request, exc: BookingError):
        if exc.status_code >= 500:
            logger.error(f"❌ {request.method} {request.url.path}: {exc.message}")
            message = exc.message if settings.is_development else "Something went wrong"
            return JSONResponse(status_code=exc.status_code, content={"error": message})
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        logger.info(f"📥 Malformed request to {request.url.path}: {exc.errors()}")
        return JSONResponse(status_code=400, content={"error": "Invalid request body"})

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404:
            return JSONResponse(status_code=404, content={"error": "Endpoint not found", "path": request.url.path})
        return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})

    # Global Exception Handler
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.opt(exception=exc).error(f"🔥 UNHANDLED ERROR: {exc}")
        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal server error",
                "message": str(exc) if settings.is_development else "Something went wrong",
            }
        )

    app.include_router(bookings.router, prefix=settings.API_PREFIX, tags=["Bookings"])

    @app.get("/")
    async def root():
        return {
            "status": "ok",
            "message": settings.PROJECT_NAME,
            "version": settings.VERSION,
            "timestamp": _now_iso(),
        }

    @app.get("/health")
    async def health_check(request: Request):
        return {
            "status": "healthy",
            "environment": settings.ENVIRONMENT,
            "uptime": round(time.monotonic() - request.app.state.started_at, 3),
            "timestamp": _now_iso(),
        }

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("clinic_booking.main:app", host=default_settings.HOST, port=default_settings.PORT, reload=default_settings.is_development)
