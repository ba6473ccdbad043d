"""
FastAPI backend: contacts and contact images REST API.
Run with uvicorn: uvicorn api.main:app --reload  (or: python -m api)
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.dependencies import open_store
from api.logging_setup import close_log_handlers, configure_logging
from api.responses import error_response
from api.routes import contacts, images
from api.schemas import HealthOut
from api.settings import Settings

API_VERSION = "2.0.0"

logger = logging.getLogger(__name__)


def _format_validation_error(error: dict) -> str:
    location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
    message = error.get("msg", "Invalid value")
    return f"{location}: {message}" if location else message


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or Settings.from_env()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        log_handlers = configure_logging(settings)
        logger.info("Starting Leadbook API (storage: %s)", settings.storage_backend)
        try:
            with open_store(settings) as store:
                app.state.store = store
                yield
        finally:
            logger.info("Leadbook API stopped")
            close_log_handlers(log_handlers)

    app = FastAPI(title="Leadbook API", version=API_VERSION, lifespan=lifespan)
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        errors = [_format_validation_error(e) for e in exc.errors()]
        logger.warning("Invalid request to %s: %s", request.url.path, "; ".join(errors))
        return error_response(400, "Invalid argument", errors)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return error_response(exc.status_code, str(exc.detail))

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception("An unhandled exception occurred on %s", request.url.path)
        return error_response(500, "An error occurred while processing your request")

    @app.get("/health")
    def health():
        return HealthOut(
            status="Healthy",
            timestamp=datetime.now(timezone.utc),
            message="Leadbook API is running",
            version=API_VERSION,
        ).model_dump(mode="json", by_alias=True)

    app.include_router(contacts.router)
    app.include_router(images.router)
    return app


app = create_app()
