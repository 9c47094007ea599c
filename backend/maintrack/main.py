"""FastAPI application."""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .config import Settings, get_settings
from .database import build_engine, build_session_factory, get_db
from .domain_errors import DomainError
from .problem_details import (
    domain_error_handler,
    request_validation_error_handler,
    unhandled_error_handler,
)
from .routers import admin, auth, calendar, equipment, maintenance_requests, teams, work_centers
from .schemas import HealthCheckResponse

APP_VERSION = "1.0.0"

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def check_production_settings(settings: Settings) -> None:
    """Fail closed on insecure production configuration."""
    if settings.ENV.lower() != "production":
        return
    if settings.JWT_SECRET_KEY == "change-me":
        raise RuntimeError("JWT_SECRET_KEY must be set in production.")
    if not settings.cors_origins:
        raise RuntimeError("ALLOWED_ORIGINS must be set in production (explicit frontend origin required).")
    if any(origin.strip() == "*" for origin in settings.cors_origins):
        raise RuntimeError("ALLOWED_ORIGINS must be explicit in production (no wildcard when using credentials).")
    if any(
        origin.startswith("http://localhost") or origin.startswith("http://127.0.0.1")
        for origin in settings.cors_origins
    ):
        raise RuntimeError("ALLOWED_ORIGINS contains localhost in production; set it to your real frontend origin.")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings)
    check_production_settings(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        engine = build_engine(settings)
        app.state.engine = engine
        app.state.session_factory = build_session_factory(engine)
        logger.info("%s started (env=%s)", settings.APP_NAME, settings.ENV)
        try:
            yield
        finally:
            engine.dispose()

    app = FastAPI(
        title="Maintenance Tracker",
        version=APP_VERSION,
        description="Backend API for equipment maintenance requests",
        lifespan=lifespan,
    )

    # CORS
    cors_headers = ["Authorization", "Content-Type"]
    if settings.ENV.lower() != "production":
        cors_headers = ["*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=cors_headers,
    )

    app.add_exception_handler(DomainError, domain_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    # Include routers
    app.include_router(auth.router, prefix="/api/v1")
    app.include_router(maintenance_requests.router, prefix="/api/v1")
    app.include_router(equipment.router, prefix="/api/v1")
    app.include_router(work_centers.router, prefix="/api/v1")
    app.include_router(teams.router, prefix="/api/v1")
    app.include_router(calendar.router, prefix="/api/v1")
    app.include_router(admin.router, prefix="/api/v1")

    @app.get("/api/v1/system/health", response_model=HealthCheckResponse)
    def health_check(db: Session = Depends(get_db)):
        """Health check endpoint."""
        database = "ok"
        try:
            db.execute(text("SELECT 1"))
        except SQLAlchemyError:
            logger.exception("Database health check failed")
            database = "unavailable"
        return HealthCheckResponse(
            status="ok" if database == "ok" else "degraded",
            database=database,
            version=APP_VERSION,
        )

    @app.get("/")
    def root():
        """Root endpoint."""
        return {
            "message": "Maintenance Tracker API",
            "version": APP_VERSION,
            "docs": "/docs",
        }

    return app


app = create_app()
