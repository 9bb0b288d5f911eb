# backend/salonbook/main.py
from contextlib import asynccontextmanager
import logging
from typing import AsyncGenerator

from fastapi import FastAPI

from .core.config import settings
from .database import init_db
from .errors import register_error_handlers
from .middleware.prometheus_middleware import PrometheusMiddleware
from .routes import admin_bookings, admin_schedule, availability, bookings, health

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

logger = logging.getLogger(__name__)

API_TITLE = "SalonBook Scheduling API"
API_VERSION = "1.0.0"


@asynccontextmanager
async def app_lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Handle application startup/shutdown without deprecated events."""
    logger.info(f"{API_TITLE} starting up...")
    logger.info(
        f"Environment: {settings.environment}, business timezone: {settings.business_timezone}"
    )
    if settings.is_sqlite:
        # Production schemas are managed outside the app.
        init_db()
        logger.info("SQLite schema ensured")

    yield

    logger.info(f"{API_TITLE} shutting down...")


def create_app() -> FastAPI:
    application = FastAPI(
        title=API_TITLE,
        version=API_VERSION,
        description="Availability, booking and cancellation for multi-tenant salons.",
        lifespan=app_lifespan,
    )
    application.add_middleware(PrometheusMiddleware)
    register_error_handlers(application)

    application.include_router(health.router)
    application.include_router(availability.router)
    application.include_router(bookings.router)
    application.include_router(admin_bookings.router)
    application.include_router(admin_schedule.router)
    return application


app = create_app()
