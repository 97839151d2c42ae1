# backend/studiobook/main.py
from contextlib import asynccontextmanager
import logging
from typing import AsyncGenerator

from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .core.config import settings
from .core.constants import ALLOWED_ORIGINS, API_DESCRIPTION, API_TITLE, BRAND_NAME
from .errors import register_error_handlers
from .routes.v1 import (
    admin as admin_v1,
    availability as availability_v1,
    bookings as bookings_v1,
    cron as cron_v1,
    health as health_v1,
)

# Configure logging
logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def app_lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Handle application startup/shutdown."""
    logger.info(f"{BRAND_NAME} API starting up...")
    logger.info(
        f"Environment: {settings.environment}, timezone: {settings.business_timezone}, "
        f"hours: {settings.business_open_time}-{settings.business_close_time}, "
        f"slot interval: {settings.slot_interval_minutes}m, email: {settings.email_provider}"
    )
    yield
    logger.info(f"{BRAND_NAME} API shutting down...")


def create_app() -> FastAPI:
    app = FastAPI(
        title=API_TITLE,
        description=API_DESCRIPTION,
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=app_lifespan,
    )
    register_error_handlers(app)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "HEAD", "OPTIONS", "POST", "PATCH"],
        allow_headers=["*"],
    )

    api_v1 = APIRouter(prefix="/api/v1")
    api_v1.include_router(availability_v1.router)
    api_v1.include_router(bookings_v1.router, prefix="/bookings")
    api_v1.include_router(admin_v1.router, prefix="/admin")
    api_v1.include_router(cron_v1.router, prefix="/cron")
    app.include_router(api_v1)

    # Probes stay outside the versioned prefix.
    app.include_router(health_v1.router)
    return app


fastapi_app = create_app()
app = fastapi_app
