"""HouseDirect Backend - FastAPI Application Entry Point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from housedirect.core.config import get_settings
from housedirect.core.database import engine
from housedirect.core.env_validation import validate_environment
from housedirect.core.errors import register_exception_handlers
from housedirect.routers import (
    admin_verifications_router,
    verifications_router,
    admin_reports_router,
    reports_router,
    admin_users_router,
    admin_stats_router,
    admin_messages_router,
    leads_router,
    scheduled_router,
)

# Hard-fails (exit 1) if required configuration is missing
validate_environment()

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("housedirect")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    logger.info(f"{settings.app_name} starting")
    yield
    await engine.dispose()


app = FastAPI(
    title=settings.app_name,
    description="Moderation and CRM backend for the HouseDirect real-estate marketplace: verification review, reports, leads and notifications.",
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
)

register_exception_handlers(app)

# In production, wildcard (*) is blocked by env_validation.py
allowed_origins = [origin.strip() for origin in settings.allowed_origins.split(",") if origin.strip()]
logger.info(f"CORS configured with origins: {allowed_origins}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# API v1 routers
app.include_router(admin_verifications_router, prefix=settings.api_v1_prefix)
app.include_router(verifications_router, prefix=settings.api_v1_prefix)
app.include_router(admin_reports_router, prefix=settings.api_v1_prefix)
app.include_router(reports_router, prefix=settings.api_v1_prefix)
app.include_router(admin_users_router, prefix=settings.api_v1_prefix)
app.include_router(admin_stats_router, prefix=settings.api_v1_prefix)
app.include_router(admin_messages_router, prefix=settings.api_v1_prefix)
app.include_router(leads_router, prefix=settings.api_v1_prefix)  # Agent CRM
app.include_router(scheduled_router, prefix=settings.api_v1_prefix)  # Cron-triggered jobs


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": settings.app_name}


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "service": settings.app_name,
        "version": "1.0.0",
        "docs": "/docs" if settings.debug else "Disabled in production",
    }
