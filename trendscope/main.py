"""TrendScope — FastAPI Application Entry Point.

Cultural trend monitoring for fashion and lifestyle brands.
"""

import os
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from trendscope.api.admin_routes import router as admin_router
from trendscope.api.pipeline_routes import router as pipeline_router
from trendscope.api.trend_routes import router as trend_router
from trendscope.config import settings
from trendscope.core.logging import configure_logging, get_logger
from trendscope.dependencies import get_scheduler, get_storage

configure_logging()
logger = get_logger("main")

STARTED_AT = time.monotonic()

IS_SERVERLESS = bool(
    os.environ.get("VERCEL") or os.environ.get("AWS_LAMBDA_FUNCTION_NAME")
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle."""
    logger.info("🚀 TrendScope starting up...")
    logger.info(f"🌍 Environment: {'SERVERLESS' if IS_SERVERLESS else 'LOCAL'}")
    storage = get_storage()
    try:
        await storage.seed_defaults()
    except Exception as e:
        logger.error(f"❌ Seeding default sources/settings failed: {e}")

    run_scheduler = settings.scheduler_autostart and not IS_SERVERLESS
    if run_scheduler:
        await get_scheduler().start()
    yield
    if run_scheduler:
        get_scheduler().stop()
    logger.info("TrendScope shut down")


app = FastAPI(
    title="TrendScope",
    description="Collect fashion and lifestyle signals, extract trends and brand opportunities with AI, and mail a daily digest.",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routers
app.include_router(trend_router)
app.include_router(pipeline_router)
app.include_router(admin_router)


@app.get("/api/health", tags=["System"])
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "service": "trendscope",
        "version": "1.0.0",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "uptime": round(time.monotonic() - STARTED_AT, 1),
    }
