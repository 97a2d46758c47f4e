"""
Peak Analytics API

FastAPI application for athlete performance analytics.
"""

from contextlib import asynccontextmanager
import logging
import sys

from fastapi import FastAPI

from app.config import settings
from app.db.session import init_db
from app.api.v1.router import api_router


# === Logging Setup ===
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(sys.stdout),
    ]
)
logger = logging.getLogger(__name__)


# === Lifespan ===
@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    logger.info("Starting Peak Analytics API...")
    init_db()
    logger.info("Database initialized")

    yield

    logger.info("Shutting down...")


# === App Creation ===
app = FastAPI(
    title="Peak Analytics API",
    description="Workout classification, skill tiers and pace safety for runners",
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
)


# === Routes ===
app.include_router(api_router, prefix="/api/v1")


# === Health Check ===
@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "version": "0.1.0"}
