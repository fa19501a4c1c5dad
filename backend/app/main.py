"""
FastAPI application for video ingest.

Provides HTTP API for uploading videos into object storage.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api import routes, thumbnail_routes
from app.config import get_settings
from app.logging_config import setup_logging
from app.services.process_runner import check_tools

# Configure logging before anything else
settings = get_settings()
setup_logging(settings)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Logs startup info and checks media tools availability.
    """
    logger.info("Starting Video Ingest API")
    logger.info(f"Log level: {settings.log_level}")
    logger.info(f"Temp directory: {settings.temp_dir}")
    logger.info(f"Bucket: {settings.s3_bucket} ({settings.s3_region})")

    tools = check_tools(settings)
    for binary, available in tools.items():
        if available:
            logger.info(f"Tool available: {binary}")
        else:
            logger.warning(f"Tool not found on PATH: {binary}")

    yield

    logger.info("Shutting down Video Ingest API")


app = FastAPI(
    title="Video Ingest API",
    description="API for uploading, remuxing and publishing videos",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS middleware for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(routes.router)
app.include_router(thumbnail_routes.router)


@app.get("/health")
async def health_check() -> dict:
    """
    Health check endpoint.

    Returns:
        Basic health status
    """
    return {"status": "ok"}


@app.get("/health/tools")
async def tools_health() -> dict:
    """
    Check media tools availability.

    Returns:
        Availability of ffprobe and ffmpeg on PATH
    """
    return check_tools(get_settings())


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8091,
        reload=True,
    )
