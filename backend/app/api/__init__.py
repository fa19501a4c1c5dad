"""API routes for video ingest."""

from app.api import routes, thumbnail_routes

__all__ = ["routes", "thumbnail_routes"]
