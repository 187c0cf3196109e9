"""Health check routes for the events API."""

from datetime import datetime, timezone

from fastapi import APIRouter
from sqlalchemy import text

from ... import __version__
from ...config.environment import IS_PRODUCTION_ENVIRONMENT
from ...db import db, DatabaseError

router = APIRouter(tags=["health"])

ENDPOINTS = [
    'GET /api/health',
    'GET /api/events',
    'GET /api/events/search',
    'GET /api/events/upcoming',
    'GET /api/events/featured',
    'GET /api/events/stats',
    'GET /api/events/{id}',
    'GET /api/categories',
    'GET /api/categories/stats',
    'GET /api/categories/popular',
    'GET /api/categories/{id}',
]

@router.get("/")
async def root():
    """Service banner."""
    return {
        "success": True,
        "message": "Charity Events API is running",
        "version": __version__,
        "endpoints": ENDPOINTS,
    }

@router.get("/api/health")
async def health_check():
    """Health check endpoint."""
    try:
        with db.session() as session:
            session.execute(text('SELECT 1'))
        database = "connected"
    except DatabaseError as e:
        database = f"unavailable: {e}"

    return {
        "success": True,
        "status": "healthy" if database == "connected" else "degraded",
        "environment": "production" if IS_PRODUCTION_ENVIRONMENT else "development",
        "version": __version__,
        "database": database,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
