"""Events router module."""

import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Query

from ...db import execute_in_transaction
from ...db import queries
from ..errors import NotFoundError
from ..validation import parse_limit, parse_positive_int, parse_search_params

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/events", tags=["events"])

def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()

@router.get("")
async def get_events():
    """Get all active events, earliest first."""
    events = execute_in_transaction(queries.list_active_events)
    logger.info(f"Found {len(events)} active events")
    return {
        "success": True,
        "data": events,
        "meta": {
            "count": len(events),
            "timestamp": _timestamp(),
            "filters": {"active_only": True},
        },
    }

@router.get("/search")
async def search_events(
    date: Optional[str] = Query(None, description="Calendar day, YYYY-MM-DD"),
    location: Optional[str] = Query(None, description="Substring of location or name"),
    category: Optional[str] = Query(None, description="Category ID"),
):
    """Search active events; any subset of the filters may be given."""
    filters = parse_search_params(date, location, category)
    events = execute_in_transaction(queries.search_active_events, **filters)
    logger.info(f"Search {filters} matched {len(events)} events")
    return {
        "success": True,
        "data": events,
        "meta": {
            "count": len(events),
            "timestamp": _timestamp(),
            "filters": {
                "date": filters['on_date'].isoformat() if 'on_date' in filters else None,
                "location": filters.get('location'),
                "category": filters.get('category_id'),
            },
        },
    }

@router.get("/upcoming")
async def get_upcoming_events(limit: Optional[int] = None):
    """Get the next active events from today on."""
    limit = parse_limit(limit, 6)
    events = execute_in_transaction(queries.list_upcoming_events, limit=limit)
    return {
        "success": True,
        "data": events,
        "meta": {"count": len(events), "limit": limit, "timestamp": _timestamp()},
    }

@router.get("/featured")
async def get_featured_events(limit: Optional[int] = None):
    """Get upcoming events closest to their fundraising goal."""
    limit = parse_limit(limit, 4)
    events = execute_in_transaction(queries.list_featured_events, limit=limit)
    return {
        "success": True,
        "data": events,
        "meta": {"count": len(events), "limit": limit, "timestamp": _timestamp()},
    }

@router.get("/stats")
async def get_event_stats():
    """Aggregate statistics over active events."""
    stats = execute_in_transaction(queries.event_statistics)
    return {"success": True, "data": stats, "meta": {"timestamp": _timestamp()}}

@router.get("/{event_id}")
async def get_event(event_id: str):
    """Get a single active event by ID."""
    validated_id = parse_positive_int(event_id, 'event ID')
    event = execute_in_transaction(queries.get_active_event, validated_id)
    if event is None:
        raise NotFoundError(f"Event with ID {validated_id} not found or is inactive")
    return {"success": True, "data": event, "meta": {"timestamp": _timestamp()}}
