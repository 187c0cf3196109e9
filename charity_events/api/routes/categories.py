"""Categories router module."""

from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter

from ...db import execute_in_transaction
from ...db import queries
from ..errors import NotFoundError
from ..validation import parse_limit, parse_positive_int

router = APIRouter(prefix="/categories", tags=["categories"])

@router.get("")
async def get_categories():
    """Get all categories ordered by name."""
    categories = execute_in_transaction(queries.list_categories)
    return {
        "success": True,
        "data": categories,
        "meta": {"count": len(categories), "timestamp": datetime.now(timezone.utc).isoformat()},
    }

@router.get("/stats")
async def get_category_stats():
    """Event counts and fundraising totals per category."""
    stats = execute_in_transaction(queries.category_statistics)
    return {
        "success": True,
        "data": stats,
        "meta": {
            "total_categories": len(stats),
            "total_events": sum(row['event_count'] for row in stats),
            "total_goal_amount": sum(row['total_goal_amount'] for row in stats),
            "total_current_amount": sum(row['total_current_amount'] for row in stats),
        },
    }

@router.get("/popular")
async def get_popular_categories(limit: Optional[int] = None):
    """Categories with the most active events."""
    limit = parse_limit(limit, 5)
    categories = execute_in_transaction(queries.list_popular_categories, limit=limit)
    return {
        "success": True,
        "data": categories,
        "meta": {"count": len(categories), "limit": limit},
    }

@router.get("/{category_id}")
async def get_category(category_id: str):
    """Get a single category by ID."""
    validated_id = parse_positive_int(category_id, 'category ID')
    category = execute_in_transaction(queries.get_category, validated_id)
    if category is None:
        raise NotFoundError(f"Category with ID {validated_id} not found")
    return {"success": True, "data": category}
