"""Read-only queries used by the events API.

Every function takes an open session as its first argument so it can run
through execute_in_transaction. Results are converted to plain dicts inside
the session.
"""

from datetime import date, datetime, time, timedelta
from typing import Any, Dict, List, Optional

from sqlalchemy import case, func, or_
from sqlalchemy.orm import Session

from ..models.category import Category
from ..models.event import Event


def _active_events(session: Session):
    return session.query(Event).filter(Event.is_active.is_(True))


def list_active_events(session: Session) -> List[Dict[str, Any]]:
    """All active events, earliest first."""
    events = _active_events(session).order_by(Event.date_time.asc()).all()
    return [event.to_dict() for event in events]


def get_active_event(session: Session, event_id: int) -> Optional[Dict[str, Any]]:
    """A single active event, or None if it does not exist or is inactive."""
    event = _active_events(session).filter(Event.id == event_id).first()
    return event.to_dict() if event else None


def search_active_events(
    session: Session,
    on_date: Optional[date] = None,
    location: Optional[str] = None,
    category_id: Optional[int] = None,
) -> List[Dict[str, Any]]:
    """
    Active events matching every given filter.

    Args:
        session: Open database session
        on_date: Calendar day the event must start on
        location: Case-insensitive substring of the event location or name
        category_id: Exact category

    Returns:
        List of event dicts, earliest first
    """
    query = _active_events(session)

    if location:
        pattern = f"%{location}%"
        query = query.filter(or_(Event.location.ilike(pattern), Event.name.ilike(pattern)))
    if on_date:
        start = datetime.combine(on_date, time.min)
        query = query.filter(Event.date_time >= start, Event.date_time < start + timedelta(days=1))
    if category_id:
        query = query.filter(Event.category_id == category_id)

    return [event.to_dict() for event in query.order_by(Event.date_time.asc()).all()]


def list_upcoming_events(session: Session, limit: int = 6) -> List[Dict[str, Any]]:
    """Active events starting today or later."""
    today = datetime.combine(date.today(), time.min)
    events = (
        _active_events(session)
        .filter(Event.date_time >= today)
        .order_by(Event.date_time.asc())
        .limit(limit)
        .all()
    )
    return [event.to_dict() for event in events]


def list_featured_events(session: Session, limit: int = 4) -> List[Dict[str, Any]]:
    """Upcoming active events with a goal, closest to their goal first."""
    today = datetime.combine(date.today(), time.min)
    progress_ratio = Event.current_amount / Event.goal_amount
    events = (
        _active_events(session)
        .filter(Event.goal_amount > 0, Event.date_time >= today)
        .order_by(progress_ratio.desc(), Event.date_time.asc())
        .limit(limit)
        .all()
    )
    return [event.to_dict() for event in events]


def event_statistics(session: Session) -> Dict[str, Any]:
    """Aggregate figures over active events."""
    today = datetime.combine(date.today(), time.min)
    row = session.query(
        func.count(Event.id),
        func.count(case((Event.date_time >= today, 1))),
        func.count(case((Event.date_time < today, 1))),
        func.coalesce(func.sum(Event.goal_amount), 0),
        func.coalesce(func.sum(Event.current_amount), 0),
        func.coalesce(func.avg(Event.ticket_price), 0),
        func.min(Event.date_time),
        func.max(Event.date_time),
    ).filter(Event.is_active.is_(True)).one()

    total_goal = float(row[3])
    total_current = float(row[4])
    overall = total_current / total_goal * 100 if total_goal > 0 else 0
    return {
        'active_events': row[0],
        'upcoming_events': row[1],
        'past_events': row[2],
        'total_goal_amount': total_goal,
        'total_current_amount': total_current,
        'avg_ticket_price': round(float(row[5]), 2),
        'earliest_event_date': row[6].isoformat() if row[6] else None,
        'latest_event_date': row[7].isoformat() if row[7] else None,
        'overall_progress': round(overall, 2),
    }


def list_categories(session: Session) -> List[Dict[str, Any]]:
    """All categories ordered by name."""
    return [category.to_dict() for category in session.query(Category).order_by(Category.name.asc()).all()]


def get_category(session: Session, category_id: int) -> Optional[Dict[str, Any]]:
    category = session.query(Category).filter(Category.id == category_id).first()
    return category.to_dict() if category else None


def _category_rollup(session: Session):
    event_count = func.count(Event.id).label('event_count')
    return (
        session.query(
            Category,
            event_count,
            func.coalesce(func.sum(Event.goal_amount), 0),
            func.coalesce(func.sum(Event.current_amount), 0),
            func.coalesce(func.avg(Event.ticket_price), 0),
        )
        .outerjoin(Event, (Event.category_id == Category.id) & Event.is_active.is_(True))
        .group_by(Category.id)
    ), event_count


def category_statistics(session: Session) -> List[Dict[str, Any]]:
    """Per-category event counts and fundraising totals, busiest first."""
    query, event_count = _category_rollup(session)
    rows = query.order_by(event_count.desc(), Category.name.asc()).all()
    return [
        {
            **category.to_dict(),
            'event_count': count,
            'total_goal_amount': float(goal),
            'total_current_amount': float(current),
            'avg_ticket_price': round(float(price), 2),
        }
        for category, count, goal, current, price in rows
    ]


def list_popular_categories(session: Session, limit: int = 5) -> List[Dict[str, Any]]:
    """Categories with the most active events."""
    query, event_count = _category_rollup(session)
    rows = query.order_by(event_count.desc(), Category.name.asc()).limit(limit).all()
    return [{**category.to_dict(), 'event_count': count} for category, count, *_ in rows]
