"""Event model definition."""

import math
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, Optional

from sqlalchemy import (
    Boolean, Column, DateTime, Enum, ForeignKey, Index, Integer, Numeric, String, Text, func
)
from sqlalchemy.orm import relationship

from .base import Base

UNCATEGORIZED = 'Uncategorized'


class Event(Base):
    """
    A charity event.

    Events are written by the data-entry process only; the API exposes
    active events read-only.

    Fields:
        id: Unique identifier (auto-generated)
        name: Event name
        short_description: One-line summary shown on cards
        full_description: Full text shown on the detail page
        date_time: When the event starts (naive local time)
        location: Venue name
        address: Street address of the venue (optional)
        category_id: Foreign key to categories
        ticket_price: Price of a ticket, 0 for free events
        ticket_type: 'free' or 'paid'
        goal_amount: Fundraising goal, 0 means no goal
        current_amount: Amount raised so far
        is_active: Inactive events are never exposed
        max_attendees: Capacity (optional)
    """
    __tablename__ = 'events'

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    short_description = Column(String(500))
    full_description = Column(Text)
    date_time = Column(DateTime, nullable=False)
    location = Column(String(255), nullable=False)
    address = Column(Text)
    category_id = Column(Integer, ForeignKey('categories.id'), nullable=False)
    ticket_price = Column(Numeric(10, 2), default=Decimal('0.00'))
    ticket_type = Column(Enum('free', 'paid', name='ticket_type'), default='free')
    goal_amount = Column(Numeric(10, 2), default=Decimal('0.00'))
    current_amount = Column(Numeric(10, 2), default=Decimal('0.00'))
    is_active = Column(Boolean, default=True, nullable=False)
    max_attendees = Column(Integer)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    category = relationship('Category', back_populates='events', lazy='joined')

    __table_args__ = (
        Index('idx_events_date_active', 'date_time', 'is_active'),
        Index('idx_events_location', 'location'),
        Index('idx_events_category', 'category_id'),
    )

    @property
    def progress_percentage(self) -> float:
        """Raised/goal ratio as a percentage with two decimals (unclamped)."""
        goal = float(self.goal_amount or 0)
        if goal <= 0:
            return 0.0
        return round(float(self.current_amount or 0) / goal * 100, 2)

    def days_until(self, now: Optional[datetime] = None) -> int:
        """Whole days until the event starts, 0 once it has started."""
        now = now or datetime.now()
        days = math.ceil((self.date_time - now).total_seconds() / 86400)
        return days if days > 0 else 0

    def to_dict(self, now: Optional[datetime] = None) -> Dict[str, Any]:
        """Convert to the API's wire format, including computed fields."""
        now = now or datetime.now()
        ticket_price = float(self.ticket_price or 0)
        return {
            'id': self.id,
            'name': self.name,
            'short_description': self.short_description or '',
            'full_description': self.full_description or '',
            'date_time': self.date_time.isoformat() if self.date_time else None,
            'location': self.location,
            'address': self.address,
            'category_id': self.category_id,
            'category_name': self.category.name if self.category else UNCATEGORIZED,
            'ticket_price': ticket_price,
            'ticket_type': self.ticket_type or 'free',
            'goal_amount': float(self.goal_amount or 0),
            'current_amount': float(self.current_amount or 0),
            'is_active': bool(self.is_active),
            'max_attendees': self.max_attendees,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
            # Computed fields
            'progress_percentage': self.progress_percentage,
            'days_until': self.days_until(now),
            'is_upcoming': self.date_time >= now if self.date_time else False,
            'is_free': ticket_price == 0,
        }

    def __str__(self) -> str:
        """String representation."""
        return f"Event(id={self.id}, name={self.name}, date_time={self.date_time})"
