"""View models produced by the page controllers.

A view model is everything a template needs to draw a page, already
filtered, sorted and formatted. Building one never touches the network.
"""

import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from markupsafe import Markup

from ..utils.formatting import (
    escape_html,
    format_currency,
    format_date,
    format_price,
    highlight_match,
    truncate,
)
from .models import Category, Event, FilterCriteria, SORT_OPTIONS

# Default organisation name; the web app passes its configured ORGANIZATION_NAME
SITE_NAME = 'CharityEvents'
CARD_DESCRIPTION_LENGTH = 150


@dataclass
class ProgressView:
    """Fundraising progress of an event with a goal."""
    percentage: int
    current_amount: float
    goal_amount: float
    current_label: str
    goal_label: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            'percentage': self.percentage,
            'current_amount': self.current_amount,
            'goal_amount': self.goal_amount,
            'current_label': self.current_label,
            'goal_label': self.goal_label,
        }


def progress_view(event: Event) -> Optional[ProgressView]:
    """Progress for event, or None when it has no goal."""
    if not event.has_goal:
        return None
    return ProgressView(
        percentage=event.progress,
        current_amount=event.current_amount,
        goal_amount=event.goal_amount,
        current_label=format_currency(event.current_amount),
        goal_label=format_currency(event.goal_amount),
    )


def days_until(event: Event, now: Optional[datetime] = None) -> int:
    now = now or datetime.now()
    days = math.ceil((event.date_time - now).total_seconds() / 86400)
    return max(days, 0)


def days_until_label(event: Event, now: Optional[datetime] = None) -> str:
    now = now or datetime.now()
    if not event.is_upcoming(now):
        return 'This event has already taken place'
    days = days_until(event, now)
    if days <= 0:
        return 'Today'
    if days == 1:
        return 'Tomorrow'
    return f"In {days} days"


@dataclass
class EventCard:
    """One event as shown in a grid or list."""
    id: int
    url: str
    name: Markup
    location: Markup
    date_label: str
    category_name: str
    price_label: str
    short_description: str
    is_upcoming: bool
    progress: Optional[ProgressView]


def event_card(event: Event, highlight: Optional[str] = None, now: Optional[datetime] = None) -> EventCard:
    """Build a card, highlighting highlight in name and location when given."""
    return EventCard(
        id=event.id,
        url=f"/event?id={event.id}",
        name=highlight_match(event.name, highlight),
        location=highlight_match(event.location, highlight),
        date_label=format_date(event.date_time, 'short'),
        category_name=event.category_name,
        price_label=format_price(event.ticket_price),
        short_description=truncate(event.short_description, CARD_DESCRIPTION_LENGTH),
        is_upcoming=event.is_upcoming(now),
        progress=progress_view(event),
    )


@dataclass
class EventDetail:
    """All fields of one event, formatted for the detail page."""
    id: int
    name: str
    date_label: str
    location: str
    address: str
    category_name: str
    price_label: str
    ticket_type: str
    capacity_label: str
    description: Markup
    days_until_label: str
    is_upcoming: bool
    progress: Optional[ProgressView]


def event_detail(event: Event, now: Optional[datetime] = None) -> EventDetail:
    description = event.full_description or event.short_description
    return EventDetail(
        id=event.id,
        name=event.name,
        date_label=format_date(event.date_time, 'full'),
        location=event.location,
        address=event.address,
        category_name=event.category_name,
        price_label=format_price(event.ticket_price),
        ticket_type=event.ticket_type,
        capacity_label=f"{event.max_attendees:,} attendees" if event.max_attendees else 'Unlimited',
        # Paragraph breaks in the description become <br>
        description=Markup('<br>').join(escape_html(line) for line in description.splitlines()),
        days_until_label=days_until_label(event, now),
        is_upcoming=event.is_upcoming(now),
        progress=progress_view(event),
    )


@dataclass
class HomeView:
    state: str
    cards: List[EventCard]
    view_mode: str
    sort_option: str
    query: str
    message: Optional[str] = None
    total_count: int = 0
    categories: List[Category] = field(default_factory=list)
    sort_options: Dict[str, str] = field(default_factory=lambda: dict(SORT_OPTIONS))


@dataclass
class SearchView:
    state: str
    has_searched: bool
    cards: List[EventCard]
    filters: FilterCriteria
    query: str
    sort_option: str
    summary: str = ''
    message: Optional[str] = None
    used_fallback: bool = False
    categories: List[Category] = field(default_factory=list)
    categories_available: bool = False
    recent_searches: List[dict] = field(default_factory=list)
    sort_options: Dict[str, str] = field(default_factory=lambda: dict(SORT_OPTIONS))


@dataclass
class EventView:
    state: str
    title: str
    detail: Optional[EventDetail] = None
    message: Optional[str] = None
    dialog_open: bool = False
