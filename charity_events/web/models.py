"""Client-side data shapes for the web client.

Event and Category are read-only projections of the API's records.
FilterCriteria and SortCriteria hold the user's search and ordering choices
and know how to round-trip through client storage.
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Dict, Mapping, Optional

from ..utils.formatting import calculate_progress
from .errors import ValidationError

UNCATEGORIZED = 'Uncategorized'


@dataclass
class Event:
    """
    An active charity event as seen by the web client.

    Fields:
        id: Unique identifier
        name: Event name
        date_time: Start time, naive local time
        location: Venue name
        short_description: Summary shown on cards (may be empty)
        full_description: Text shown on the detail page (may be empty)
        address: Street address (may be empty)
        category_id: Category identifier, 0 when unknown
        category_name: Denormalized category name
        ticket_price: Price of a ticket, 0 for free events
        ticket_type: 'free' or 'paid'
        goal_amount: Fundraising goal, 0 means no goal
        current_amount: Amount raised so far
        is_active: Always True for events kept by the client
        max_attendees: Capacity, None when unlimited
    """
    id: int
    name: str
    date_time: datetime
    location: str
    short_description: str = ''
    full_description: str = ''
    address: str = ''
    category_id: int = 0
    category_name: str = UNCATEGORIZED
    ticket_price: float = 0.0
    ticket_type: str = 'free'
    goal_amount: float = 0.0
    current_amount: float = 0.0
    is_active: bool = True
    max_attendees: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def progress(self) -> int:
        return calculate_progress(self.current_amount, self.goal_amount)

    @property
    def has_goal(self) -> bool:
        return self.goal_amount > 0

    @property
    def is_free(self) -> bool:
        return self.ticket_price == 0

    def is_upcoming(self, now: Optional[datetime] = None) -> bool:
        return self.date_time >= (now or datetime.now())


@dataclass
class Category:
    """An event category."""
    id: int
    name: str
    description: str = ''
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


def parse_positive_int(value: Any) -> Optional[int]:
    """Return value as a positive int, or None if it is not one."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value > 0 else None
    if isinstance(value, str) and value.strip().isdigit():
        number = int(value.strip())
        return number if number > 0 else None
    return None


def parse_day(value: Any) -> Optional[date]:
    """Return value as a calendar day, or None if it is not a YYYY-MM-DD date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return datetime.strptime(value.strip(), '%Y-%m-%d').date()
        except ValueError:
            return None
    return None


@dataclass(frozen=True)
class FilterCriteria:
    """
    The optional {date, location, category} search filters.

    An absent filter matches everything.
    """
    date: Optional[date] = None
    location: Optional[str] = None
    category: Optional[int] = None

    @classmethod
    def from_raw(cls, date: Any = None, location: Any = None, category: Any = None) -> 'FilterCriteria':
        """
        Build criteria from raw form input.

        Empty values are treated as absent.

        Raises:
            ValidationError: If a date or category value is present but malformed
        """
        day = None
        if date not in (None, ''):
            day = parse_day(date)
            if day is None:
                raise ValidationError('Invalid date format. Use YYYY-MM-DD.')

        category_id = None
        if category not in (None, ''):
            category_id = parse_positive_int(category)
            if category_id is None:
                raise ValidationError('Invalid category. Please choose a category from the list.')

        location = (location or '').strip() or None
        return cls(date=day, location=location, category=category_id)

    def is_empty(self) -> bool:
        return self.date is None and not self.location and self.category is None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'date': self.date.isoformat() if self.date else None,
            'location': self.location,
            'category': self.category,
        }

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> 'FilterCriteria':
        """Restore criteria saved with to_dict(); malformed values are dropped."""
        data = data or {}
        location = data.get('location')
        return cls(
            date=parse_day(data.get('date')),
            location=location.strip() or None if isinstance(location, str) else None,
            category=parse_positive_int(data.get('category')),
        )


SORT_KEYS = ('date', 'name', 'location', 'price')
SORT_DIRECTIONS = ('asc', 'desc')


@dataclass(frozen=True)
class SortCriteria:
    """A single sort key and direction, encoded as '<key>_<direction>'."""
    key: str = 'date'
    direction: str = 'asc'

    def __post_init__(self):
        if self.key not in SORT_KEYS:
            raise ValueError(f"Unknown sort key: {self.key}")
        if self.direction not in SORT_DIRECTIONS:
            raise ValueError(f"Unknown sort direction: {self.direction}")

    @property
    def option(self) -> str:
        return f"{self.key}_{self.direction}"

    @classmethod
    def from_option(cls, option: Optional[str], default: Optional['SortCriteria'] = None) -> 'SortCriteria':
        """Parse an option string such as 'price_desc', falling back to default."""
        key, _, direction = (option or '').partition('_')
        if key in SORT_KEYS and direction in SORT_DIRECTIONS:
            return cls(key, direction)
        return default or cls()


SORT_OPTIONS = {
    'date_asc': 'Date (earliest first)',
    'date_desc': 'Date (latest first)',
    'name_asc': 'Name (A-Z)',
    'name_desc': 'Name (Z-A)',
    'location_asc': 'Location (A-Z)',
    'location_desc': 'Location (Z-A)',
    'price_asc': 'Price (low to high)',
    'price_desc': 'Price (high to low)',
}
