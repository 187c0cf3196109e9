"""Filter and sort policy shared by the Home and Search pages.

Predicates are built from the optional parts of FilterCriteria and ANDed
together; an absent filter matches everything. Sorting uses a single-key
comparator with Python's stable sort, so ties keep their input order.
"""

from datetime import date
from functools import cmp_to_key
from typing import Callable, Iterable, List, Optional

from .models import Event, FilterCriteria, SortCriteria

Predicate = Callable[[Event], bool]
Comparator = Callable[[Event, Event], int]


def date_equals(day: date) -> Predicate:
    """Match events starting on the given calendar day."""
    return lambda event: event.date_time.date() == day


def location_contains(term: str) -> Predicate:
    """Match events whose location or name contains term, ignoring case."""
    needle = term.strip().casefold()
    return lambda event: needle in event.location.casefold() or needle in event.name.casefold()


def category_equals(category_id: int) -> Predicate:
    return lambda event: event.category_id == category_id


def query_matches(query: str) -> Predicate:
    """Free-text match over name, location, short description and category."""
    needle = query.strip().casefold()

    def predicate(event: Event) -> bool:
        fields = (event.name, event.location, event.short_description, event.category_name)
        return any(needle in (value or '').casefold() for value in fields)

    return predicate


def build_predicates(criteria: Optional[FilterCriteria] = None, query: Optional[str] = None) -> List[Predicate]:
    """Return one predicate per non-empty filter."""
    predicates = []
    if criteria is not None:
        if criteria.date is not None:
            predicates.append(date_equals(criteria.date))
        if criteria.location and criteria.location.strip():
            predicates.append(location_contains(criteria.location))
        if criteria.category is not None:
            predicates.append(category_equals(criteria.category))
    if query and query.strip():
        predicates.append(query_matches(query))
    return predicates


def apply_filters(
    events: Iterable[Event],
    criteria: Optional[FilterCriteria] = None,
    query: Optional[str] = None,
) -> List[Event]:
    """Return the events satisfying every present filter, in input order."""
    predicates = build_predicates(criteria, query)
    return [event for event in events if all(predicate(event) for predicate in predicates)]


def filter_by_query(events: Iterable[Event], query: Optional[str]) -> List[Event]:
    return apply_filters(events, None, query)


SORT_VALUES = {
    'date': lambda event: event.date_time,
    'name': lambda event: event.name.casefold(),
    'location': lambda event: event.location.casefold(),
    'price': lambda event: event.ticket_price,
}


def make_comparator(key: str, direction: str = 'asc') -> Comparator:
    """
    Build a two-argument comparator for one sort key.

    Text keys compare case-insensitively; date and price compare by value.
    Descending order negates the comparison.

    Raises:
        ValueError: If key is not a known sort key
    """
    if key not in SORT_VALUES:
        raise ValueError(f"Unknown sort key: {key}")
    value_of = SORT_VALUES[key]
    sign = -1 if direction == 'desc' else 1

    def compare(a: Event, b: Event) -> int:
        left, right = value_of(a), value_of(b)
        if left == right:
            return 0
        return sign * (-1 if left < right else 1)

    return compare


def sort_events(events: Iterable[Event], sort: Optional[SortCriteria] = None) -> List[Event]:
    """Return a new list ordered by sort (default date ascending)."""
    sort = sort or SortCriteria()
    return sorted(events, key=cmp_to_key(make_comparator(sort.key, sort.direction)))
