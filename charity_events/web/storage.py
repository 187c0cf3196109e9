"""Client-side key/value storage.

Values are stored JSON-encoded so any backing mapping (a dict, the Flask
session) behaves like browser local storage.
"""

import json
import logging
from typing import Any, List, MutableMapping, Optional, Tuple

from .models import FilterCriteria, SortCriteria

logger = logging.getLogger(__name__)

SEARCH_FILTERS_KEY = 'charity_events_search_filters'
RECENT_SEARCHES_KEY = 'charity_events_recent_searches'
HOME_STATE_KEY = 'charity_events_home_state'
MAX_RECENT_SEARCHES = 10


class Storage:
    """JSON-encoded storage over a mutable mapping of strings."""

    def __init__(self, backend: MutableMapping[str, str]):
        self._backend = backend

    def get(self, key: str, default: Any = None) -> Any:
        raw = self._backend.get(key)
        if raw is None:
            return default
        try:
            return json.loads(raw)
        except (TypeError, ValueError) as e:
            logger.warning(f"Discarding unreadable value for {key}: {e}")
            return default

    def set(self, key: str, value: Any) -> None:
        self._backend[key] = json.dumps(value)
        self._changed()

    def remove(self, key: str) -> None:
        if key in self._backend:
            del self._backend[key]
            self._changed()

    def clear(self) -> None:
        for key in [key for key in self._backend if key.startswith('charity_events_')]:
            del self._backend[key]
        self._changed()

    def _changed(self) -> None:
        pass


class MappingStorage(Storage):
    """Storage backed by a dict or a Flask session."""

    def _changed(self) -> None:
        # Flask sessions only persist when flagged as modified
        if hasattr(self._backend, 'modified'):
            self._backend.modified = True


def save_search_state(storage: Storage, filters: FilterCriteria, query: str = '',
                      sort: Optional[SortCriteria] = None) -> None:
    storage.set(SEARCH_FILTERS_KEY, {
        'filters': filters.to_dict(),
        'query': query or '',
        'sort': (sort or SortCriteria()).option,
    })


def load_search_state(storage: Storage) -> Tuple[FilterCriteria, str, SortCriteria]:
    """Restore the last search; missing or malformed parts fall back to defaults."""
    state = storage.get(SEARCH_FILTERS_KEY)
    if not isinstance(state, dict):
        return FilterCriteria(), '', SortCriteria()
    query = state.get('query')
    return (
        FilterCriteria.from_dict(state.get('filters')),
        query if isinstance(query, str) else '',
        SortCriteria.from_option(state.get('sort')),
    )


def add_recent_search(storage: Storage, filters: FilterCriteria) -> List[dict]:
    """Record filters at the front of the history, de-duplicated and capped."""
    if filters.is_empty():
        return get_recent_searches(storage)
    entry = filters.to_dict()
    history = [item for item in get_recent_searches(storage) if item != entry]
    history.insert(0, entry)
    history = history[:MAX_RECENT_SEARCHES]
    storage.set(RECENT_SEARCHES_KEY, history)
    return history


def get_recent_searches(storage: Storage) -> List[dict]:
    history = storage.get(RECENT_SEARCHES_KEY, [])
    return [item for item in history if isinstance(item, dict)] if isinstance(history, list) else []
