import json
from datetime import date

from charity_events.web.models import FilterCriteria, SortCriteria
from charity_events.web.storage import (
    HOME_STATE_KEY,
    MAX_RECENT_SEARCHES,
    RECENT_SEARCHES_KEY,
    SEARCH_FILTERS_KEY,
    MappingStorage,
    add_recent_search,
    get_recent_searches,
    load_search_state,
    save_search_state,
)


def test_values_are_stored_as_json():
    backend = {}
    storage = MappingStorage(backend)
    storage.set(HOME_STATE_KEY, {'query': 'run'})

    assert json.loads(backend[HOME_STATE_KEY]) == {'query': 'run'}
    assert storage.get(HOME_STATE_KEY) == {'query': 'run'}


def test_unreadable_values_fall_back_to_default():
    storage = MappingStorage({SEARCH_FILTERS_KEY: '{not json'})
    assert storage.get(SEARCH_FILTERS_KEY, 'default') == 'default'


def test_remove_and_clear():
    backend = {'other': 'keep'}
    storage = MappingStorage(backend)
    storage.set(HOME_STATE_KEY, 1)
    storage.set(SEARCH_FILTERS_KEY, 2)
    storage.remove(HOME_STATE_KEY)
    assert storage.get(HOME_STATE_KEY) is None

    storage.clear()
    assert backend == {'other': 'keep'}


def test_search_state_round_trip():
    storage = MappingStorage({})
    filters = FilterCriteria(date=date(2025, 10, 15), location='park', category=3)
    sort = SortCriteria('price', 'desc')
    save_search_state(storage, filters, 'gala', sort)

    assert load_search_state(storage) == (filters, 'gala', sort)


def test_missing_search_state_gives_defaults():
    assert load_search_state(MappingStorage({})) == (FilterCriteria(), '', SortCriteria())


def test_malformed_search_state_is_sanitized():
    storage = MappingStorage({})
    storage.set(SEARCH_FILTERS_KEY, {
        'filters': {'date': 'yesterday', 'location': '  ', 'category': -4},
        'query': 42,
        'sort': 'popularity_up',
    })
    assert load_search_state(storage) == (FilterCriteria(), '', SortCriteria())


def test_recent_searches_are_capped_and_deduplicated():
    storage = MappingStorage({})
    for i in range(MAX_RECENT_SEARCHES + 3):
        add_recent_search(storage, FilterCriteria(category=i + 1))
    add_recent_search(storage, FilterCriteria(category=5))

    history = get_recent_searches(storage)
    assert len(history) == MAX_RECENT_SEARCHES
    assert history[0] == {'date': None, 'location': None, 'category': 5}
    assert [entry['category'] for entry in history].count(5) == 1


def test_empty_filters_are_not_recorded():
    storage = MappingStorage({})
    add_recent_search(storage, FilterCriteria())
    assert storage.get(RECENT_SEARCHES_KEY) is None


def test_session_like_backends_are_flagged_modified():
    class FakeSession(dict):
        modified = False

    backend = FakeSession()
    MappingStorage(backend).set(HOME_STATE_KEY, {})
    assert backend.modified is True
