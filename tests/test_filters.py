from datetime import date

import pytest

from charity_events.web.filters import apply_filters, make_comparator, sort_events
from charity_events.web.models import FilterCriteria, SortCriteria

from .helpers import SAMPLE_EVENTS, make_event


def ids(events):
    return [event.id for event in events]


def test_location_filter_matches_location_or_name():
    park = apply_filters(SAMPLE_EVENTS, FilterCriteria(location='park'))
    assert ids(park) == [1, 4]

    by_name = apply_filters(SAMPLE_EVENTS, FilterCriteria(location='GALA'))
    assert ids(by_name) == [2]


def test_single_event_location_search():
    event = make_event(id=1, name='5K Run', location='City Park', ticket_price=25,
                       goal_amount=10000, current_amount=6500)
    result = apply_filters([event], FilterCriteria(location='park'))
    assert result == [event]
    assert result[0].progress == 65


def test_date_filter_compares_calendar_day():
    result = apply_filters(SAMPLE_EVENTS, FilterCriteria(date=date(2025, 10, 15)))
    assert ids(result) == [1, 4]


def test_category_filter():
    assert ids(apply_filters(SAMPLE_EVENTS, FilterCriteria(category=2))) == [2]
    assert apply_filters(SAMPLE_EVENTS, FilterCriteria(category=99)) == []


def test_filters_are_anded():
    criteria = FilterCriteria(date=date(2025, 10, 15), location='park', category=5)
    assert ids(apply_filters(SAMPLE_EVENTS, criteria)) == [4]


def test_empty_criteria_matches_everything():
    assert apply_filters(SAMPLE_EVENTS, FilterCriteria()) == SAMPLE_EVENTS
    assert apply_filters(SAMPLE_EVENTS) == SAMPLE_EVENTS


def test_query_matches_description_and_category():
    assert ids(apply_filters(SAMPLE_EVENTS, query='artworks')) == [3]
    assert ids(apply_filters(SAMPLE_EVENTS, query='workshop')) == [4]


@pytest.mark.parametrize('criteria', [
    FilterCriteria(location='park'),
    FilterCriteria(category=1),
    FilterCriteria(date=date(2025, 11, 20), location='hotel'),
])
def test_apply_filters_is_an_idempotent_subset(criteria):
    once = apply_filters(SAMPLE_EVENTS, criteria)
    assert all(event in SAMPLE_EVENTS for event in once)
    assert apply_filters(once, criteria) == once


def test_sort_by_each_key():
    assert ids(sort_events(SAMPLE_EVENTS, SortCriteria('date', 'asc'))) == [3, 1, 4, 2]
    assert ids(sort_events(SAMPLE_EVENTS, SortCriteria('name', 'asc'))) == [1, 3, 2, 4]
    assert ids(sort_events(SAMPLE_EVENTS, SortCriteria('location', 'asc'))) == [3, 1, 2, 4]
    assert ids(sort_events(SAMPLE_EVENTS, SortCriteria('price', 'desc'))) == [2, 1, 4, 3]


@pytest.mark.parametrize('key', ['date', 'name', 'location', 'price'])
def test_reversing_direction_reverses_order(key):
    ascending = sort_events(SAMPLE_EVENTS, SortCriteria(key, 'asc'))
    descending = sort_events(SAMPLE_EVENTS, SortCriteria(key, 'desc'))
    assert sorted(ids(ascending)) == sorted(ids(SAMPLE_EVENTS))
    assert descending == list(reversed(ascending))


def test_sort_is_stable_for_ties():
    events = [make_event(id=i, ticket_price=10.0) for i in (5, 3, 9)]
    assert ids(sort_events(events, SortCriteria('price', 'asc'))) == [5, 3, 9]
    assert ids(sort_events(events, SortCriteria('price', 'desc'))) == [5, 3, 9]


def test_text_comparison_ignores_case():
    compare = make_comparator('name')
    assert compare(make_event(name='alpha'), make_event(name='Alpha')) == 0
    assert compare(make_event(name='apple'), make_event(name='Banana')) < 0


def test_unknown_sort_key_is_rejected():
    with pytest.raises(ValueError):
        make_comparator('popularity')
