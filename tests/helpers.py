"""Shared test doubles and sample data."""

import asyncio
import json
from datetime import datetime

import httpx

from charity_events.web.api import EventAPIClient
from charity_events.web.errors import NotFoundError
from charity_events.web.filters import apply_filters
from charity_events.web.models import Category, Event


def event_record(**overrides):
    """An event as the API returns it."""
    record = {
        'id': 1,
        'name': '5K Run',
        'short_description': 'A fun run around the park',
        'full_description': 'Run 5K and support children education.',
        'date_time': '2025-10-15T08:00:00',
        'location': 'City Park',
        'address': '123 Park Avenue',
        'category_id': 1,
        'category_name': 'Fun Run',
        'ticket_price': 25.0,
        'ticket_type': 'paid',
        'goal_amount': 10000.0,
        'current_amount': 6500.0,
        'is_active': True,
        'max_attendees': 500,
    }
    record.update(overrides)
    return record


def make_event(**overrides):
    """A client-side Event."""
    values = {
        'id': 1,
        'name': '5K Run',
        'date_time': datetime(2025, 10, 15, 8, 0),
        'location': 'City Park',
        'short_description': 'A fun run around the park',
        'category_id': 1,
        'category_name': 'Fun Run',
        'ticket_price': 25.0,
        'ticket_type': 'paid',
        'goal_amount': 10000.0,
        'current_amount': 6500.0,
    }
    values.update(overrides)
    return Event(**values)


SAMPLE_EVENTS = [
    make_event(),
    make_event(id=2, name='Gala Dinner', date_time=datetime(2025, 11, 20, 19, 0), location='Grand Hotel',
               short_description='Formal dinner', category_id=2, category_name='Gala Dinner',
               ticket_price=150.0, goal_amount=50000.0, current_amount=32500.0),
    make_event(id=3, name='Art Auction', date_time=datetime(2025, 9, 30, 18, 0), location='Art Center',
               short_description='Silent auction of artworks', category_id=3, category_name='Silent Auction',
               ticket_price=0.0, ticket_type='free', goal_amount=0.0, current_amount=0.0),
    make_event(id=4, name='Sunset Yoga', date_time=datetime(2025, 10, 15, 17, 30), location='Sunset Park',
               short_description='Yoga at sunset', category_id=5, category_name='Workshop',
               ticket_price=20.0, goal_amount=3000.0, current_amount=2100.0),
]

SAMPLE_CATEGORIES = [
    Category(id=1, name='Fun Run'),
    Category(id=2, name='Gala Dinner'),
    Category(id=3, name='Silent Auction'),
    Category(id=5, name='Workshop'),
]


def envelope(data, **meta):
    return {'success': True, 'data': data, 'meta': {'count': len(data) if isinstance(data, list) else 1, **meta}}


class MockAPI:
    """
    Routes requests to canned responses and records every request.

    A route value may be a JSON-able payload (served with 200), an
    httpx.Response, an exception to raise, or a list of those served in turn.
    """

    def __init__(self, routes=None):
        self.routes = dict(routes or {})
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if path not in self.routes:
            return httpx.Response(404, json={'success': False, 'error': {'code': 'ENDPOINT_NOT_FOUND', 'message': 'Not Found'}})

        response = self.routes[path]
        if isinstance(response, list) and response and isinstance(response[0], (httpx.Response, Exception)):
            response = response.pop(0) if len(response) > 1 else response[0]
        if isinstance(response, Exception):
            raise response
        if isinstance(response, httpx.Response):
            return httpx.Response(response.status_code, content=response.content, headers=response.headers)
        return httpx.Response(200, content=json.dumps(response), headers={'Content-Type': 'application/json'})

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)

    def paths(self):
        return [request.url.path for request in self.requests]


class SleepRecorder:
    def __init__(self):
        self.delays = []

    async def __call__(self, delay):
        self.delays.append(delay)


def make_client(mock: MockAPI, sleep=None, **kwargs) -> EventAPIClient:
    return EventAPIClient(
        'http://api.test',
        transport=mock.transport,
        sleep=sleep or SleepRecorder(),
        **kwargs
    )


class FakeAPI:
    """Stand-in for EventAPIClient used by the page controller tests."""

    def __init__(self, events=None, categories=None):
        self.events = list(SAMPLE_EVENTS if events is None else events)
        self.categories = list(SAMPLE_CATEGORIES if categories is None else categories)
        self.fail = {}
        self.calls = []
        self.search_gates = []

    def _check(self, name):
        self.calls.append(name)
        error = self.fail.get(name)
        if error is not None:
            raise error

    async def fetch_events(self):
        self._check('fetch_events')
        return list(self.events)

    async def fetch_categories(self):
        self._check('fetch_categories')
        return list(self.categories)

    async def fetch_event_by_id(self, event_id):
        self._check('fetch_event_by_id')
        for event in self.events:
            if event.id == int(event_id):
                return event
        raise NotFoundError(f"Event with ID {event_id} not found", status_code=404)

    async def search_events(self, criteria=None):
        self._check('search_events')
        if self.search_gates:
            gate, results = self.search_gates.pop(0)
            await gate.wait()
            return results
        return apply_filters(self.events, criteria)


class RecordingRenderer:
    def __init__(self):
        self.views = []
        self.progress_updates = []

    def render(self, view):
        self.views.append(view)

    def render_progress(self, progress):
        self.progress_updates.append(progress)

    @property
    def last(self):
        return self.views[-1] if self.views else None


def run(coro):
    return asyncio.run(coro)
