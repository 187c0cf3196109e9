import httpx
import pytest

from charity_events.config.settings import Config
from charity_events.web import create_app

from .helpers import MockAPI, envelope, event_record

CATEGORIES = [{'id': 1, 'name': 'Fun Run'}, {'id': 2, 'name': 'Gala Dinner'}]


def default_routes():
    return {
        '/api/events': envelope([
            event_record(),
            event_record(id=2, name='Gala Dinner', location='Grand Hotel', category_id=2,
                         category_name='Gala Dinner', date_time='2025-11-20T19:00:00'),
        ]),
        '/api/categories': envelope(CATEGORIES),
        '/api/events/search': envelope([event_record()]),
        '/api/events/1': envelope(event_record()),
        '/api/health': {'success': True, 'status': 'healthy'},
    }


@pytest.fixture
def mock_api():
    return MockAPI(default_routes())


def make_test_client(mock_api, **overrides):
    class TestConfig(Config):
        TESTING = True
        SECRET_KEY = 'test'
        API_BASE_URL = 'http://api.test'
        API_MAX_RETRIES = 0
        API_RETRY_DELAY = 0
        API_TRANSPORT = mock_api.transport

    for name, value in overrides.items():
        setattr(TestConfig, name, value)
    return create_app(TestConfig).test_client()


@pytest.fixture
def client(mock_api):
    return make_test_client(mock_api)


def test_index_lists_events(client):
    response = client.get('/')
    body = response.get_data(as_text=True)

    assert response.status_code == 200
    assert 'Showing 2 of 2 events' in body
    assert '5K Run' in body
    assert 'Gala Dinner' in body


def test_index_search_narrows_cards(client):
    body = client.get('/?q=gala').get_data(as_text=True)
    assert 'Showing 1 of 2 events' in body
    assert '5K Run' not in body


def test_index_reports_unreachable_api(client, mock_api):
    mock_api.routes['/api/events'] = httpx.ConnectError('refused')

    response = client.get('/')

    assert response.status_code == 200
    assert 'Unable to connect to the server' in response.get_data(as_text=True)


def test_search_page_is_idle_without_filters(client, mock_api):
    body = client.get('/search').get_data(as_text=True)

    assert 'Choose a date, location or category' in body
    assert '/api/events/search' not in mock_api.paths()


def test_search_with_filters_highlights_location(client, mock_api):
    response = client.get('/search?location=park')
    body = response.get_data(as_text=True)

    assert response.status_code == 200
    assert '1 event found in park' in body
    assert 'City <mark>Park</mark>' in body
    search_request = [r for r in mock_api.requests if r.url.path == '/api/events/search'][0]
    assert search_request.url.params['location'] == 'park'


def test_search_restores_filters_from_session(client, mock_api):
    client.get('/search?location=park')
    mock_api.requests.clear()

    body = client.get('/search').get_data(as_text=True)

    assert '1 event found in park' in body
    assert mock_api.paths().count('/api/events/search') == 1


def test_clear_returns_to_idle(client):
    client.get('/search?location=park')
    body = client.get('/search?clear=1').get_data(as_text=True)
    assert 'Choose a date, location or category' in body


def test_invalid_search_date_is_a_bad_request(client, mock_api):
    response = client.get('/search?date=15-10-2025')

    assert response.status_code == 400
    assert 'Invalid date format. Use YYYY-MM-DD.' in response.get_data(as_text=True)
    assert '/api/events/search' not in mock_api.paths()


def test_event_page(client):
    response = client.get('/event?id=1')
    body = response.get_data(as_text=True)

    assert response.status_code == 200
    assert '<title>5K Run - CharityEvents</title>' in body
    assert 'id="progress-percentage">65<' in body


def test_event_page_errors(client, mock_api):
    invalid = client.get('/event?id=abc')
    assert invalid.status_code == 400
    assert 'Invalid event ID provided.' in invalid.get_data(as_text=True)
    assert mock_api.requests == []

    missing = client.get('/event?id=5')
    assert missing.status_code == 404
    assert 'does not exist or has been removed' in missing.get_data(as_text=True)


def test_event_progress_json(client):
    body = client.get('/event/progress?id=1').get_json()

    assert body['success'] is True
    assert body['data']['percentage'] == 65
    assert body['data']['goal_label'] == '$10,000.00'


def test_event_progress_for_missing_event(client):
    response = client.get('/event/progress?id=5')
    assert response.status_code == 404
    assert response.get_json()['success'] is False


def test_calendar_feed(client):
    response = client.get('/calendar.ics')
    body = response.get_data(as_text=True)

    assert response.headers['Content-Type'].startswith('text/calendar')
    assert 'SUMMARY:5K Run' in body
    assert 'SUMMARY:Gala Dinner' in body


def test_calendar_feed_survives_api_failure(client, mock_api):
    mock_api.routes['/api/events'] = httpx.Response(500, json={'success': False})

    response = client.get('/calendar.ics')

    assert response.status_code == 200
    assert 'BEGIN:VEVENT' not in response.get_data(as_text=True)


def test_single_event_calendar(client):
    response = client.get('/event/calendar.ics?id=1')

    assert response.status_code == 200
    assert 'event-1.ics' in response.headers['Content-Disposition']
    assert 'LOCATION:City Park\\, 123 Park Avenue' in response.get_data(as_text=True)
    assert client.get('/event/calendar.ics?id=5').status_code == 404


def test_health(client, mock_api):
    assert client.get('/health').status_code == 200

    mock_api.routes['/api/health'] = httpx.ConnectError('refused')
    response = client.get('/health')
    assert response.status_code == 503
    assert response.get_json()['status'] == 'unhealthy'


def test_unknown_page_renders_not_found(client):
    response = client.get('/no-such-page')
    assert response.status_code == 404
    assert 'Page not found' in response.get_data(as_text=True)


def test_event_title_uses_configured_organization(mock_api):
    client = make_test_client(mock_api, ORGANIZATION_NAME='Hope Foundation')

    found = client.get('/event?id=1').get_data(as_text=True)
    missing = client.get('/event?id=abc').get_data(as_text=True)

    assert '<title>5K Run - Hope Foundation</title>' in found
    assert '<title>Event Details - Hope Foundation</title>' in missing


def test_progress_endpoint_makes_a_single_attempt(mock_api):
    mock_api.routes['/api/events/1'] = httpx.Response(503, json={'success': False})
    client = make_test_client(mock_api, API_MAX_RETRIES=3)

    response = client.get('/event/progress?id=1')

    assert response.status_code == 502
    assert mock_api.paths().count('/api/events/1') == 1

    mock_api.requests.clear()
    client.get('/event?id=1')
    assert mock_api.paths().count('/api/events/1') == 4
