from datetime import timedelta
from typing import Any, Optional

from flask import Blueprint, abort, current_app, jsonify, make_response, render_template, request, session, url_for
from icalendar import Calendar, Event as ICalEvent

from ..api import EventAPIClient
from ..errors import APIError, NotFoundError, ValidationError
from ..pages import EventPage, HomePage, PageState, SearchPage
from ..pages.search import FILTER_FIELDS
from ..storage import MappingStorage
from ..viewmodels import progress_view

# Create the blueprint
pages_bp = Blueprint('pages', __name__)

# Events have no end time; calendar entries get a nominal length
DEFAULT_EVENT_DURATION = timedelta(hours=2)


class ViewCapture:
    """Renderer that keeps the latest view model for the template."""

    def __init__(self):
        self.view: Any = None
        self.progress: Any = None

    def render(self, view: Any) -> None:
        self.view = view

    def render_progress(self, progress: Any) -> None:
        self.progress = progress


def get_api_client(max_retries: Optional[int] = None) -> EventAPIClient:
    """Build an API client from the app configuration."""
    config = current_app.config
    return EventAPIClient(
        base_url=config['API_BASE_URL'],
        timeout=config['API_TIMEOUT'],
        max_retries=config['API_MAX_RETRIES'] if max_retries is None else max_retries,
        retry_delay=config['API_RETRY_DELAY'],
        transport=config.get('API_TRANSPORT'),
    )


def get_storage() -> MappingStorage:
    return MappingStorage(session)


def status_for(error: Optional[Exception], default: int = 200) -> int:
    if isinstance(error, ValidationError):
        return 400
    if isinstance(error, NotFoundError):
        return 404
    return default


@pages_bp.route('/')
async def index():
    """Render the home page."""
    args = request.args
    capture = ViewCapture()
    async with get_api_client() as api:
        page = HomePage(api, storage=get_storage(), renderer=capture)
        try:
            await page.init()
            if 'q' in args:
                page.set_search_query(args['q'])
            if 'sort' in args:
                page.set_sort_option(args['sort'])
            if 'view' in args:
                page.set_view(args['view'])
            width = args.get('width', type=int)
            if width is not None:
                page.set_viewport_width(width)
        finally:
            page.close()
    return render_template('index.html', view=capture.view)


@pages_bp.route('/search')
async def search():
    """Render the search page; filters in the query string run a new search."""
    args = request.args
    has_filters = any(name in args for name in FILTER_FIELDS)
    clear = 'clear' in args
    capture = ViewCapture()
    async with get_api_client() as api:
        page = SearchPage(api, storage=get_storage(), renderer=capture)
        try:
            await page.init(auto_search=not (has_filters or clear))
            if 'q' in args:
                page.set_query(args['q'])
            if 'sort' in args:
                page.set_sort_option(args['sort'])
            if clear:
                page.clear_filters()
            elif has_filters:
                await page.apply_filters(
                    date=args.get('date'),
                    location=args.get('location'),
                    category=args.get('category'),
                )
        finally:
            page.close()
    return render_template('search.html', view=capture.view), status_for(page.error)


async def load_event_page(renderer=None, max_retries: Optional[int] = None) -> EventPage:
    async with get_api_client(max_retries) as api:
        page = EventPage(
            api, request.args, poll_progress=False,
            site_name=current_app.config['ORGANIZATION_NAME'],
            storage=get_storage(), renderer=renderer,
        )
        try:
            await page.init()
        finally:
            page.close()
    return page


@pages_bp.route('/event')
async def event():
    """Render the event detail page."""
    capture = ViewCapture()
    page = await load_event_page(capture)
    return render_template('event.html', view=capture.view), status_for(page.error)


@pages_bp.route('/event/progress')
async def event_progress():
    """Current fundraising progress, polled by the event page."""
    # One attempt only; the page polls again on its own schedule
    page = await load_event_page(max_retries=0)
    if page.state != PageState.READY:
        return jsonify({'success': False, 'error': page.error_message}), status_for(page.error, 502)

    progress = progress_view(page.event)
    return jsonify({'success': True, 'data': progress.to_dict() if progress else None})


def build_calendar_event(event) -> ICalEvent:
    cal_event = ICalEvent()
    cal_event.add('uid', f"event-{event.id}@charity-events")
    cal_event.add('summary', event.name)
    cal_event.add('dtstart', event.date_time)
    cal_event.add('dtend', event.date_time + DEFAULT_EVENT_DURATION)

    description = event.full_description or event.short_description
    if description:
        cal_event.add('description', description)

    location = ', '.join(part for part in (event.location, event.address) if part)
    cal_event.add('location', location)
    cal_event.add('categories', [event.category_name])
    cal_event.add('url', url_for('pages.event', id=event.id, _external=True))
    return cal_event


def calendar_response(events, filename: str):
    organization = current_app.config['ORGANIZATION_NAME']

    # Create calendar
    cal = Calendar()
    cal.add('prodid', f'-//{organization}//Charity Events//EN')
    cal.add('version', '2.0')
    cal.add('x-wr-calname', f'{organization} Events')

    for event in events:
        cal.add_component(build_calendar_event(event))

    # Generate response
    response = make_response(cal.to_ical())
    response.headers['Content-Type'] = 'text/calendar; charset=utf-8'
    response.headers['Content-Disposition'] = f'attachment; filename={filename}'
    return response


@pages_bp.route('/calendar.ics')
async def ics_feed():
    """Generate an iCalendar feed of all active events."""
    try:
        async with get_api_client() as api:
            events = await api.fetch_events()
    except APIError as e:
        current_app.logger.error(f"Error fetching events from API: {e}")
        events = []
    return calendar_response(events, 'calendar.ics')


@pages_bp.route('/event/calendar.ics')
async def event_ics():
    """Generate an iCalendar file for a single event."""
    page = await load_event_page()
    if page.state != PageState.READY:
        abort(status_for(page.error, 502))
    return calendar_response([page.event], f'event-{page.event.id}.ics')


@pages_bp.route('/health')
async def health():
    """Report whether the events API is reachable."""
    async with get_api_client() as api:
        api_status = await api.check_health()
    code = 200 if api_status['status'] == 'healthy' else 503
    return jsonify({'status': api_status['status'], 'api': api_status}), code
