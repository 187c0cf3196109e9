import asyncio
import logging
import math
from datetime import date, datetime, timezone
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, Union

import httpx

from .errors import (
    APIError,
    ClientError,
    DataShapeError,
    NetworkError,
    NotFoundError,
    RequestTimeoutError,
    ServerError,
    ValidationError,
)
from .models import UNCATEGORIZED, Category, Event, FilterCriteria, parse_day, parse_positive_int

logger = logging.getLogger(__name__)

REQUIRED_EVENT_FIELDS = ('id', 'name', 'date_time', 'location')


def parse_datetime(value: Any) -> Optional[datetime]:
    """Parse an ISO timestamp into a naive local datetime."""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    elif isinstance(value, str) and value.strip():
        try:
            parsed = datetime.fromisoformat(value.strip().replace('Z', '+00:00'))
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def _to_float(value: Any) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return 0.0 if math.isnan(number) else number


def _to_capacity(value: Any) -> Optional[int]:
    number = _to_float(value)
    return int(number) if number >= 1 else None


def build_search_params(criteria: Union[FilterCriteria, Mapping[str, Any], None]) -> Dict[str, str]:
    """
    Serialize the present, valid search criteria into query parameters.

    Invalid values are dropped with a warning rather than sent.
    """
    if criteria is None:
        return {}
    if isinstance(criteria, FilterCriteria):
        raw = criteria.to_dict()
    else:
        raw = dict(criteria)

    params = {}
    raw_date = raw.get('date')
    if raw_date:
        day = parse_day(raw_date)
        if day:
            params['date'] = day.isoformat()
        else:
            logger.warning(f"Ignoring invalid search date: {raw_date!r}")

    location = raw.get('location')
    if isinstance(location, str) and location.strip():
        params['location'] = location.strip()

    raw_category = raw.get('category')
    if raw_category not in (None, ''):
        category_id = parse_positive_int(raw_category)
        if category_id:
            params['category'] = str(category_id)
        else:
            logger.warning(f"Ignoring invalid search category: {raw_category!r}")

    return params


class EventAPIClient:
    """
    Async client for the charity events API.

    Transient failures (network errors, timeouts and 5xx responses) are
    retried with exponential backoff; every final failure is raised as an
    APIError subclass.

    Example:
        async with EventAPIClient("http://localhost:8000") as api:
            events = await api.fetch_events()
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        max_retries: int = 3,
        retry_delay: float = 1.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self._sleep = sleep
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
            headers={'Accept': 'application/json'},
        )

    async def __aenter__(self) -> 'EventAPIClient':
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def fetch_events(self) -> List[Event]:
        """
        Fetch all active events.

        Returns:
            List[Event]: Events in the order the API returned them

        Raises:
            APIError: If the request ultimately fails or no record is usable
        """
        payload = await self._request('/api/events')
        events = self._convert_events(payload)
        logger.info(f"Fetched {len(events)} events")
        return events

    async def fetch_categories(self) -> List[Category]:
        """Fetch all categories."""
        payload = await self._request('/api/categories')
        categories = self._convert_categories(payload)
        logger.info(f"Fetched {len(categories)} categories")
        return categories

    async def fetch_event_by_id(self, event_id: Union[int, str]) -> Event:
        """
        Fetch a single active event.

        Args:
            event_id: Positive integer, or a string of digits

        Raises:
            ValidationError: If event_id is not a positive integer (no request is made)
            NotFoundError: If the event does not exist or is inactive
        """
        validated_id = parse_positive_int(event_id)
        if validated_id is None:
            raise ValidationError('Invalid event ID provided')

        payload = await self._request(f'/api/events/{validated_id}')
        if isinstance(payload, list) and len(payload) == 1:
            payload = payload[0]
        if not isinstance(payload, dict):
            raise DataShapeError(f"Expected an event object for ID {validated_id}")

        try:
            event = self._convert_to_event(payload)
        except ValueError as e:
            raise DataShapeError(f"Invalid event data for ID {validated_id}: {e}") from e
        if not event.is_active:
            raise NotFoundError(f"Event {validated_id} is inactive", status_code=404)
        return event

    async def search_events(self, criteria: Union[FilterCriteria, Mapping[str, Any], None] = None) -> List[Event]:
        """
        Search active events on the server.

        Only present, valid criteria are sent; with none the server returns
        every active event.
        """
        params = build_search_params(criteria)
        payload = await self._request('/api/events/search', params=params)
        events = self._convert_events(payload)
        logger.info(f"Search {params} returned {len(events)} events")
        return events

    async def check_health(self) -> Dict[str, Any]:
        """Probe the API once; never raises."""
        try:
            payload = await self._request_once('/api/health')
        except APIError as e:
            return {
                'status': 'unhealthy',
                'timestamp': datetime.now(timezone.utc).isoformat(),
                'message': e.message,
            }
        timestamp = payload.get('timestamp') if isinstance(payload, dict) else None
        return {
            'status': 'healthy',
            'timestamp': timestamp or datetime.now(timezone.utc).isoformat(),
            'message': 'API is responding correctly',
        }

    async def _request(self, path: str, params: Optional[Dict[str, str]] = None) -> Any:
        """Issue a GET with retries and return the unwrapped payload."""
        for attempt in range(self.max_retries + 1):
            try:
                return self._unwrap(await self._request_once(path, params))
            except APIError as e:
                if not e.retryable:
                    raise
                if attempt == self.max_retries:
                    logger.error(f"Request to {path} failed after {attempt + 1} attempts: {e.message}")
                    raise

                delay = self.retry_delay * 2 ** attempt
                logger.warning(
                    f"Request to {path} failed: {e.message}. "
                    f"Retrying in {delay}s ({attempt + 1}/{self.max_retries})"
                )
                await self._sleep(delay)

        raise APIError("Unknown error in retry logic")

    async def _request_once(self, path: str, params: Optional[Dict[str, str]] = None) -> Any:
        try:
            response = await self._client.get(path, params=params)
        except httpx.TimeoutException as e:
            raise RequestTimeoutError(f"Request timeout: {path}") from e
        except httpx.TransportError as e:
            raise NetworkError(f"Network error: {e}") from e

        status = response.status_code
        if status >= 400:
            message = self._error_message(response)
            if status >= 500:
                raise ServerError(message, status_code=status)
            if status == 404:
                raise NotFoundError(message, status_code=status)
            raise ClientError(message, status_code=status)

        try:
            return response.json()
        except ValueError as e:
            raise DataShapeError(f"Invalid JSON from {path}") from e

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            body = response.json()
            error = body.get('error') if isinstance(body, dict) else None
            if isinstance(error, dict) and error.get('message'):
                return str(error['message'])
        except ValueError:
            pass
        return f"HTTP error! status: {response.status_code}"

    @staticmethod
    def _unwrap(payload: Any) -> Any:
        """Return the data of an envelope, or the payload itself if it is bare."""
        if isinstance(payload, dict) and 'success' in payload:
            if payload.get('success') is False:
                error = payload.get('error') or {}
                message = error.get('message') if isinstance(error, dict) else None
                # The server answered, so success: false is never retried
                raise ClientError(message or 'API reported failure')
            if 'data' in payload:
                return payload['data']
        return payload

    def _convert_events(self, payload: Any) -> List[Event]:
        if not isinstance(payload, list):
            raise DataShapeError(f"Expected a list of events, received {type(payload).__name__}")

        events = []
        dropped = 0
        for record in payload:
            try:
                event = self._convert_to_event(record)
            except ValueError as e:
                dropped += 1
                logger.warning(f"Dropping event record: {e}")
                continue
            if not event.is_active:
                logger.info(f"Dropping inactive event {event.id}")
                continue
            events.append(event)

        if payload and dropped == len(payload):
            raise DataShapeError(f"All {dropped} event records were invalid")
        return events

    @staticmethod
    def _convert_to_event(data: Any) -> Event:
        """
        Convert API event data to an Event.

        Raises:
            ValueError: If a required field is missing or invalid
        """
        if not isinstance(data, dict):
            raise ValueError(f"record is not an object: {data!r}")

        missing = [name for name in REQUIRED_EVENT_FIELDS if data.get(name) in (None, '')]
        if missing:
            raise ValueError(f"missing required fields: {', '.join(missing)}")

        event_id = parse_positive_int(data['id'])
        if event_id is None:
            raise ValueError(f"invalid id: {data['id']!r}")
        date_time = parse_datetime(data['date_time'])
        if date_time is None:
            raise ValueError(f"invalid date_time for event {event_id}: {data['date_time']!r}")

        return Event(
            id=event_id,
            name=str(data['name']),
            date_time=date_time,
            location=str(data['location']),
            short_description=str(data.get('short_description') or ''),
            full_description=str(data.get('full_description') or ''),
            address=str(data.get('address') or ''),
            category_id=int(_to_float(data.get('category_id'))),
            category_name=str(data.get('category_name') or UNCATEGORIZED),
            ticket_price=_to_float(data.get('ticket_price')),
            ticket_type='paid' if data.get('ticket_type') == 'paid' else 'free',
            goal_amount=_to_float(data.get('goal_amount')),
            current_amount=_to_float(data.get('current_amount')),
            is_active=data.get('is_active', True) not in (False, 'false'),
            max_attendees=_to_capacity(data.get('max_attendees')),
            created_at=parse_datetime(data.get('created_at')),
            updated_at=parse_datetime(data.get('updated_at')),
        )

    def _convert_categories(self, payload: Any) -> List[Category]:
        if not isinstance(payload, list):
            raise DataShapeError(f"Expected a list of categories, received {type(payload).__name__}")

        categories = []
        for record in payload:
            category_id = parse_positive_int(record.get('id')) if isinstance(record, dict) else None
            if category_id is None or not record.get('name'):
                logger.warning(f"Dropping category record: {record!r}")
                continue
            categories.append(Category(
                id=category_id,
                name=str(record['name']),
                description=str(record.get('description') or ''),
                created_at=parse_datetime(record.get('created_at')),
                updated_at=parse_datetime(record.get('updated_at')),
            ))
        return categories
