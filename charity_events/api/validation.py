"""Request parameter validation for the events API."""

from datetime import date, datetime
from typing import Optional

from .errors import ValidationError

MAX_LOCATION_LENGTH = 100
MAX_LIMIT = 100


def parse_positive_int(value: Optional[str], label: str) -> int:
    """Parse a path or query value as a positive integer."""
    try:
        number = int(str(value).strip())
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid {label}. Must be a positive integer.")
    if number <= 0:
        raise ValidationError(f"Invalid {label}. Must be a positive integer.")
    return number


def parse_limit(value: Optional[int], default: int) -> int:
    if value is None:
        return default
    if value < 1 or value > MAX_LIMIT:
        raise ValidationError(f"Invalid limit. Must be between 1 and {MAX_LIMIT}.")
    return value


def parse_search_params(
    date_param: Optional[str],
    location: Optional[str],
    category: Optional[str],
) -> dict:
    """
    Validate and normalize search query parameters.

    Empty parameters are ignored. All problems are reported together.

    Returns:
        dict with any of 'on_date', 'location', 'category_id'

    Raises:
        ValidationError: If any present parameter is malformed
    """
    errors = []
    params = {}

    if date_param:
        try:
            params['on_date'] = datetime.strptime(date_param.strip(), '%Y-%m-%d').date()
        except ValueError:
            errors.append('Invalid date format. Use YYYY-MM-DD.')

    if location and location.strip():
        if len(location) > MAX_LOCATION_LENGTH:
            errors.append(f'Location must be less than {MAX_LOCATION_LENGTH} characters.')
        else:
            params['location'] = location.strip()

    if category:
        try:
            params['category_id'] = parse_positive_int(category, 'category ID')
        except ValidationError as e:
            errors.append(e.message)

    if errors:
        raise ValidationError(' '.join(errors))
    return params
