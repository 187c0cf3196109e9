"""Formatting helpers shared by the web client pages.

All functions here are pure: they take plain values and return strings or
numbers, so templates and page controllers can use them freely.
"""

import math
import re
from datetime import date, datetime
from typing import Optional, Union

from markupsafe import Markup, escape

Number = Union[int, float]

# Date display styles, mirroring the en-US formats the site uses
DATE_STYLES = {
    'full': '{weekday}, {month} {day}, {year}, {time}',
    'short': '{weekday_short}, {month_short} {day}, {year}, {time}',
    'day': '{weekday_short}, {month_short} {day}, {year}',
    'long_day': '{weekday}, {month} {day}, {year}',
}


def calculate_progress(current: Optional[Number], goal: Optional[Number]) -> int:
    """
    Percentage of a fundraising goal reached.

    Returns 0 when there is no goal, otherwise the rounded (half up)
    percentage clamped to [0, 100].
    """
    if not goal or goal <= 0:
        return 0
    ratio = (current or 0) / goal * 100
    if math.isnan(ratio):
        return 0
    return max(0, min(100, math.floor(ratio + 0.5)))


def format_currency(amount: Optional[Number], symbol: str = '$') -> str:
    """Format an amount as US-style currency, e.g. ``$1,234.50``."""
    try:
        value = float(amount or 0)
    except (TypeError, ValueError):
        value = 0.0
    if math.isnan(value):
        value = 0.0
    sign = '-' if value < 0 else ''
    return f"{sign}{symbol}{abs(value):,.2f}"


def format_price(amount: Optional[Number]) -> str:
    """Ticket price label: ``Free`` for zero, currency otherwise."""
    if not amount:
        return 'Free'
    return format_currency(amount)


def format_date(value: Optional[Union[datetime, date]], style: str = 'full') -> str:
    """
    Format a date or datetime for display.

    Args:
        value: The date to format
        style: One of the keys of DATE_STYLES

    Returns:
        str: The formatted date, or 'Invalid Date' if value is not a date
    """
    if not isinstance(value, date):
        return 'Invalid Date'

    template = DATE_STYLES.get(style, DATE_STYLES['full'])
    time_label = ''
    if isinstance(value, datetime):
        time_label = value.strftime('%I:%M %p')
    return template.format(
        weekday=value.strftime('%A'),
        weekday_short=value.strftime('%a'),
        month=value.strftime('%B'),
        month_short=value.strftime('%b'),
        day=value.day,
        year=value.year,
        time=time_label,
    ).rstrip(', ')


def escape_html(text: Optional[str]) -> Markup:
    """HTML-escape text; None becomes an empty string."""
    if not text:
        return Markup('')
    return escape(text)


def highlight_match(text: Optional[str], term: Optional[str], tag: str = 'mark') -> Markup:
    """
    Escape text and wrap every case-insensitive occurrence of term in a tag.

    The term is matched literally: regex metacharacters are escaped before
    the pattern is built.
    """
    if not text:
        return Markup('')
    term = (term or '').strip()
    if not term:
        return escape(text)

    pattern = re.compile(f"({re.escape(term)})", re.IGNORECASE)
    parts = []
    for index, piece in enumerate(pattern.split(text)):
        if index % 2:
            parts.append(Markup(f'<{tag}>{escape(piece)}</{tag}>'))
        else:
            parts.append(escape(piece))
    return Markup('').join(parts)


def truncate(text: Optional[str], length: int = 1000) -> str:
    """Trim text to length characters, appending an ellipsis when cut."""
    if not text:
        return ''
    if len(text) <= length:
        return text
    return text[:length].rstrip() + '...'
