from datetime import date, datetime

import pytest
from markupsafe import Markup

from charity_events.utils.formatting import (
    calculate_progress,
    escape_html,
    format_currency,
    format_date,
    format_price,
    highlight_match,
    truncate,
)


def test_progress_is_zero_without_goal():
    assert calculate_progress(500, 0) == 0
    assert calculate_progress(500, None) == 0


def test_progress_rounds_half_up_and_clamps():
    assert calculate_progress(6500, 10000) == 65
    assert calculate_progress(1, 200) == 1  # 0.5 rounds up
    assert calculate_progress(15000, 10000) == 100
    assert calculate_progress(-50, 100) == 0


def test_progress_is_monotonic_in_current():
    values = [calculate_progress(current, 777) for current in range(0, 1000, 7)]
    assert values == sorted(values)
    assert all(0 <= value <= 100 for value in values)


def test_format_currency():
    assert format_currency(1234.5) == '$1,234.50'
    assert format_currency(0) == '$0.00'
    assert format_currency(None) == '$0.00'
    assert format_currency(float('nan')) == '$0.00'


def test_format_price_shows_free_for_zero():
    assert format_price(0) == 'Free'
    assert format_price(25) == '$25.00'


def test_format_date_styles():
    value = datetime(2025, 10, 15, 8, 0)
    assert format_date(value) == 'Wednesday, October 15, 2025, 08:00 AM'
    assert format_date(value, 'short') == 'Wed, Oct 15, 2025, 08:00 AM'
    assert format_date(date(2025, 10, 15), 'long_day') == 'Wednesday, October 15, 2025'
    assert format_date('2025-10-15') == 'Invalid Date'


def test_escape_html():
    assert escape_html('<b>&</b>') == '&lt;b&gt;&amp;&lt;/b&gt;'
    assert escape_html(None) == ''


def test_highlight_match_escapes_and_marks():
    result = highlight_match('City Park <Main>', 'park')
    assert isinstance(result, Markup)
    assert result == 'City <mark>Park</mark> &lt;Main&gt;'


def test_highlight_match_treats_term_literally():
    assert highlight_match('Cost (USD) and (usd)', '(usd)') == 'Cost <mark>(USD)</mark> and <mark>(usd)</mark>'
    assert highlight_match('a.b', '.') == 'a<mark>.</mark>b'


@pytest.mark.parametrize('term', [None, '', '   '])
def test_highlight_match_without_term_only_escapes(term):
    assert highlight_match('<Park>', term) == '&lt;Park&gt;'


def test_truncate():
    assert truncate('short', 10) == 'short'
    assert truncate('a long sentence here', 6) == 'a long...'
    assert truncate(None) == ''
