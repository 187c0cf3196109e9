"""Page controllers for the web client."""

from .base import BasePage, PageState, Renderer
from .event import EventPage, RegistrationDialog
from .home import HomePage
from .search import SearchPage

__all__ = [
    'BasePage',
    'PageState',
    'Renderer',
    'HomePage',
    'SearchPage',
    'EventPage',
    'RegistrationDialog',
]
