"""Home page controller: the list of all events with search, sort and view toggles."""

import asyncio
import logging
from typing import List, Optional

from ...utils.timers import Debouncer
from ..filters import filter_by_query, sort_events
from ..models import Category, Event, SortCriteria
from ..storage import HOME_STATE_KEY
from ..viewmodels import HomeView, event_card
from .base import BasePage, PageState

logger = logging.getLogger(__name__)

MOBILE_BREAKPOINT = 768
SEARCH_DEBOUNCE = 0.3
RESIZE_DEBOUNCE = 0.25
VIEW_MODES = ('grid', 'list')

EMPTY_MESSAGE = (
    'There are no upcoming events at the moment. '
    'Please check back later for new opportunities to make a difference.'
)


class HomePage(BasePage):
    """
    Controller for the home page.

    Example:
        page = HomePage(api, storage=storage, renderer=renderer)
        await page.init()
        page.set_sort_option('price_desc')
        page.close()
    """

    def __init__(self, api=None, **kwargs):
        super().__init__(api, **kwargs)
        self.events: List[Event] = []
        self.categories: List[Category] = []
        self.visible_events: List[Event] = []
        self.search_query = ''
        self.sort = SortCriteria()
        self.preferred_view = 'grid'
        self.viewport_width: Optional[int] = None
        self._loaded = False
        self._search_debouncer = self._own(Debouncer(SEARCH_DEBOUNCE, self.set_search_query))
        self._resize_debouncer = self._own(Debouncer(RESIZE_DEBOUNCE, self.set_viewport_width))

    @property
    def view_mode(self) -> str:
        """The mode actually rendered; narrow viewports always get the list."""
        if self.viewport_width is not None and self.viewport_width < MOBILE_BREAKPOINT:
            return 'list'
        return self.preferred_view

    @property
    def empty_message(self) -> str:
        if self.search_query:
            return f'No events found matching "{self.search_query}". Try adjusting your search criteria.'
        return EMPTY_MESSAGE

    async def init(self) -> None:
        if not await self._wait_for_dependencies():
            return
        self._restore_state()
        await self.load()

    async def load(self) -> None:
        """Fetch events and categories, then rebuild the visible list."""
        self._set_state(PageState.LOADING)
        self.render()
        try:
            events, categories = await asyncio.gather(
                self.api.fetch_events(),
                self.api.fetch_categories(),
            )
        except Exception as e:
            self._loaded = False
            self._fail(e)
            self.render()
            return

        self.events = events
        self.categories = categories
        self._loaded = True
        logger.info(f"Home page loaded {len(events)} events")
        self._recompute()

    async def retry(self) -> None:
        if self.api is None and not await self._wait_for_dependencies():
            return
        await self.load()

    async def refresh(self) -> None:
        await self.retry()

    def set_search_query(self, query: Optional[str]) -> None:
        self.search_query = (query or '').strip()
        self._save_state()
        self._recompute()

    def on_search_input(self, text: str) -> None:
        self._search_debouncer.schedule(text)

    def set_sort(self, sort: SortCriteria) -> None:
        self.sort = sort
        self._save_state()
        self._recompute()

    def set_sort_option(self, option: Optional[str]) -> None:
        self.set_sort(SortCriteria.from_option(option, self.sort))

    def set_view(self, mode: str) -> None:
        """Switch between grid and list without refetching."""
        if mode not in VIEW_MODES:
            logger.warning(f"Ignoring unknown view mode: {mode}")
            return
        self.preferred_view = mode
        self._save_state()
        self.render()

    def set_viewport_width(self, width: Optional[int]) -> None:
        self.viewport_width = width
        self.render()

    def on_resize(self, width: int) -> None:
        self._resize_debouncer.schedule(width)

    def _recompute(self) -> None:
        if not self._loaded:
            return
        matching = filter_by_query(self.events, self.search_query)
        self.visible_events = sort_events(matching, self.sort)
        self._set_state(PageState.READY if self.visible_events else PageState.EMPTY)
        self.render()

    def _save_state(self) -> None:
        self.storage.set(HOME_STATE_KEY, {
            'query': self.search_query,
            'sort': self.sort.option,
            'view': self.preferred_view,
        })

    def _restore_state(self) -> None:
        state = self.storage.get(HOME_STATE_KEY)
        if not isinstance(state, dict):
            return
        query = state.get('query')
        self.search_query = query.strip() if isinstance(query, str) else ''
        self.sort = SortCriteria.from_option(state.get('sort'))
        if state.get('view') in VIEW_MODES:
            self.preferred_view = state['view']

    def build_view(self) -> HomeView:
        message = None
        if self.state == PageState.ERROR:
            message = self.error_message
        elif self.state == PageState.EMPTY:
            message = self.empty_message
        return HomeView(
            state=self.state.value,
            cards=[event_card(event) for event in self.visible_events],
            view_mode=self.view_mode,
            sort_option=self.sort.option,
            query=self.search_query,
            message=message,
            total_count=len(self.events),
            categories=list(self.categories),
        )
