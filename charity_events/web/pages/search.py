"""Search page controller: server-side search with a client-side fallback."""

import logging
from typing import Any, List, Optional

from ...utils.formatting import format_date
from ..errors import ValidationError
from ..filters import apply_filters, filter_by_query, sort_events
from ..models import Category, Event, FilterCriteria, SortCriteria
from ..storage import add_recent_search, get_recent_searches, load_search_state, save_search_state
from ..viewmodels import SearchView, event_card
from .base import BasePage, PageState

logger = logging.getLogger(__name__)

FILTER_FIELDS = ('date', 'location', 'category')
NO_RESULTS_MESSAGE = 'No events found matching your search criteria. Try adjusting your filters or search terms.'


class SearchPage(BasePage):
    """
    Controller for the search page.

    has_searched separates the idle page (no search run yet, or filters
    cleared) from a search that returned nothing; both are in the EMPTY state.
    """

    error_context = 'search'

    def __init__(self, api=None, **kwargs):
        super().__init__(api, **kwargs)
        self.filters = FilterCriteria()
        self.query = ''
        self.sort = SortCriteria()
        self.categories: List[Category] = []
        self.categories_available = False
        self.results: List[Event] = []
        self.visible_results: List[Event] = []
        self.has_searched = False
        self.used_fallback = False

    async def init(self, auto_search: bool = True) -> None:
        """
        Load categories, restore the last search and rerun it.

        With auto_search False the restored filters are kept but not searched.
        """
        if not await self._wait_for_dependencies():
            return
        await self._load_categories()
        self.filters, self.query, self.sort = load_search_state(self.storage)
        if auto_search and not self.filters.is_empty():
            await self.search()
        else:
            self._set_state(PageState.EMPTY)
            self.render()

    async def _load_categories(self) -> None:
        try:
            self.categories = await self.api.fetch_categories()
        except Exception as e:
            logger.warning(f"Categories unavailable, disabling category filter: {e}")
            self.categories = []
        self.categories_available = bool(self.categories)

    async def apply_filters(self, date: Any = None, location: Any = None, category: Any = None) -> None:
        """
        Validate raw filter input, persist it and search.

        Invalid input puts the page in the error state without a request.
        When every filter is empty the results are cleared instead.
        """
        try:
            criteria = FilterCriteria.from_raw(date=date, location=location, category=category)
        except ValidationError as e:
            self._fail(e)
            self.render()
            return

        self.filters = criteria
        self._save_state()
        if criteria.is_empty():
            self._clear_results()
            return
        await self.search()

    async def on_filter_change(self, field: str, value: Any) -> None:
        """Change one filter, keeping the others, then apply."""
        if field not in FILTER_FIELDS:
            raise ValueError(f"Unknown filter: {field}")
        raw = self.filters.to_dict()
        raw[field] = value
        await self.apply_filters(**raw)

    async def search(self) -> None:
        """
        Run the current filters on the server.

        If the server search fails, every event is fetched and filtered
        locally; the page only errors when both fail.
        """
        criteria = self.filters
        self._set_state(PageState.LOADING)
        self.render()

        try:
            events = await self.api.search_events(criteria)
            used_fallback = False
        except Exception as search_error:
            logger.warning(f"Server search failed ({search_error}), filtering locally")
            try:
                events = apply_filters(await self.api.fetch_events(), criteria)
                used_fallback = True
            except Exception as fallback_error:
                logger.error(f"Client-side search failed: {fallback_error}")
                self.has_searched = True
                self.results = []
                self.visible_results = []
                self._fail(search_error)
                self.render()
                return

        self.results = events
        self.used_fallback = used_fallback
        self.has_searched = True
        add_recent_search(self.storage, criteria)
        self._recompute()

    def set_query(self, query: Optional[str]) -> None:
        """Narrow the current results by free text."""
        self.query = (query or '').strip()
        self._save_state()
        self._refresh_results()

    def set_sort(self, sort: SortCriteria) -> None:
        self.sort = sort
        self._save_state()
        self._refresh_results()

    def set_sort_option(self, option: Optional[str]) -> None:
        self.set_sort(SortCriteria.from_option(option, self.sort))

    def clear_filters(self) -> None:
        """Reset filters and results and return to the idle page."""
        self.filters = FilterCriteria()
        self.query = ''
        self._save_state()
        self._clear_results()

    def _clear_results(self) -> None:
        self.results = []
        self.visible_results = []
        self.has_searched = False
        self.used_fallback = False
        self._set_state(PageState.EMPTY)
        self.render()

    def _refresh_results(self) -> None:
        if self.state != PageState.ERROR:
            self._recompute()

    def _recompute(self) -> None:
        if not self.has_searched:
            return
        matching = filter_by_query(self.results, self.query)
        self.visible_results = sort_events(matching, self.sort)
        self._set_state(PageState.READY if self.visible_results else PageState.EMPTY)
        self.render()

    def _save_state(self) -> None:
        save_search_state(self.storage, self.filters, self.query, self.sort)

    def category_name(self, category_id: Optional[int]) -> Optional[str]:
        for category in self.categories:
            if category.id == category_id:
                return category.name
        return None

    @property
    def empty_message(self) -> str:
        """Name the active filters so the user knows what to loosen."""
        active = []
        if self.filters.date:
            active.append('date')
        if self.filters.location:
            active.append('location')
        if self.filters.category is not None:
            active.append(self.category_name(self.filters.category) or 'category')

        if active:
            return (
                f"No events found matching your current filters: {', '.join(active)}. "
                "Try adjusting your search criteria."
            )
        return NO_RESULTS_MESSAGE

    @property
    def summary(self) -> str:
        """E.g. '3 events found on Wednesday, October 15, 2025 in park'."""
        count = len(self.visible_results)
        text = '1 event found' if count == 1 else f"{count} events found"

        descriptions = []
        if self.filters.date:
            descriptions.append(f"on {format_date(self.filters.date, 'long_day')}")
        if self.filters.location:
            descriptions.append(f"in {self.filters.location}")
        category_name = self.category_name(self.filters.category)
        if category_name:
            descriptions.append(f"in {category_name} category")
        if self.query:
            descriptions.append(f'matching "{self.query}"')
        return ' '.join([text] + descriptions)

    def build_view(self) -> SearchView:
        message = None
        if self.state == PageState.ERROR:
            message = self.error_message
        elif self.state == PageState.EMPTY and self.has_searched:
            message = self.empty_message

        return SearchView(
            state=self.state.value,
            has_searched=self.has_searched,
            cards=[event_card(event, highlight=self.filters.location) for event in self.visible_results],
            filters=self.filters,
            query=self.query,
            sort_option=self.sort.option,
            summary=self.summary if self.has_searched and self.state != PageState.ERROR else '',
            message=message,
            used_fallback=self.used_fallback,
            categories=list(self.categories),
            categories_available=self.categories_available,
            recent_searches=get_recent_searches(self.storage),
        )
