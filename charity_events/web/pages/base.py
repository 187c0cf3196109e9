"""Shared lifecycle for page controllers.

A page controller is created once per page load, waits for its API client,
loads data, derives a view model and hands it to a renderer. close() cancels
every timer the page owns.
"""

import asyncio
import logging
from enum import Enum
from typing import Any, Callable, List, Optional, Protocol

from ..api import EventAPIClient
from ..errors import user_message
from ..storage import MappingStorage, Storage

logger = logging.getLogger(__name__)

DEPENDENCY_TIMEOUT = 5.0
DEPENDENCY_POLL_INTERVAL = 0.1
DEPENDENCY_MESSAGE = 'Unable to initialize the page. Please refresh and try again.'


class PageState(str, Enum):
    INITIALIZING = 'initializing'
    LOADING = 'loading'
    ERROR = 'error'
    EMPTY = 'empty'
    READY = 'ready'


class Renderer(Protocol):
    """Display surface a page draws its view models on."""

    def render(self, view: Any) -> None:
        ...

    def render_progress(self, progress: Any) -> None:
        ...


class BasePage:
    """Common state handling for the Home, Search and Event pages."""

    error_context = 'events'

    def __init__(
        self,
        api: Optional[EventAPIClient] = None,
        *,
        api_provider: Optional[Callable[[], Optional[EventAPIClient]]] = None,
        storage: Optional[Storage] = None,
        renderer: Optional[Renderer] = None,
        dependency_timeout: float = DEPENDENCY_TIMEOUT,
    ):
        self.api = api
        self.storage = storage if storage is not None else MappingStorage({})
        self.renderer = renderer
        self.state = PageState.INITIALIZING
        self.error: Optional[Exception] = None
        self.error_message: Optional[str] = None
        self.dependency_timeout = dependency_timeout
        self._api_provider = api_provider
        self._timers: List[Any] = []
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    async def _wait_for_dependencies(self) -> bool:
        """Poll the provider for an API client until one appears or time runs out."""
        loop = asyncio.get_running_loop()
        deadline = loop.time() + self.dependency_timeout
        while self.api is None:
            if self._api_provider is not None:
                self.api = self._api_provider()
                if self.api is not None:
                    break
            if loop.time() >= deadline:
                logger.error(f"{type(self).__name__}: API client not available after {self.dependency_timeout}s")
                self.error = None
                self.error_message = DEPENDENCY_MESSAGE
                self._set_state(PageState.ERROR)
                self.render()
                return False
            await asyncio.sleep(DEPENDENCY_POLL_INTERVAL)
        return True

    def _set_state(self, state: PageState) -> None:
        if state != self.state:
            logger.debug(f"{type(self).__name__}: {self.state.value} -> {state.value}")
        self.state = state
        if state != PageState.ERROR:
            self.error = None
            self.error_message = None

    def _fail(self, error: Exception) -> None:
        """Enter the error state with a user-facing message for error."""
        logger.error(f"{type(self).__name__} failed: {error}")
        self._set_state(PageState.ERROR)
        self.error = error
        self.error_message = user_message(error, self.error_context)

    def _own(self, timer):
        """Register a timer so close() cancels it."""
        self._timers.append(timer)
        return timer

    def build_view(self) -> Any:
        raise NotImplementedError

    def render(self) -> Any:
        view = self.build_view()
        if self.renderer is not None and not self._closed:
            self.renderer.render(view)
        return view

    def close(self) -> None:
        """Cancel every owned timer; the page must not be used afterwards."""
        for timer in self._timers:
            timer.cancel()
        self._closed = True
