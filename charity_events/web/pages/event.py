"""Event detail page controller and its registration dialog."""

import logging
from typing import Any, List, Mapping, Optional, Sequence

from ...utils.timers import PeriodicTimer
from ..errors import ValidationError
from ..models import Event, parse_positive_int
from ..viewmodels import SITE_NAME, EventView, ProgressView, event_detail, progress_view
from .base import BasePage, PageState

logger = logging.getLogger(__name__)

PROGRESS_REFRESH_INTERVAL = 5.0
INVALID_ID_MESSAGE = 'Invalid event ID provided. Please check the link and try again.'
DIALOG_CONTROLS = ('registration-name', 'registration-email', 'registration-submit', 'registration-close')


class RegistrationDialog:
    """
    Modal registration dialog with a focus trap.

    While open, Tab and Shift+Tab cycle through the dialog's own controls,
    Escape closes it, and page scroll is locked. Closing returns focus to the
    control that opened it.
    """

    def __init__(self, focusable: Sequence[str] = DIALOG_CONTROLS):
        self.focusable: List[str] = list(focusable)
        self.is_open = False
        self.scroll_locked = False
        self.focused: Optional[str] = None
        self.trigger: Optional[str] = None

    def open(self, trigger: Optional[str] = None) -> None:
        self.trigger = trigger
        self.is_open = True
        self.scroll_locked = True
        self.focused = self.focusable[0] if self.focusable else None

    def close(self) -> None:
        if not self.is_open:
            return
        self.is_open = False
        self.scroll_locked = False
        self.focused = self.trigger
        self.trigger = None

    def focus(self, control: str) -> None:
        if self.is_open and control in self.focusable:
            self.focused = control

    def handle_key(self, key: str, shift: bool = False) -> bool:
        """Handle a key press; returns True when the dialog consumed it."""
        if not self.is_open:
            return False
        if key == 'Escape':
            self.close()
            return True
        if key != 'Tab' or not self.focusable:
            return False

        count = len(self.focusable)
        if self.focused in self.focusable:
            index = self.focusable.index(self.focused)
        else:
            index = 0 if shift else -1
        step = -1 if shift else 1
        self.focused = self.focusable[(index + step) % count]
        return True


class EventPage(BasePage):
    """
    Controller for the event detail page.

    The event ID comes from the page's query parameters. Events with a
    fundraising goal get their progress refreshed every five seconds while
    the page is open.
    """

    error_context = 'event'

    def __init__(self, api=None, query_params: Optional[Mapping[str, Any]] = None,
                 poll_progress: bool = True, site_name: str = SITE_NAME, **kwargs):
        super().__init__(api, **kwargs)
        self.query_params = query_params or {}
        self.poll_progress = poll_progress
        self.site_name = site_name
        self.event_id: Optional[int] = None
        self.event: Optional[Event] = None
        self.dialog = RegistrationDialog()
        self._progress_timer = self._own(PeriodicTimer(PROGRESS_REFRESH_INTERVAL, self.refresh_progress))

    @property
    def title(self) -> str:
        if self.event is not None and self.state == PageState.READY:
            return f"{self.event.name} - {self.site_name}"
        return f"Event Details - {self.site_name}"

    async def init(self) -> None:
        if not await self._wait_for_dependencies():
            return

        self.event_id = parse_positive_int(self.query_params.get('id'))
        if self.event_id is None:
            logger.warning(f"Invalid event id in query: {self.query_params.get('id')!r}")
            self._fail(ValidationError('Invalid event ID provided'))
            self.error_message = INVALID_ID_MESSAGE
            self.render()
            return

        await self.load()

    async def load(self) -> None:
        self._progress_timer.cancel()
        self._set_state(PageState.LOADING)
        self.render()
        try:
            event = await self.api.fetch_event_by_id(self.event_id)
        except Exception as e:
            self._fail(e)
            self.render()
            return

        self.event = event
        self._set_state(PageState.READY)
        logger.info(f"Loaded event {event.id}: {event.name}")
        self.render()

        if self.poll_progress and event.has_goal and not self.closed:
            self._progress_timer.start()

    async def reload(self) -> None:
        if self.event_id is None:
            await self.init()
        else:
            await self.load()

    async def refresh_progress(self) -> Optional[ProgressView]:
        """Re-fetch the event and re-render only its progress; failures are logged."""
        if self.event_id is None:
            return None
        try:
            event = await self.api.fetch_event_by_id(self.event_id)
        except Exception as e:
            logger.warning(f"Progress refresh for event {self.event_id} failed: {e}")
            return None

        self.event = event
        progress = progress_view(event)
        if self.renderer is not None and not self.closed:
            self.renderer.render_progress(progress)
        return progress

    def open_registration(self, trigger: str = 'register-button') -> None:
        if self.state != PageState.READY:
            return
        self.dialog.open(trigger)
        self.render()

    def close_registration(self) -> None:
        self.dialog.close()
        self.render()

    def handle_keydown(self, key: str, shift: bool = False) -> bool:
        was_open = self.dialog.is_open
        handled = self.dialog.handle_key(key, shift)
        if was_open and not self.dialog.is_open:
            self.render()
        return handled

    def build_view(self) -> EventView:
        detail = None
        if self.state == PageState.READY and self.event is not None:
            detail = event_detail(self.event)
        return EventView(
            state=self.state.value,
            title=self.title,
            detail=detail,
            message=self.error_message if self.state == PageState.ERROR else None,
            dialog_open=self.dialog.is_open,
        )

    def close(self) -> None:
        self.dialog.close()
        super().close()
