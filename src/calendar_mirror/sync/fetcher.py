"""Paginated, incremental retrieval of source calendar events."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from ..models.event import SourceEvent
from ..readers.base import CalendarReader
from ..state.cursor_store import CursorStore, cursor_key
from ..utils.date_utils import get_full_sync_start, to_rfc3339
from ..utils.exceptions import CursorInvalidError

logger = logging.getLogger(__name__)

EventCallback = Callable[[str, SourceEvent], None]

DEFAULT_PAGE_SIZE = 100
DEFAULT_LOOKBACK_DAYS = 30


class FetchMode(str, Enum):
    """Fetch state. INCREMENTAL falls back to FULL_RESYNC at most once."""

    INCREMENTAL = "incremental"
    FULL_RESYNC = "full_resync"


@dataclass
class FetchStats:
    """What one fetch did."""

    mode: FetchMode = FetchMode.INCREMENTAL
    pages: int = 0
    events_dispatched: int = 0
    events_filtered: int = 0
    cursor_reset: bool = False
    cursor_stored: bool = False


class EventFetcher:
    """Streams changed events of a source calendar to a callback."""

    def __init__(
        self,
        reader: CalendarReader,
        cursor_store: CursorStore,
        page_size: int = DEFAULT_PAGE_SIZE,
        lookback_days: int = DEFAULT_LOOKBACK_DAYS,
        timezone: Optional[str] = None,
    ):
        self.reader = reader
        self.cursor_store = cursor_store
        self.page_size = page_size
        self.lookback_days = lookback_days
        self.timezone = timezone

    def fetch(
        self,
        calendar_id: str,
        on_event: EventCallback,
        force_full_sync: bool = False,
        persist_cursor: bool = True,
    ) -> FetchStats:
        """
        Fetch events of a calendar and invoke ``on_event`` for each, in page order.

        With a stored cursor the fetch is incremental, otherwise it covers
        everything from ``lookback_days`` ago onwards. The new cursor is
        stored only after the last page has been dispatched.

        Args:
            calendar_id: Source calendar ID
            on_event: Called as ``on_event(calendar_id, event)``
            force_full_sync: Ignore any stored cursor
            persist_cursor: Store the cursor returned by the listing

        Returns:
            FetchStats for the run

        Raises:
            CalendarReadError: If listing fails for any reason other than a
                rejected cursor. Nothing is stored in that case.
        """
        key = cursor_key(calendar_id)
        cursor = None if force_full_sync else self.cursor_store.get(key)
        mode = FetchMode.INCREMENTAL if cursor else FetchMode.FULL_RESYNC

        stats = FetchStats(mode=mode)
        # event id -> updated stamp, for everything already handed to on_event
        dispatched: dict[str, Optional[str]] = {}

        while True:
            try:
                next_cursor = self._drain(
                    calendar_id, on_event, cursor, stats, dispatched
                )
                break
            except CursorInvalidError:
                if mode is FetchMode.FULL_RESYNC:
                    raise
                logger.warning(
                    f"Sync token for {calendar_id} is no longer valid, "
                    "restarting with a full sync"
                )
                self.cursor_store.delete(key)
                cursor = None
                mode = stats.mode = FetchMode.FULL_RESYNC
                stats.cursor_reset = True

        if not persist_cursor:
            return stats
        if next_cursor:
            self.cursor_store.set(key, next_cursor)
            stats.cursor_stored = True
        else:
            logger.warning(f"Listing of {calendar_id} returned no sync token, cursor not stored")
        return stats

    def _drain(
        self,
        calendar_id: str,
        on_event: EventCallback,
        cursor: Optional[str],
        stats: FetchStats,
        dispatched: dict[str, Optional[str]],
    ) -> Optional[str]:
        """Follow the page-token chain to the end. Returns the terminal sync token."""
        time_min = None
        if cursor is None:
            time_min = to_rfc3339(
                get_full_sync_start(self.lookback_days, timezone=self.timezone)
            )
            logger.info(f"Full sync of {calendar_id} from {time_min}")
        else:
            logger.info(f"Incremental sync of {calendar_id}")

        page_token = None
        next_cursor = None
        while True:
            page = self.reader.list_events(
                calendar_id,
                page_size=self.page_size,
                sync_token=cursor,
                time_min=time_min,
                page_token=page_token,
            )
            stats.pages += 1

            for event in page.items:
                if event.is_out_of_office:
                    stats.events_filtered += 1
                    continue
                if event.id in dispatched and dispatched[event.id] == event.updated:
                    logger.debug(f"Skipping {event.id}, already handled before the restart")
                    continue
                on_event(calendar_id, event)
                dispatched[event.id] = event.updated
                stats.events_dispatched += 1

            next_cursor = page.next_sync_token
            page_token = page.next_page_token
            if not page_token:
                return next_cursor
