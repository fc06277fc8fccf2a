"""Abstract base class for calendar readers."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional

from ..models.event import MirroredEvent, SourceEvent


@dataclass
class EventPage:
    """One page of an event listing."""

    items: list[SourceEvent] = field(default_factory=list)
    next_page_token: Optional[str] = None
    # Only present on the last page of a listing
    next_sync_token: Optional[str] = None


class CalendarReader(ABC):
    """Abstract base class for calendar readers."""

    @abstractmethod
    def list_events(
        self,
        calendar_id: str,
        page_size: int,
        sync_token: Optional[str] = None,
        time_min: Optional[str] = None,
        page_token: Optional[str] = None,
    ) -> EventPage:
        """
        Read one page of events from a calendar.

        Args:
            calendar_id: Calendar ID
            page_size: Maximum number of events on the page
            sync_token: Cursor from a previous listing (incremental sync)
            time_min: RFC 3339 lower bound, used when no cursor is given
            page_token: Token of the page to fetch

        Returns:
            EventPage with the events and continuation tokens

        Raises:
            CursorInvalidError: If the sync token is no longer accepted
            CalendarReadError: If reading events fails
        """

    @abstractmethod
    def get_event(self, event_id: str, calendar_id: str = "primary") -> Optional[MirroredEvent]:
        """
        Get a specific event by ID.

        Args:
            event_id: Event identifier
            calendar_id: Calendar ID

        Returns:
            MirroredEvent, or None if the calendar has no such event

        Raises:
            CalendarReadError: If getting event fails
        """
