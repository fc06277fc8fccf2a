"""Google Calendar reader using the Calendar v3 REST API directly."""

import logging
from typing import Optional

import requests
from pydantic import ValidationError

from ..models.event import MirroredEvent, SourceEvent
from ..utils.exceptions import CalendarReadError, CursorInvalidError
from ..utils.google_api import GoogleApiClient, api_error_reason
from .base import CalendarReader, EventPage

logger = logging.getLogger(__name__)


class GoogleCalendarReader(GoogleApiClient, CalendarReader):
    """Read events from Google Calendar."""

    def list_events(
        self,
        calendar_id: str,
        page_size: int,
        sync_token: Optional[str] = None,
        time_min: Optional[str] = None,
        page_token: Optional[str] = None,
    ) -> EventPage:
        params = {"maxResults": page_size}
        # The API rejects timeMin together with a sync token
        if sync_token:
            params["syncToken"] = sync_token
        elif time_min:
            params["timeMin"] = time_min
        if page_token:
            params["pageToken"] = page_token

        try:
            resp = self._request("GET", self.events_url(calendar_id), params=params)
        except requests.RequestException as e:
            raise CalendarReadError(f"Failed to list events of {calendar_id}: {e}") from e

        if resp.status_code == 410:
            raise CursorInvalidError(
                f"Sync token for {calendar_id} is no longer valid "
                f"({api_error_reason(resp) or 'gone'})"
            )
        if not resp.ok:
            raise CalendarReadError(
                f"Failed to list events of {calendar_id}: HTTP {resp.status_code} "
                f"({api_error_reason(resp) or resp.reason})"
            )

        data = resp.json()
        try:
            items = [SourceEvent.model_validate(item) for item in data.get("items", [])]
        except ValidationError as e:
            raise CalendarReadError(f"Unexpected event payload from {calendar_id}: {e}") from e

        logger.debug(f"Read {len(items)} events from {calendar_id}")
        return EventPage(
            items=items,
            next_page_token=data.get("nextPageToken"),
            next_sync_token=data.get("nextSyncToken"),
        )

    def get_event(self, event_id: str, calendar_id: str = "primary") -> Optional[MirroredEvent]:
        try:
            resp = self._request("GET", self.events_url(calendar_id, event_id))
        except requests.RequestException as e:
            raise CalendarReadError(f"Failed to get event {event_id}: {e}") from e

        if resp.status_code == 404:
            return None
        if not resp.ok:
            raise CalendarReadError(
                f"Failed to get event {event_id} from {calendar_id}: HTTP {resp.status_code} "
                f"({api_error_reason(resp) or resp.reason})"
            )

        try:
            return MirroredEvent.model_validate(resp.json())
        except ValidationError as e:
            raise CalendarReadError(f"Unexpected payload for event {event_id}: {e}") from e
