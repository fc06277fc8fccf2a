"""Google Calendar writer using the Calendar v3 REST API directly."""

import logging

import requests

from ..models.event import MirroredEvent
from ..utils.exceptions import CalendarWriteError, LockedResourceError
from ..utils.google_api import GoogleApiClient, api_error_reason
from .base import CalendarWriter

logger = logging.getLogger(__name__)

# 403 reason meaning this event may not be modified. Plain "forbidden"
# also covers missing write access to the whole calendar.
LOCKED_REASONS = {"forbiddenForNonOrganizer"}


class GoogleCalendarWriter(GoogleApiClient, CalendarWriter):
    """Write events to Google Calendar."""

    def _check(self, resp: requests.Response, action: str, event_id: str) -> None:
        if resp.ok:
            return
        reason = api_error_reason(resp)
        message = f"Failed to {action} event {event_id}: HTTP {resp.status_code} ({reason or resp.reason})"
        if resp.status_code == 403 and reason in LOCKED_REASONS:
            raise LockedResourceError(message)
        raise CalendarWriteError(message)

    def create_event(
        self,
        event: MirroredEvent,
        calendar_id: str = "primary",
    ) -> str:
        body = event.to_api_body()
        # Import keeps the iCalUID so recurring instances stay linked;
        # insert is the only option for events without one
        url = self.events_url(calendar_id)
        if event.ical_uid:
            url = f"{url}/import"

        try:
            resp = self._request("POST", url, json=body)
        except requests.RequestException as e:
            raise CalendarWriteError(f"Failed to create event {event.id}: {e}") from e

        self._check(resp, "create", event.id)
        logger.info(f"Created event: {event.summary} @ {event.start}")
        return resp.json().get("id", event.id)

    def update_event(
        self,
        event: MirroredEvent,
        calendar_id: str = "primary",
    ) -> None:
        try:
            resp = self._request(
                "PUT", self.events_url(calendar_id, event.id), json=event.to_api_body()
            )
        except requests.RequestException as e:
            raise CalendarWriteError(f"Failed to update event {event.id}: {e}") from e

        self._check(resp, "update", event.id)
        logger.info(f"Updated event: {event.summary} @ {event.start}")

    def delete_event(
        self,
        event_id: str,
        calendar_id: str = "primary",
    ) -> None:
        try:
            resp = self._request("DELETE", self.events_url(calendar_id, event_id))
        except requests.RequestException as e:
            raise CalendarWriteError(f"Failed to delete event {event_id}: {e}") from e

        if resp.status_code == 410:
            logger.debug(f"Event {event_id} was already deleted")
            return

        self._check(resp, "delete", event_id)
        logger.info(f"Deleted event: {event_id}")
