"""Shared plumbing for talking to the Google Calendar v3 REST API."""

import logging
from typing import Any, Optional
from urllib.parse import quote

import requests

from ..auth.base import AuthProvider

logger = logging.getLogger(__name__)

CALENDAR_API = "https://www.googleapis.com/calendar/v3"

DEFAULT_TIMEOUT = 30


def api_error_reason(resp: requests.Response) -> Optional[str]:
    """
    Extract the machine-readable reason from an API error response.

    Google errors look like ``{"error": {"errors": [{"reason": "..."}], ...}}``.
    """
    try:
        body = resp.json()
    except ValueError:
        return None
    if not isinstance(body, dict):
        return None

    error = body.get("error", {})
    if not isinstance(error, dict):
        return None

    errors = error.get("errors") or []
    if errors and isinstance(errors[0], dict):
        return errors[0].get("reason")
    return error.get("status")


class GoogleApiClient:
    """Authenticated access to the Calendar API through a requests session."""

    def __init__(
        self,
        auth_provider: AuthProvider,
        session: Optional[requests.Session] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self.auth_provider = auth_provider
        self.session = session or requests.Session()
        self.timeout = timeout

    def _headers(self) -> dict[str, str]:
        token = self.auth_provider.get_access_token()
        return {
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
        }

    @staticmethod
    def events_url(calendar_id: str, event_id: Optional[str] = None) -> str:
        url = f"{CALENDAR_API}/calendars/{quote(calendar_id, safe='')}/events"
        if event_id is not None:
            url = f"{url}/{quote(event_id, safe='')}"
        return url

    def _request(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        """Send a request. Raises requests.RequestException on transport failure only."""
        logger.debug(f"{method} {url}")
        return self.session.request(
            method, url, headers=self._headers(), timeout=self.timeout, **kwargs
        )
