"""
Shared pytest fixtures and event helpers.
"""

import pytest

from calendar_mirror.config import MirrorConfig
from calendar_mirror.models.event import SourceEvent
from calendar_mirror.state.cursor_store import MemoryCursorStore
from calendar_mirror.sync.engine import MirrorEngine
from tests.fakes import FakePrimaryCalendar, FakeSourceCalendar

SOURCE_CAL_ID = "team@example.com"
OTHER_CAL_ID = "family@example.com"


def make_event(event_id: str, summary: str = "Test Event", **fields) -> SourceEvent:
    """Return a confirmed, opaque event organized by the source calendar itself.

    Extra keyword arguments use Calendar API field names (``status``,
    ``attendees``, ``eventType`` ...) and override the defaults.
    """
    data = {
        "id": event_id,
        "status": "confirmed",
        "summary": summary,
        "description": f"Notes for {summary}",
        "htmlLink": f"https://www.google.com/calendar/event?eid={event_id}",
        "organizer": {"email": SOURCE_CAL_ID, "self": True},
        "start": {"dateTime": "2026-03-01T10:00:00Z"},
        "end": {"dateTime": "2026-03-01T11:00:00Z"},
        "iCalUID": f"{event_id}@google.com",
        "updated": "2026-02-24T00:00:00.000Z",
    }
    data.update(fields)
    return SourceEvent.model_validate(data)


def make_invitation(event_id: str, response: str = "accepted", summary: str = "Invite") -> SourceEvent:
    """Return an event organized by someone else, with our response set."""
    return make_event(
        event_id,
        summary,
        organizer={"email": "boss@example.com"},
        attendees=[
            {"email": "boss@example.com", "responseStatus": "accepted"},
            {"email": SOURCE_CAL_ID, "self": True, "responseStatus": response},
        ],
    )


@pytest.fixture
def mirror_config():
    return MirrorConfig.from_dict(
        {
            "sources": {
                SOURCE_CAL_ID: {"color_id": 9, "visibility": "private"},
                OTHER_CAL_ID: {"title_prefix": "Family"},
            }
        }
    )


@pytest.fixture
def source_calendar():
    return FakeSourceCalendar()


@pytest.fixture
def primary_calendar():
    return FakePrimaryCalendar()


@pytest.fixture
def cursor_store():
    return MemoryCursorStore()


@pytest.fixture
def engine(source_calendar, primary_calendar, cursor_store, mirror_config):
    return MirrorEngine(
        source_reader=source_calendar,
        primary_reader=primary_calendar,
        primary_writer=primary_calendar,
        cursor_store=cursor_store,
        config=mirror_config,
    )
