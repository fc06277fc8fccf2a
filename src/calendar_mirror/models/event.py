"""Calendar event models for source events and their mirrors.

Field aliases follow the Google Calendar v3 JSON resource so that API
payloads validate directly into these models.
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field

OUT_OF_OFFICE = "outOfOffice"


class EventStatus(str, Enum):
    """Event status enumeration."""

    CONFIRMED = "confirmed"
    TENTATIVE = "tentative"
    CANCELLED = "cancelled"


class Transparency(str, Enum):
    """Whether an event blocks time (opaque) or shows as free (transparent)."""

    OPAQUE = "opaque"
    TRANSPARENT = "transparent"


class Attendee(BaseModel):
    """Event attendee."""

    email: Optional[str] = None
    display_name: Optional[str] = Field(None, alias="displayName")
    is_self: bool = Field(False, alias="self")
    response_status: str = Field("needsAction", alias="responseStatus")

    model_config = {"populate_by_name": True, "extra": "ignore"}


class Organizer(BaseModel):
    """Event organizer."""

    email: Optional[str] = None
    display_name: Optional[str] = Field(None, alias="displayName")
    is_self: bool = Field(False, alias="self")

    model_config = {"populate_by_name": True, "extra": "ignore"}


class EventDateTime(BaseModel):
    """Start or end of an event, kept in wire form so it round-trips verbatim."""

    date: Optional[str] = None
    date_time: Optional[str] = Field(None, alias="dateTime")
    time_zone: Optional[str] = Field(None, alias="timeZone")

    model_config = {"populate_by_name": True, "extra": "ignore"}

    def __str__(self) -> str:
        return self.date_time or self.date or "?"


class Reminders(BaseModel):
    """Reminder settings. Mirrors always carry the disabled form."""

    use_default: bool = Field(False, alias="useDefault")
    overrides: list[dict[str, Any]] = Field(default_factory=list)

    model_config = {"populate_by_name": True, "extra": "ignore"}


class SourceLink(BaseModel):
    """Back-reference from a mirror to the event it was copied from."""

    title: str
    url: str

    model_config = {"extra": "ignore"}


class SourceEvent(BaseModel):
    """An event as read from a source calendar."""

    id: str
    status: EventStatus = EventStatus.CONFIRMED
    summary: Optional[str] = None
    description: Optional[str] = None
    html_link: Optional[str] = Field(None, alias="htmlLink")

    organizer: Optional[Organizer] = None
    attendees: list[Attendee] = Field(default_factory=list)

    transparency: Transparency = Transparency.OPAQUE
    event_type: str = Field("default", alias="eventType")

    # Cancelled events delivered by incremental sync carry no timing
    start: Optional[EventDateTime] = None
    end: Optional[EventDateTime] = None

    recurrence: Optional[list[str]] = None
    recurring_event_id: Optional[str] = Field(None, alias="recurringEventId")
    original_start_time: Optional[EventDateTime] = Field(
        None, alias="originalStartTime"
    )
    ical_uid: Optional[str] = Field(None, alias="iCalUID")

    updated: Optional[str] = None
    sequence: Optional[int] = None

    model_config = {"populate_by_name": True, "extra": "ignore"}

    @property
    def is_out_of_office(self) -> bool:
        return self.event_type == OUT_OF_OFFICE


# Fields sent to the API when writing a mirror
MIRROR_WRITABLE_FIELDS = {
    "id",
    "summary",
    "description",
    "start",
    "end",
    "recurrence",
    "recurring_event_id",
    "original_start_time",
    "ical_uid",
    "reminders",
    "source",
    "color_id",
    "visibility",
    "sequence",
    "status",
}


class MirroredEvent(BaseModel):
    """Restricted copy of a source event, as stored on the primary calendar."""

    id: str
    summary: str = ""
    description: Optional[str] = None

    start: Optional[EventDateTime] = None
    end: Optional[EventDateTime] = None
    recurrence: Optional[list[str]] = None
    recurring_event_id: Optional[str] = Field(None, alias="recurringEventId")
    original_start_time: Optional[EventDateTime] = Field(
        None, alias="originalStartTime"
    )
    ical_uid: Optional[str] = Field(None, alias="iCalUID")

    reminders: Reminders = Field(default_factory=Reminders)
    source: Optional[SourceLink] = None
    color_id: Optional[str] = Field(None, alias="colorId")
    visibility: Optional[str] = None
    sequence: Optional[int] = None

    # Server-side state. Status is only sent when restoring a cancelled mirror
    status: Optional[EventStatus] = None
    locked: bool = False
    etag: Optional[str] = None

    model_config = {"populate_by_name": True, "extra": "ignore"}

    @property
    def is_cancelled(self) -> bool:
        return self.status == EventStatus.CANCELLED

    def to_api_body(self) -> dict[str, Any]:
        """Serialize the writable subset using API field names."""
        return self.model_dump(
            mode="json",
            by_alias=True,
            exclude_none=True,
            include=MIRROR_WRITABLE_FIELDS,
        )
