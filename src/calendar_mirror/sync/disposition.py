"""Decide whether a source event belongs on the primary calendar."""

from enum import Enum
from typing import Optional

from ..models.event import Attendee, EventStatus, SourceEvent, Transparency

ACCEPTED = "accepted"


class Disposition(str, Enum):
    """What should happen to the mirror of a source event."""

    MIRROR = "mirror"
    # Do not create; remove the mirror if one is present
    SUPPRESS = "suppress"


def is_invitation(event: SourceEvent, calendar_id: str) -> bool:
    """True when someone other than the source calendar organizes the event."""
    if event.organizer is None or not event.organizer.email:
        return False
    return event.organizer.email.lower() != calendar_id.lower()


def self_attendee(event: SourceEvent) -> Optional[Attendee]:
    for attendee in event.attendees:
        if attendee.is_self:
            return attendee
    return None


def is_accepted(event: SourceEvent) -> bool:
    """True when the calendar owner accepted the event. No self entry means not accepted."""
    attendee = self_attendee(event)
    return attendee is not None and attendee.response_status == ACCEPTED


def resolve_disposition(event: SourceEvent, calendar_id: str) -> Disposition:
    """
    Classify a source event.

    Rules, first match wins: cancelled events, invitations that were not
    accepted, and events marked as free time are suppressed. Everything
    else is mirrored.

    Args:
        event: Event read from the source calendar
        calendar_id: ID (email address) of the source calendar

    Returns:
        The event's Disposition
    """
    if event.status == EventStatus.CANCELLED:
        return Disposition.SUPPRESS
    if is_invitation(event, calendar_id) and not is_accepted(event):
        return Disposition.SUPPRESS
    if event.transparency == Transparency.TRANSPARENT:
        return Disposition.SUPPRESS
    return Disposition.MIRROR
