"""Build the restricted copy of a source event written to the primary calendar."""

from ..models.event import MirroredEvent, Reminders, SourceEvent, SourceLink
from ..models.source import SourceConfig


def resolve_summary(event: SourceEvent, config: SourceConfig) -> str:
    """
    Compose the mirror's title.

    A literal ``summary`` setting wins. Otherwise the source title gets the
    default ``[calendar_id]`` prefix, no prefix, or the configured one,
    depending on the state of ``title_prefix``.
    """
    if config.summary is not None:
        return config.summary

    summary = event.summary or ""
    if config.uses_default_prefix:
        return f"[{config.calendar_id}] {summary}"
    if config.title_prefix is None:
        return summary
    return f"{config.title_prefix} {summary}"


def transform_event(event: SourceEvent, config: SourceConfig) -> MirroredEvent:
    """
    Transform a source event into its mirror.

    Identity, timing and recurrence fields are copied unchanged so that
    recurring instances line up on both calendars. Reminders are always
    disabled. Attendees, organizer and location are never copied.

    Args:
        event: Event read from the source calendar
        config: Settings of the event's source calendar

    Returns:
        MirroredEvent ready to be created or updated
    """
    summary = resolve_summary(event, config)

    return MirroredEvent(
        id=event.id,
        summary=summary,
        description=event.description if config.copy_description else None,
        start=event.start,
        end=event.end,
        recurrence=event.recurrence,
        recurring_event_id=event.recurring_event_id,
        original_start_time=event.original_start_time,
        ical_uid=event.ical_uid,
        reminders=Reminders(use_default=False, overrides=[]),
        source=SourceLink(title=summary, url=event.html_link or ""),
        color_id=config.color_id,
        visibility=config.visibility.value if config.visibility else None,
    )
