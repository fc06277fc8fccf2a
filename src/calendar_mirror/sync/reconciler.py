"""Apply the minimal create/update/delete that makes a mirror match its source event."""

import logging
from enum import Enum
from typing import Callable, Optional

from ..models.event import EventStatus, MirroredEvent, SourceEvent
from ..models.source import SourceConfig
from ..readers.base import CalendarReader
from ..utils.date_utils import parse_rfc3339
from ..utils.exceptions import CalendarWriteError, LockedResourceError
from ..writers.base import CalendarWriter
from .disposition import Disposition, resolve_disposition
from .transformer import transform_event

logger = logging.getLogger(__name__)

# Server-managed on the primary calendar, never compared
_COMPARE_EXCLUDE = {"iCalUID", "status"}

# Compared by instant rather than wire text
_TIME_FIELDS = ("start", "end", "originalStartTime")


class ReconcileAction(str, Enum):
    """Outcome of reconciling one source event."""

    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"
    UNCHANGED = "unchanged"
    NOOP = "noop"
    SKIPPED_LOCKED = "skipped_locked"
    FAILED = "failed"


def _same_instant(current: Optional[dict], wanted: Optional[dict]) -> bool:
    """
    Compare two event times by the moment they denote.

    The API renders ``dateTime`` in the zone of whichever calendar is read,
    so offsets may differ for the same instant. ``timeZone`` only counts
    when both sides carry one.
    """
    if current is None or wanted is None:
        return current == wanted
    if current.get("date") != wanted.get("date"):
        return False
    if "timeZone" in current and "timeZone" in wanted and current["timeZone"] != wanted["timeZone"]:
        return False

    current_dt, wanted_dt = current.get("dateTime"), wanted.get("dateTime")
    if current_dt is None or wanted_dt is None:
        return current_dt == wanted_dt
    try:
        return parse_rfc3339(current_dt) == parse_rfc3339(wanted_dt)
    except ValueError:
        return current_dt == wanted_dt


def mirror_differs(existing: MirroredEvent, desired: MirroredEvent) -> bool:
    """True when writing ``desired`` would change the stored mirror."""
    current = {k: v for k, v in existing.to_api_body().items() if k not in _COMPARE_EXCLUDE}
    wanted = {k: v for k, v in desired.to_api_body().items() if k not in _COMPARE_EXCLUDE}

    for field in _TIME_FIELDS:
        if not _same_instant(current.pop(field, None), wanted.pop(field, None)):
            return True
    return current != wanted


class Reconciler:
    """Keeps the primary calendar's copy of each source event in line with its disposition."""

    def __init__(
        self,
        primary_reader: CalendarReader,
        primary_writer: CalendarWriter,
        config_lookup: Callable[[str], SourceConfig],
        primary_calendar_id: str = "primary",
        dry_run: bool = False,
    ):
        """
        Initialize reconciler.

        Args:
            primary_reader: Reader for looking up existing mirrors
            primary_writer: Writer for the primary calendar
            config_lookup: Resolves a source calendar ID to its settings
            primary_calendar_id: Calendar receiving the mirrors
            dry_run: Log intended writes without performing them
        """
        self.primary_reader = primary_reader
        self.primary_writer = primary_writer
        self.config_lookup = config_lookup
        self.primary_calendar_id = primary_calendar_id
        self.dry_run = dry_run

    def reconcile(
        self,
        calendar_id: str,
        event: SourceEvent,
        force_suppress: bool = False,
    ) -> ReconcileAction:
        """
        Reconcile one source event against the primary calendar.

        Read errors while looking up the mirror propagate. Write errors are
        logged and reported as FAILED so the run can continue.

        Args:
            calendar_id: Source calendar the event came from
            event: The source event
            force_suppress: Remove the mirror regardless of the event's state

        Returns:
            The action taken
        """
        existing = self.primary_reader.get_event(event.id, calendar_id=self.primary_calendar_id)

        if force_suppress:
            disposition = Disposition.SUPPRESS
        else:
            disposition = resolve_disposition(event, calendar_id)

        if disposition is Disposition.SUPPRESS:
            if existing is None or existing.is_cancelled:
                return ReconcileAction.NOOP
            logger.info(f"Deleting: {existing.summary} @ {existing.start}")
            return self._guarded(
                calendar_id, event, disposition, ReconcileAction.DELETED,
                lambda: self.primary_writer.delete_event(existing.id, calendar_id=self.primary_calendar_id),
            )

        if existing is not None and existing.locked:
            logger.warning(
                f"Mirror {event.id} of {calendar_id} is locked by the provider, skipping"
            )
            return ReconcileAction.SKIPPED_LOCKED

        mirror = transform_event(event, self.config_lookup(calendar_id))

        if existing is None:
            logger.info(f"Importing: {mirror.summary} @ {mirror.start}")
            return self._guarded(
                calendar_id, event, disposition, ReconcileAction.CREATED,
                lambda: self.primary_writer.create_event(mirror, calendar_id=self.primary_calendar_id),
            )

        mirror.sequence = existing.sequence
        if existing.is_cancelled:
            # A mirror deleted by an earlier run stays behind as cancelled
            mirror.status = EventStatus.CONFIRMED
        elif not mirror_differs(existing, mirror):
            logger.debug(f"Mirror {event.id} is up to date")
            return ReconcileAction.UNCHANGED

        logger.info(f"Updating: {existing.summary} @ {existing.start}")
        return self._guarded(
            calendar_id, event, disposition, ReconcileAction.UPDATED,
            lambda: self.primary_writer.update_event(mirror, calendar_id=self.primary_calendar_id),
        )

    def _guarded(
        self,
        calendar_id: str,
        event: SourceEvent,
        disposition: Disposition,
        action: ReconcileAction,
        write: Callable[[], object],
    ) -> ReconcileAction:
        if self.dry_run:
            logger.info(f"[dry run] would apply {action.value} for {event.id}")
            return action

        try:
            write()
        except LockedResourceError as e:
            logger.warning(
                f"Mirror {event.id} of {calendar_id} is locked ({disposition.value}), skipping: {e}"
            )
            return ReconcileAction.SKIPPED_LOCKED
        except CalendarWriteError as e:
            logger.error(
                f"Error reconciling {event.id} of {calendar_id} ({disposition.value}), skipping: {e}"
            )
            return ReconcileAction.FAILED
        return action
