"""Main calendar mirroring engine."""

import logging
from dataclasses import dataclass, field
from typing import Optional

from ..config import MirrorConfig
from ..models.event import SourceEvent
from ..readers.base import CalendarReader
from ..state.cursor_store import CursorStore, cursor_key
from ..utils.exceptions import CalendarSyncError
from ..writers.base import CalendarWriter
from .fetcher import EventFetcher, FetchMode
from .reconciler import ReconcileAction, Reconciler

logger = logging.getLogger(__name__)


@dataclass
class SyncResult:
    """Result of a sync operation for one source calendar."""

    calendar_id: str
    full_sync: bool = False
    events_read: int = 0
    events_created: int = 0
    events_updated: int = 0
    events_deleted: int = 0
    events_unchanged: int = 0
    events_skipped: int = 0
    errors: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    def record(self, action: ReconcileAction, event: SourceEvent) -> None:
        self.events_read += 1
        if action is ReconcileAction.CREATED:
            self.events_created += 1
        elif action is ReconcileAction.UPDATED:
            self.events_updated += 1
        elif action is ReconcileAction.DELETED:
            self.events_deleted += 1
        elif action is ReconcileAction.UNCHANGED:
            self.events_unchanged += 1
        elif action is ReconcileAction.FAILED:
            self.errors.append(f"Failed to reconcile event {event.id}")
        else:
            self.events_skipped += 1


class MirrorEngine:
    """Mirrors source calendars into the primary calendar."""

    def __init__(
        self,
        source_reader: CalendarReader,
        primary_reader: CalendarReader,
        primary_writer: CalendarWriter,
        cursor_store: CursorStore,
        config: MirrorConfig,
        dry_run: bool = False,
    ):
        """
        Initialize mirror engine.

        Args:
            source_reader: Calendar reader for the source calendars
            primary_reader: Calendar reader for the primary calendar
            primary_writer: Calendar writer for the primary calendar
            cursor_store: Where sync cursors are kept between runs
            config: Mirroring settings for this run
            dry_run: If True, only report what would change
        """
        self.config = config
        self.cursor_store = cursor_store
        self.dry_run = dry_run
        self.fetcher = EventFetcher(
            source_reader,
            cursor_store,
            page_size=config.page_size,
            lookback_days=config.lookback_days,
            timezone=config.timezone,
        )
        self.reconciler = Reconciler(
            primary_reader,
            primary_writer,
            config_lookup=config.source_config,
            primary_calendar_id=config.primary_calendar_id,
            dry_run=dry_run,
        )

    def sync_calendar(self, calendar_id: str, force_full_sync: bool = False) -> SyncResult:
        """
        Mirror the changes of one source calendar ("sync now").

        Args:
            calendar_id: Configured source calendar ID
            force_full_sync: Ignore the stored cursor

        Returns:
            SyncResult with statistics

        Raises:
            ConfigurationError: If the calendar is not configured
            CalendarReadError: If listing or looking up events fails. The
                stored cursor is left untouched.
        """
        return self._run(calendar_id, force_full_sync=force_full_sync, teardown=False)

    def teardown_calendar(self, calendar_id: str) -> SyncResult:
        """Delete every mirror of one source calendar and drop its cursor."""
        return self._run(calendar_id, force_full_sync=True, teardown=True)

    def sync_all(
        self,
        calendar_ids: Optional[list[str]] = None,
        force_full_sync: bool = False,
    ) -> dict[str, SyncResult]:
        """
        Sync several source calendars, all configured ones by default.

        A calendar that fails is recorded in its SyncResult and does not
        stop the others.
        """
        if calendar_ids is None:
            calendar_ids = self.config.calendar_ids
        return self._run_all(calendar_ids, force_full_sync, teardown=False)

    def teardown_all(self, calendar_ids: Optional[list[str]] = None) -> dict[str, SyncResult]:
        """Remove the mirrors of several source calendars, all configured ones by default."""
        if calendar_ids is None:
            calendar_ids = self.config.calendar_ids
        return self._run_all(calendar_ids, True, teardown=True)

    def _run_all(
        self, calendar_ids: list[str], force_full_sync: bool, teardown: bool
    ) -> dict[str, SyncResult]:
        results = {}
        for calendar_id in calendar_ids:
            try:
                results[calendar_id] = self._run(calendar_id, force_full_sync, teardown)
            except CalendarSyncError as e:
                logger.error(f"Sync of {calendar_id} failed: {e}")
                results[calendar_id] = SyncResult(
                    calendar_id=calendar_id, errors=[f"Sync failed: {e}"]
                )
        return results

    def _run(self, calendar_id: str, force_full_sync: bool, teardown: bool) -> SyncResult:
        # Fail before fetching anything if the calendar is unknown
        self.config.source_config(calendar_id)

        result = SyncResult(calendar_id=calendar_id)
        verb = "Tearing down" if teardown else "Syncing"
        logger.info(f"{verb} {calendar_id}{' (dry run)' if self.dry_run else ''}")

        def on_event(source_id: str, event: SourceEvent) -> None:
            action = self.reconciler.reconcile(source_id, event, force_suppress=teardown)
            result.record(action, event)

        stats = self.fetcher.fetch(
            calendar_id,
            on_event,
            force_full_sync=force_full_sync,
            persist_cursor=not (teardown or self.dry_run),
        )
        result.full_sync = stats.mode is FetchMode.FULL_RESYNC

        if teardown and not self.dry_run:
            self.cursor_store.delete(cursor_key(calendar_id))

        logger.info(
            f"{calendar_id}: {result.events_created} created, "
            f"{result.events_updated} updated, "
            f"{result.events_deleted} deleted, "
            f"{result.events_unchanged} unchanged, "
            f"{result.events_skipped} skipped, "
            f"{len(result.errors)} errors"
        )
        return result

