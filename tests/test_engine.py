"""
End-to-end tests: fetch -> resolve -> transform -> reconcile -> persist cursor.

All tests run MirrorEngine against FakeSourceCalendar and FakePrimaryCalendar
with an in-memory cursor store.
"""

import pytest

from calendar_mirror.state.cursor_store import cursor_key
from calendar_mirror.sync.engine import MirrorEngine
from calendar_mirror.utils.exceptions import CalendarReadError, CalendarWriteError, ConfigurationError
from tests.conftest import OTHER_CAL_ID, SOURCE_CAL_ID, make_event, make_invitation


def test_new_accepted_event_creates_exactly_one_mirror(engine, source_calendar, primary_calendar, cursor_store):
    source_calendar.script(SOURCE_CAL_ID, [[make_invitation("e1", "accepted")]], next_sync_token="tok-1")

    result = engine.sync_calendar(SOURCE_CAL_ID)

    assert result.events_created == 1
    assert result.full_sync
    assert len(primary_calendar.creates) == 1
    mirror = primary_calendar.creates[0]
    assert mirror.id == "e1"
    assert mirror.reminders.use_default is False and mirror.reminders.overrides == []
    assert mirror.color_id == "9"
    assert mirror.visibility == "private"
    assert cursor_store.get(cursor_key(SOURCE_CAL_ID)) == "tok-1"


def test_second_run_is_incremental_and_applies_changes(engine, source_calendar, primary_calendar, cursor_store):
    source_calendar.script(
        SOURCE_CAL_ID, [[make_event("e1"), make_invitation("inv", "accepted")]], next_sync_token="tok-1"
    )
    engine.sync_calendar(SOURCE_CAL_ID)
    primary_calendar.reset_counters()

    source_calendar.script(
        SOURCE_CAL_ID,
        [[make_invitation("inv", "declined"), make_event("e1", status="cancelled")]],
        next_sync_token="tok-2",
        sync_token="tok-1",
    )
    result = engine.sync_calendar(SOURCE_CAL_ID)

    assert not result.full_sync
    assert result.events_deleted == 2
    assert sorted(primary_calendar.deletes) == ["e1", "inv"]
    assert primary_calendar.live_ids() == set()
    assert cursor_store.get(cursor_key(SOURCE_CAL_ID)) == "tok-2"


def test_out_of_office_events_are_never_touched(engine, source_calendar, primary_calendar):
    source_calendar.script(
        SOURCE_CAL_ID, [[make_event("ooo", "Vacation", eventType="outOfOffice")]], next_sync_token="tok-1"
    )

    result = engine.sync_calendar(SOURCE_CAL_ID)

    assert result.events_read == 0
    assert primary_calendar.gets == []
    assert primary_calendar.write_count == 0


def test_redelivery_after_crash_is_idempotent(engine, source_calendar, primary_calendar, cursor_store):
    source_calendar.script(SOURCE_CAL_ID, [[make_event("e1"), make_event("e2")]], next_sync_token="tok-1")
    engine.sync_calendar(SOURCE_CAL_ID)
    cursor_store.delete(cursor_key(SOURCE_CAL_ID))
    primary_calendar.reset_counters()

    result = engine.sync_calendar(SOURCE_CAL_ID)

    assert result.events_unchanged == 2
    assert primary_calendar.write_count == 0


def test_invalid_cursor_triggers_single_full_resync(engine, source_calendar, primary_calendar, cursor_store):
    cursor_store.set(cursor_key(SOURCE_CAL_ID), "stale")
    source_calendar.invalidate(SOURCE_CAL_ID, "stale")
    source_calendar.script(SOURCE_CAL_ID, [[make_event("e1")]], next_sync_token="tok-new")

    result = engine.sync_calendar(SOURCE_CAL_ID)

    assert result.full_sync
    assert result.events_created == 1
    assert [c["sync_token"] for c in source_calendar.calls] == ["stale", None]
    assert cursor_store.get(cursor_key(SOURCE_CAL_ID)) == "tok-new"


def test_listing_failure_surfaces_and_keeps_cursor(engine, source_calendar, cursor_store):
    cursor_store.set(cursor_key(SOURCE_CAL_ID), "tok-1")
    source_calendar.fail(SOURCE_CAL_ID, CalendarReadError("HTTP 500"), sync_token="tok-1")

    with pytest.raises(CalendarReadError):
        engine.sync_calendar(SOURCE_CAL_ID)

    assert cursor_store.get(cursor_key(SOURCE_CAL_ID)) == "tok-1"


def test_write_failure_is_reported_but_run_completes(engine, source_calendar, primary_calendar, cursor_store):
    primary_calendar.write_failures["bad"] = CalendarWriteError("HTTP 503")
    source_calendar.script(SOURCE_CAL_ID, [[make_event("bad"), make_event("good")]], next_sync_token="tok-1")

    result = engine.sync_calendar(SOURCE_CAL_ID)

    assert result.events_created == 1
    assert len(result.errors) == 1
    assert not result.ok
    assert cursor_store.get(cursor_key(SOURCE_CAL_ID)) == "tok-1"


def test_unknown_calendar_is_rejected_before_fetching(engine, source_calendar):
    with pytest.raises(ConfigurationError):
        engine.sync_calendar("stranger@example.com")
    assert source_calendar.calls == []


def test_sync_all_continues_after_a_failing_calendar(engine, source_calendar, primary_calendar):
    source_calendar.fail(SOURCE_CAL_ID, CalendarReadError("HTTP 500"))
    source_calendar.script(
        OTHER_CAL_ID, [[make_event("f1", "Dinner", organizer={"email": OTHER_CAL_ID})]], next_sync_token="tok-f"
    )

    results = engine.sync_all()

    assert set(results) == {SOURCE_CAL_ID, OTHER_CAL_ID}
    assert not results[SOURCE_CAL_ID].ok
    assert results[OTHER_CAL_ID].events_created == 1
    assert primary_calendar.stored("f1").summary == "Family Dinner"


def test_force_full_sync_bulk_run(engine, source_calendar, cursor_store):
    for cal in (SOURCE_CAL_ID, OTHER_CAL_ID):
        cursor_store.set(cursor_key(cal), "old")
        source_calendar.script(cal, [[]], next_sync_token=f"new-{cal}")

    results = engine.sync_all(force_full_sync=True)

    assert all(r.full_sync for r in results.values())
    assert all(c["sync_token"] is None for c in source_calendar.calls)
    assert cursor_store.get(cursor_key(OTHER_CAL_ID)) == f"new-{OTHER_CAL_ID}"


def test_teardown_removes_mirrors_and_drops_cursor(engine, source_calendar, primary_calendar, cursor_store):
    source_calendar.script(SOURCE_CAL_ID, [[make_event("e1"), make_event("e2")]], next_sync_token="tok-1")
    source_calendar.script(OTHER_CAL_ID, [[]], next_sync_token="tok-f")
    engine.sync_all()
    assert primary_calendar.live_ids() == {"e1", "e2"}

    results = engine.teardown_all()

    assert results[SOURCE_CAL_ID].events_deleted == 2
    assert primary_calendar.live_ids() == set()
    assert cursor_store.get(cursor_key(SOURCE_CAL_ID)) is None
    assert cursor_store.get(cursor_key(OTHER_CAL_ID)) is None


def test_dry_run_writes_nothing_and_keeps_cursor(source_calendar, primary_calendar, cursor_store, mirror_config):
    engine = MirrorEngine(
        source_calendar, primary_calendar, primary_calendar, cursor_store, mirror_config, dry_run=True
    )
    source_calendar.script(SOURCE_CAL_ID, [[make_event("e1")]], next_sync_token="tok-1")

    result = engine.sync_calendar(SOURCE_CAL_ID)

    assert result.events_created == 1
    assert primary_calendar.write_count == 0
    assert cursor_store.get(cursor_key(SOURCE_CAL_ID)) is None
