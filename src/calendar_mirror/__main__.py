"""CLI entry point for Calendar Mirror application."""

import argparse
import sys
from pathlib import Path
from typing import Optional

from .auth.google_auth import GoogleAuthProvider
from .config import AppConfig, MirrorConfig
from .readers.google_reader import GoogleCalendarReader
from .state.cursor_store import JsonFileCursorStore, cursor_key
from .sync.engine import MirrorEngine, SyncResult
from .utils.exceptions import CalendarSyncError
from .utils.logging import setup_logging
from .utils.ssl_utils import init_ssl
from .writers.google_writer import GoogleCalendarWriter


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Calendar Mirror - Mirror source calendars into your primary Google calendar"
    )
    parser.add_argument(
        "--sync",
        action="store_true",
        help="Mirror changes from the source calendars",
    )
    parser.add_argument(
        "--calendar",
        nargs="*",
        help="Source calendar ID(s) to sync (default: all configured sources)",
    )
    parser.add_argument(
        "--full",
        action="store_true",
        help="Ignore stored sync tokens and resync the full window",
    )
    parser.add_argument(
        "--teardown",
        action="store_true",
        help="Delete all mirrored events from the primary calendar",
    )
    parser.add_argument(
        "--list-sources",
        action="store_true",
        help="List configured source calendars",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Dry run (show what would change)",
    )
    parser.add_argument(
        "--clear-cache",
        action="store_true",
        help="Remove the stored Google OAuth token",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to mirror_config.yaml (overrides MIRROR_CONFIG_PATH)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Verbose output",
    )
    return parser


def _print_results(results: dict[str, SyncResult]) -> bool:
    ok = True
    print("\nSync Results:")
    for calendar_id, result in results.items():
        mode = "full" if result.full_sync else "incremental"
        print(f"  {calendar_id} ({mode}):")
        print(f"    Events read: {result.events_read}")
        print(f"    Created: {result.events_created}")
        print(f"    Updated: {result.events_updated}")
        print(f"    Deleted: {result.events_deleted}")
        print(f"    Unchanged: {result.events_unchanged}")
        print(f"    Skipped: {result.events_skipped}")
        if result.errors:
            ok = False
            print(f"    Errors ({len(result.errors)}):")
            for err in result.errors:
                print(f"      - {err}")
    return ok


def main(argv: Optional[list[str]] = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    config = AppConfig()
    log_level = "DEBUG" if args.verbose else config.log_level
    logger = setup_logging(level=log_level, log_file=config.log_file)

    try:
        auth = GoogleAuthProvider(config)

        if args.clear_cache:
            auth.clear_cache()
            logger.info("Token cache cleared")
            return 0

        mirror_config = MirrorConfig.load(args.config or config.mirror_config_path)
        cursor_store = JsonFileCursorStore(config.cursor_store_path)

        if args.list_sources:
            print(f"Primary calendar: {mirror_config.primary_calendar_id}")
            print(f"Found {len(mirror_config.sources)} source calendar(s):")
            for calendar_id, source in mirror_config.sources.items():
                print(f"  - {calendar_id}")
                if source.color_id:
                    print(f"    Color: {source.color_id}")
                if source.visibility:
                    print(f"    Visibility: {source.visibility.value}")
                has_cursor = cursor_store.get(cursor_key(calendar_id)) is not None
                print(f"    Next run: {'incremental' if has_cursor else 'full sync'}")
            return 0

        if not (args.sync or args.teardown):
            parser.print_help()
            return 0

        calendar_ids = args.calendar or mirror_config.calendar_ids
        for calendar_id in calendar_ids:
            if calendar_id not in mirror_config.sources:
                logger.error(f"Unknown source calendar: {calendar_id}")
                return 1

        init_ssl(config.use_native_truststore)
        engine = MirrorEngine(
            source_reader=GoogleCalendarReader(auth),
            primary_reader=GoogleCalendarReader(auth),
            primary_writer=GoogleCalendarWriter(auth),
            cursor_store=cursor_store,
            config=mirror_config,
            dry_run=args.dry_run,
        )

        if args.teardown:
            results = engine.teardown_all(calendar_ids)
        else:
            results = engine.sync_all(calendar_ids, force_full_sync=args.full)

        return 0 if _print_results(results) else 1

    except CalendarSyncError as e:
        logger.error(f"Calendar mirror error: {e}")
        return 1
    except Exception as e:
        logger.exception(f"Unexpected error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
