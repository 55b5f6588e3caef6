#!/usr/bin/env python3
"""
Command Line Interface for the Timetable Catalog

Refreshes the catalog from the timetable provider, runs the refresh service
and queries the stored timetable.
"""

import argparse
import json
import logging
import sys
import threading
from typing import Dict, Optional

from .config import CLUBS, Settings
from .database.utils import check_connection
from .errors import InvalidQueryError, StoreError
from .factory import build_scheduler, build_service


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
        stream=sys.stdout,
    )


def run_refresh(settings: Settings) -> bool:
    """Run one refresh cycle. Returns True if the catalog was replaced."""
    scheduler = build_scheduler(settings)
    result = scheduler.run_cycle()
    if result.succeeded:
        print(f"✅ Refreshed {result.sessions} classes and {result.class_types} class types")
    else:
        print(f"❌ Refresh failed while {result.failed_state.value}: {result.error}")
    return result.succeeded


def run_service(settings: Settings, stop_event: Optional[threading.Event] = None) -> None:
    """Refresh now, then every interval until interrupted."""
    scheduler = build_scheduler(settings)
    stop_event = stop_event or threading.Event()
    print(f"🚀 Starting refresh service (every {settings.refresh_interval})...")
    scheduler.start()
    try:
        while not stop_event.wait(1.0):
            pass
    except KeyboardInterrupt:
        print("\nStopping refresh service...")
    finally:
        scheduler.stop()


def list_classes(settings: Settings, params: Dict[str, Optional[str]], as_json: bool) -> None:
    service = build_service(settings)
    classes = service.list_classes_from_params(params)
    if as_json:
        print(json.dumps([c.to_dict() for c in classes], indent=2, ensure_ascii=False))
        return
    tz = settings.reference_timezone
    for c in classes:
        club = CLUBS[c.club].name if c.club in CLUBS else c.club
        start = c.start_at.astimezone(tz)
        virtual = " (virtual)" if c.is_virtual else ""
        print(f"{start:%a %d %b %H:%M}  {c.duration_minutes:>3} min  {c.name}{virtual} @ {club}")
    print(f"\n{len(classes)} classes")


def list_class_types(settings: Settings, as_json: bool) -> None:
    service = build_service(settings)
    class_types = service.list_class_types()
    if as_json:
        print(json.dumps([t.to_dict() for t in class_types], indent=2, ensure_ascii=False))
        return
    for t in class_types:
        print(f"  {t.id:<12} {t.name}")


def run_health(settings: Settings) -> bool:
    """Check database connectivity, then that the catalog holds classes."""
    service = build_service(settings)
    if not check_connection(settings.database_url):
        print("❌ Database unreachable")
        return False
    print("✅ Database connection OK")
    if not service.is_healthy():
        print("❌ Catalog is empty")
        return False
    print("✅ Healthy")
    return True


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="timetable",
        description="Timetable catalog CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  timetable refresh                         # Fetch and install the timetable once
  timetable serve                           # Refresh now and every 6 hours
  timetable classes --club 01,09 --hour 11  # Classes at 11:00 in two clubs
  timetable classes --date 2024-05-01 --json
        """
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("refresh", help="Fetch the timetable and replace the catalog once")
    subparsers.add_parser("serve", help="Run the refresh service until interrupted")

    classes = subparsers.add_parser("classes", help="List classes matching filters")
    classes.add_argument("--name", help="Comma-separated class codes")
    classes.add_argument("--club", help="Comma-separated club codes")
    classes.add_argument("--date", help="Comma-separated dates (YYYY-MM-DD)")
    classes.add_argument("--hour", help="Comma-separated hours of day (0-23)")
    classes.add_argument("--virtual", help="Include virtual classes (true/false)")
    classes.add_argument("--json", action="store_true", help="Print JSON")

    class_types = subparsers.add_parser("class-types", help="List class types")
    class_types.add_argument("--json", action="store_true", help="Print JSON")

    subparsers.add_parser("health", help="Exit 0 if the catalog holds classes")
    subparsers.add_parser("clubs", help="List the known clubs")
    return parser


def main(argv=None):
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    if args.command == "clubs":
        print("Available clubs:")
        for club in CLUBS.values():
            print(f"  - {club.code}  {club.name}")
        return

    settings = Settings.from_env()
    configure_logging(settings.log_level)

    try:
        if args.command == "refresh":
            sys.exit(0 if run_refresh(settings) else 1)
        elif args.command == "serve":
            run_service(settings)
        elif args.command == "classes":
            params = {
                "name": args.name,
                "club": args.club,
                "date": args.date,
                "hour": args.hour,
                "virtual": args.virtual,
            }
            list_classes(settings, params, args.json)
        elif args.command == "class-types":
            list_class_types(settings, args.json)
        elif args.command == "health":
            sys.exit(0 if run_health(settings) else 1)
    except InvalidQueryError as e:
        print(f"❌ {e}", file=sys.stderr)
        sys.exit(2)
    except (StoreError, RuntimeError) as e:
        print(f"❌ {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
