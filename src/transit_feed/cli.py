"""Command-line driver: validate a feed, print a stop timetable, or snapshot
a feed into SQLite."""

import argparse
import asyncio
import logging
import sys
from datetime import date
from pathlib import Path

from transit_feed.data.config import get_feed_config
from transit_feed.errors import FeedError
from transit_feed.feed import Feed, load_feed
from transit_feed.services.schedule_service import parse_gtfs_date

logger = logging.getLogger(__name__)


def print_summary(feed: Feed) -> None:
    print(f"Feed timezone: {feed.timezone}")
    for name, count in feed.summary().items():
        print(f"  {name}: {count:,}")


def print_timetable(feed: Feed, stop_id: str, day: date) -> None:
    """Print departures at a stop, one line per visit."""
    stop = feed.stops.get(stop_id)
    if stop is None:
        print(f"Unknown stop: {stop_id}")
        return

    visits = feed.timetable(stop_id, day)
    print(f"{stop.stop_name} ({stop_id}) on {day.isoformat()}: {len(visits)} departures")
    for stop_time in visits:
        departure = feed.resolved_departure_time(stop_time, day)
        clock = departure.strftime("%H:%M:%S") if departure is not None else "--:--:--"
        # "~" marks a time back-filled from an earlier timing point
        marker = " " if stop_time.timepoint else "~"
        trip = feed.trips[stop_time.trip_id]
        route = feed.routes.get(trip.route_id)
        route_name = route.route_short_name if route is not None else trip.route_id
        headsign = stop_time.stop_headsign or trip.trip_headsign or ""
        print(f"  {clock}{marker} {route_name:<8} {trip.trip_id:<20} {headsign}")


async def run_ingest(gtfs_path: Path, db_path: Path) -> None:
    """Load a feed and write its SQLite snapshot."""
    from transit_feed.data.snapshot import FeedSnapshotWriter

    feed = load_feed(gtfs_path)
    writer = FeedSnapshotWriter(db_path)
    row_counts = await writer.write(feed)

    print("\nIngestion complete. Row counts:")
    for table, count in row_counts.items():
        print(f"  {table}: {count:,}")


def build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )

    parser = argparse.ArgumentParser(
        prog="transit-feed",
        description="Validate and query GTFS schedule feeds",
    )
    subparsers = parser.add_subparsers(dest="command")

    # validate command
    validate_parser = subparsers.add_parser(
        "validate",
        help="Load a feed and report record counts",
        parents=[common],
    )
    validate_parser.add_argument(
        "gtfs_path",
        type=Path,
        help="Path to GTFS directory or ZIP file",
    )

    # timetable command
    timetable_parser = subparsers.add_parser(
        "timetable",
        help="Print the departures at a stop on a date",
        parents=[common],
    )
    timetable_parser.add_argument(
        "gtfs_path",
        type=Path,
        help="Path to GTFS directory or ZIP file",
    )
    timetable_parser.add_argument("stop_id", help="stop_id to query")
    timetable_parser.add_argument("date", help="Service date (YYYYMMDD or YYYY-MM-DD)")

    # ingest command
    ingest_parser = subparsers.add_parser(
        "ingest",
        help="Load a feed and write it into a SQLite database",
        parents=[common],
    )
    ingest_parser.add_argument(
        "gtfs_path",
        type=Path,
        help="Path to GTFS directory or ZIP file",
    )
    ingest_parser.add_argument(
        "--db",
        type=Path,
        default=None,
        help="SQLite database path (default: data/transit_feed.db or TRANSIT_FEED_DB_PATH)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 2

    # Configure logging
    log_level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        if args.command == "validate":
            print_summary(load_feed(args.gtfs_path))
        elif args.command == "timetable":
            try:
                day = parse_gtfs_date(args.date)
            except ValueError as e:
                parser.error(str(e))
            print_timetable(load_feed(args.gtfs_path), args.stop_id, day)
        elif args.command == "ingest":
            db_path = args.db if args.db is not None else get_feed_config().db_path
            asyncio.run(run_ingest(args.gtfs_path, db_path))
    except FeedError as e:
        logger.debug("Feed load failed", exc_info=True)
        print(f"error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
