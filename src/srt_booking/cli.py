"""Command line access to SRT stations and schedules."""

import argparse
import asyncio
import getpass
import json
import os
import sys
from datetime import date, datetime, time

from srt_booking.adapters.config import AppConfig
from srt_booking.adapters.json_format import availability_to_json, station_to_json, train_to_json
from srt_booking.adapters.station_catalog import StaticStationRepository
from srt_booking.bootstrap import build_ticketing_client, create_http_session
from srt_booking.domain.errors import TicketingError
from srt_booking.domain.models import DateAvailability, Train
from srt_booking.domain.ports import BookingService

PASSWORD_ENV_VAR = "SRT_PASSWORD"


def read_password() -> str:
    """Read the password from SRT_PASSWORD, falling back to an interactive prompt."""
    password = os.environ.get(PASSWORD_ENV_VAR)
    if password:
        return password
    return getpass.getpass("SRT password: ")


def parse_date_arg(value: str) -> date:
    try:
        return datetime.strptime(value, "%Y%m%d").date()
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"invalid date '{value}', expected YYYYMMDD") from e


def parse_time_arg(value: str) -> time:
    try:
        return datetime.strptime(value, "%H%M").time()
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"invalid time '{value}', expected HHMM") from e


def format_train(train: Train) -> str:
    """Format one train as a single table line."""
    return (
        f"SRT {train.train_number:>5}  "
        f"{train.departure_time:%H:%M} {train.departure_station_name} -> "
        f"{train.arrival_time:%H:%M} {train.arrival_station_name}  "
        f"({train.duration_minutes}분)  "
        f"특실 {train.special_seat_availability} {train.special_fare:,}원  "
        f"일반실 {train.normal_seat_availability} {train.normal_fare:,}원"
    )


def format_availability(availability: DateAvailability) -> str:
    mark = "O" if availability.is_bookable else "X"
    return f"{availability.date:%Y-%m-%d} ({availability.date:%a})  {mark}"


def print_stations(as_json: bool) -> None:
    """Print the station catalog. Needs no login."""
    stations = StaticStationRepository().get_stations()
    if as_json:
        print(json.dumps([station_to_json(s) for s in stations], indent=2, ensure_ascii=False))
        return
    for station in stations:
        print(f"  {station.code}  {station.name}")


async def run_query(args: argparse.Namespace, client: BookingService) -> None:
    """Log in, run a dates or trains query and log out again."""
    handle = await client.login(args.username, read_password())
    try:
        if args.command == "dates":
            from_date = args.from_date or date.today()
            availability = await client.get_available_dates(handle, args.dep, args.arr, from_date)
            if args.json:
                print(json.dumps([availability_to_json(a) for a in availability], indent=2))
            else:
                for entry in availability:
                    print(format_availability(entry))

        elif args.command == "trains":
            trains = await client.search_trains(handle, args.dep, args.arr, args.date, args.time)
            if args.json:
                print(json.dumps([train_to_json(t) for t in trains], indent=2, ensure_ascii=False))
            elif not trains:
                print("No trains found.", file=sys.stderr)
            else:
                for train in trains:
                    print(format_train(train))
    finally:
        await client.logout(handle)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="SRT schedule helper",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # List station codes
  srt-booking stations

  # Bookable dates Suseo -> Busan for the next two weeks
  SRT_PASSWORD=... srt-booking dates --username 1234567890 0551 0020

  # Trains on a date from 09:00
  srt-booking trains --username user@example.com 0551 0020 20250301 --time 0900
        """,
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    stations_parser = subparsers.add_parser("stations", help="List SRT stations")
    stations_parser.add_argument("--json", action="store_true", help="Output as JSON")

    dates_parser = subparsers.add_parser("dates", help="Show bookable dates for a route")
    dates_parser.add_argument("dep", help="Departure station code (e.g., 0551)")
    dates_parser.add_argument("arr", help="Arrival station code (e.g., 0020)")
    dates_parser.add_argument(
        "--from", dest="from_date", type=parse_date_arg, help="First date (YYYYMMDD), default today"
    )

    trains_parser = subparsers.add_parser("trains", help="Search trains for a route and date")
    trains_parser.add_argument("dep", help="Departure station code (e.g., 0551)")
    trains_parser.add_argument("arr", help="Arrival station code (e.g., 0020)")
    trains_parser.add_argument("date", type=parse_date_arg, help="Travel date (YYYYMMDD)")
    trains_parser.add_argument("--time", type=parse_time_arg, help="Earliest departure (HHMM)")

    for query_parser in (dates_parser, trains_parser):
        query_parser.add_argument(
            "--username",
            required=True,
            help="Membership number, email or phone number (010-1234-5678)",
        )
        query_parser.add_argument("--json", action="store_true", help="Output as JSON")

    return parser


async def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    if args.command == "stations":
        print_stations(args.json)
        return

    config = AppConfig()
    try:
        async with create_http_session() as http_session:
            await run_query(args, build_ticketing_client(config, http_session))
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        sys.exit(1)
    except TicketingError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        sys.exit(1)


def cli_main() -> None:
    """Synchronous entry point for the CLI command."""
    asyncio.run(main())


if __name__ == "__main__":
    cli_main()
