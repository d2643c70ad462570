"""
Command-line entry point for the studio booking engine.

Runs against in-process stores seeded with demo availability, so it
works without any external systems.

Usage:
    Scenario demo:   python main.py demo [--scenario race]
    Free slots:      python main.py slots --date 2026-03-01 [--photographer ph-maya]
"""

import argparse
import logging
import sys
from datetime import date, time, timedelta

from studio_booking.config import settings
from studio_booking.service import BookingService, build_booking_service
from studio_booking.tools.photographers import DEMO_PHOTOGRAPHERS

logger = logging.getLogger(__name__)


def _seeded_service(around: date) -> BookingService:
    """Give every demo photographer weekday mornings and afternoons for the surrounding weeks."""
    service = build_booking_service()
    first = around - timedelta(days=around.weekday())
    for photographer in DEMO_PHOTOGRAPHERS:
        for weekday in range(5):
            for start, end in ((time(9), time(12)), (time(13), time(17))):
                service.create_recurring_availability(
                    photographer.id, weekday, start, end,
                    starting=first, until=first + timedelta(weeks=2),
                )
    return service


def _run_slots(args: argparse.Namespace) -> None:
    try:
        day = date.fromisoformat(args.date)
    except ValueError:
        logger.error("Invalid date %r, expected YYYY-MM-DD", args.date)
        sys.exit(1)

    service = _seeded_service(day)
    slots = service.list_available_slots(day, args.photographer)
    if not slots:
        sys.stdout.write(f"No free slots on {day.isoformat()}.\n")
        return
    for slot in slots:
        sys.stdout.write(
            f"{slot.photographer_id:<10} {slot.start_time:%H:%M}-{slot.end_time:%H:%M}"
            f"{'  (recurring)' if slot.is_recurring else ''}\n"
        )


def _run_demo(args: argparse.Namespace) -> None:
    from console_demo import ConsoleSession

    session = ConsoleSession()
    if args.scenario == "all":
        session.run_all()
    else:
        session.run_scenario(args.scenario)


def main() -> None:
    parser = argparse.ArgumentParser(description=f"{settings.studio.name} booking engine")
    commands = parser.add_subparsers(dest="command", required=True)

    demo = commands.add_parser("demo", help="Play scripted booking scenarios")
    demo.add_argument("--scenario", default="all")
    demo.set_defaults(handler=_run_demo)

    slots = commands.add_parser("slots", help="List free slots on a date")
    slots.add_argument("--date", required=True, help="Date as YYYY-MM-DD")
    slots.add_argument("--photographer", default=None, help="Photographer id")
    slots.set_defaults(handler=_run_slots)

    args = parser.parse_args()
    args.handler(args)


if __name__ == "__main__":
    main()
