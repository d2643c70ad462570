"""
Offline console demo: drives the booking engine through realistic studio scenarios.

Uses the real lifecycle, scheduling engine and availability store with
in-process collaborators. No database, no network calls.

Usage:
    python console_demo.py
    python console_demo.py --scenario race
    python console_demo.py --scenario convert
"""

import argparse
import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import date, datetime, time, timedelta
from typing import Any, Callable, Optional

from studio_booking.config import settings
from studio_booking.errors import BookingError, StorageError
from studio_booking.logging_context import new_request_id
from studio_booking.schemas.party_schema import CallerContext
from studio_booking.service import BookingService, build_booking_service

BLUE = "\033[94m"
GREEN = "\033[92m"
YELLOW = "\033[93m"
RED = "\033[91m"
DIM = "\033[2m"
RESET = "\033[0m"
BOLD = "\033[1m"

DEMO_PHOTOGRAPHER = "ph-maya"
DEMO_CLIENT = CallerContext(user_id="user-ava")
OTHER_CLIENT = CallerContext(user_id="user-noah")


class ConsoleSession:
    """Runs scripted staff and client actions against a fresh booking service."""

    SCENARIOS: tuple[str, ...] = ("happy", "conflict", "decline", "cancel", "race", "convert")

    def __init__(self, service: Optional[BookingService] = None) -> None:
        self.service = service or build_booking_service()
        self.shoot_day = date.today() + timedelta(days=7)

    # ------------------------------------------------------------------ #
    # Output helpers
    # ------------------------------------------------------------------ #

    def actor_say(self, actor: str, text: str) -> None:
        print(f"{BLUE}{BOLD}[{actor}]{RESET} {text}")

    def system_log(self, text: str) -> None:
        print(f"{DIM}  >> {text}{RESET}")

    def attempt(self, actor: str, label: str, action: Callable[[], Any]) -> Any:
        """Run one action, printing its outcome the way a front-end would present it."""
        new_request_id()
        self.actor_say(actor, label)
        try:
            result = action()
        except BookingError as exc:
            print(f"{YELLOW}  rejected: {exc.message}{RESET}")
            return None
        except StorageError:
            print(f"{RED}  The booking system is temporarily unavailable, please try again.{RESET}")
            return None
        print(f"{GREEN}  ok{RESET}" + (f"{GREEN}: {result}{RESET}" if result is not None else ""))
        return result

    def _at(self, hour: int, minute: int = 0) -> datetime:
        return datetime.combine(self.shoot_day, time(hour, minute))

    def _request(self, caller: CallerContext, hour: int = 10, **overrides: Any) -> Optional[str]:
        fields = {
            "event_type": "Engagement portraits",
            "preferred_date": self.shoot_day,
            "preferred_start_time": time(hour, 0),
            "estimated_duration_hours": 2,
            "location": "Royal Botanic Gardens, Melbourne",
        }
        fields.update(overrides)
        reference = self.attempt(
            "Client", f"requests {fields['event_type']} on {self.shoot_day} at {hour:02d}:00",
            lambda: self.service.create_booking_request(fields, caller=caller),
        )
        if reference is None:
            return None
        return self.service.get_booking_by_reference(reference).id

    def _open_morning(self) -> None:
        self.attempt(
            "Staff", f"opens {DEMO_PHOTOGRAPHER} 10:00-12:00 on {self.shoot_day}",
            lambda: self.service.create_availability_slot(
                DEMO_PHOTOGRAPHER, self._at(10), self._at(12)
            ),
        )

    def _show_slots(self) -> None:
        slots = self.service.list_available_slots(self.shoot_day, DEMO_PHOTOGRAPHER)
        listing = ", ".join(f"{s.start_time:%H:%M}-{s.end_time:%H:%M}" for s in slots) or "none"
        self.system_log(f"Free slots for {DEMO_PHOTOGRAPHER} on {self.shoot_day}: {listing}")

    def _show_status(self, booking_id: Optional[str]) -> None:
        if booking_id:
            booking = self.service.get_booking(booking_id)
            self.system_log(f"{booking.booking_reference} is {booking.status.value}")

    # ------------------------------------------------------------------ #
    # Scenarios
    # ------------------------------------------------------------------ #

    def scenario_happy(self) -> None:
        self._open_morning()
        booking_id = self._request(DEMO_CLIENT)
        if booking_id:
            self.attempt(
                "Staff", "confirms with Maya",
                lambda: self.service.confirm(booking_id, photographer_id=DEMO_PHOTOGRAPHER),
            )
        self._show_status(booking_id)
        self._show_slots()

    def scenario_conflict(self) -> None:
        self.scenario_happy()
        second = self._request(OTHER_CLIENT)
        if second:
            self.attempt(
                "Staff", "confirms the second request for the same window",
                lambda: self.service.confirm(second, photographer_id=DEMO_PHOTOGRAPHER),
            )
        self._show_status(second)

    def scenario_decline(self) -> None:
        booking_id = self._request(DEMO_CLIENT, event_type="Headshots")
        if booking_id:
            self.attempt("Staff", "declines without a reason",
                         lambda: self.service.decline(booking_id, ""))
            self.attempt("Staff", "declines: Fully booked",
                         lambda: self.service.decline(booking_id, "Fully booked"))
            self.attempt("Client", "cancels the declined request",
                         lambda: self.service.cancel(booking_id))
        self._show_status(booking_id)

    def scenario_cancel(self) -> None:
        self._open_morning()
        first = self._request(DEMO_CLIENT)
        if first:
            self.attempt("Staff", "confirms with Maya",
                         lambda: self.service.confirm(first, photographer_id=DEMO_PHOTOGRAPHER))
            self._show_slots()
            self.attempt("Client", "cancels", lambda: self.service.cancel(first))
            self._show_slots()
        second = self._request(OTHER_CLIENT)
        if second:
            self.attempt("Staff", "confirms the new request for the freed window",
                         lambda: self.service.confirm(second, photographer_id=DEMO_PHOTOGRAPHER))
        self._show_status(second)

    def scenario_race(self) -> None:
        self._open_morning()
        first = self._request(DEMO_CLIENT)
        second = self._request(OTHER_CLIENT)
        if not (first and second):
            return
        barrier = threading.Barrier(2)

        def confirm(booking_id: str) -> str:
            barrier.wait()
            try:
                self.service.confirm(booking_id, photographer_id=DEMO_PHOTOGRAPHER)
                return "confirmed"
            except BookingError as exc:
                return f"rejected ({exc.code})"

        self.actor_say("Staff x2", "confirm both requests at the same moment")
        with ThreadPoolExecutor(max_workers=2) as pool:
            outcomes = list(pool.map(confirm, [first, second]))
        for booking_id, outcome in zip((first, second), outcomes):
            reference = self.service.get_booking(booking_id).booking_reference
            self.system_log(f"{reference}: {outcome}")
        self._show_slots()

    def scenario_convert(self) -> None:
        self._open_morning()
        booking_id = self._request(DEMO_CLIENT, service_package_id="family-outdoor")
        if not booking_id:
            return
        self.attempt("Staff", "converts while still pending",
                     lambda: self.service.convert_to_shoot(booking_id))
        self.attempt("Staff", "confirms with Maya",
                     lambda: self.service.confirm(booking_id, photographer_id=DEMO_PHOTOGRAPHER))
        self.attempt("Staff", "converts to a shoot",
                     lambda: self.service.convert_to_shoot(booking_id))
        self.attempt("Staff", "converts again",
                     lambda: self.service.convert_to_shoot(booking_id))
        self._show_status(booking_id)

    def run_scenario(self, scenario: str) -> None:
        handler = getattr(self, f"scenario_{scenario}", None)
        if handler is None:
            print(f"{RED}Unknown scenario: {scenario}{RESET}")
            return

        print()
        print(f"{BOLD}{'=' * 60}{RESET}")
        print(f"{BOLD}  STUDIO BOOKING - Scenario: {scenario}{RESET}")
        print(f"{BOLD}  Studio: {settings.studio.name}{RESET}")
        print(f"{BOLD}{'=' * 60}{RESET}")
        print()
        handler()
        counts = {s.value: n for s, n in self.service.status_counts().items() if n}
        print(f"\n{DIM}  Bookings by status: {counts}{RESET}")

    def run_all(self) -> None:
        for scenario in self.SCENARIOS:
            # Each scenario starts from an empty studio.
            ConsoleSession().run_scenario(scenario)


def main() -> None:
    parser = argparse.ArgumentParser(description="Offline booking engine demo")
    parser.add_argument(
        "--scenario",
        choices=[*ConsoleSession.SCENARIOS, "all"],
        default="all",
        help="Scenario to play (default: all)",
    )
    args = parser.parse_args()

    session = ConsoleSession()
    if args.scenario == "all":
        session.run_all()
    else:
        session.run_scenario(args.scenario)


if __name__ == "__main__":
    main()
