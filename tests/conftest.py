"""Shared test fixtures and helpers."""

from datetime import date, datetime, time, timedelta, timezone
from typing import Any

import pytest

from studio_booking.config import AppConfig
from studio_booking.scheduling.state_machine import BookingStateMachine
from studio_booking.service import BookingService, build_booking_service
from studio_booking.store.memory import InMemoryBookingRepository, InMemorySlotRepository
from studio_booking.tools.shoots import InMemoryShootManagement

FIXED_NOW = datetime(2026, 1, 15, 0, 30, tzinfo=timezone.utc)
SHOOT_DAY = date(2026, 3, 1)
ALT_DAY = date(2026, 3, 8)
PHOTOGRAPHER = "ph-maya"
OTHER_PHOTOGRAPHER = "ph-omar"
CLIENT = "client-ava"
OTHER_CLIENT = "client-noah"


class FrozenClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **delta: float) -> None:
        self.now += timedelta(**delta)


def at(hour: int, minute: int = 0, day: date = SHOOT_DAY) -> datetime:
    """Wall-clock datetime on the shoot day."""
    return datetime.combine(day, time(hour, minute))


def make_draft(**overrides: Any) -> dict[str, Any]:
    """Booking request fields for client C asking for 10:00 on the shoot day, 2 hours."""
    fields: dict[str, Any] = {
        "client_id": CLIENT,
        "event_type": "Engagement portraits",
        "preferred_date": SHOOT_DAY,
        "preferred_start_time": time(10, 0),
        "estimated_duration_hours": 2,
        "location": "Royal Botanic Gardens, Melbourne",
    }
    fields.update(overrides)
    return fields


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock(FIXED_NOW)


@pytest.fixture
def config() -> AppConfig:
    return AppConfig()


@pytest.fixture
def bookings() -> InMemoryBookingRepository:
    return InMemoryBookingRepository()


@pytest.fixture
def slot_repo() -> InMemorySlotRepository:
    return InMemorySlotRepository()


@pytest.fixture
def shoots() -> InMemoryShootManagement:
    return InMemoryShootManagement()


@pytest.fixture
def service(config, clock, bookings, slot_repo, shoots) -> BookingService:
    return build_booking_service(
        config=config, clock=clock, bookings=bookings, slots=slot_repo, shoots=shoots
    )


@pytest.fixture
def lifecycle(service):
    return service.lifecycle


@pytest.fixture
def availability(service):
    return service.availability


@pytest.fixture
def state_machine() -> BookingStateMachine:
    return BookingStateMachine()


@pytest.fixture
def morning_slot(availability):
    """Photographer P open 10:00-12:00 on the shoot day."""
    return availability.create_slot(PHOTOGRAPHER, at(10), at(12))


@pytest.fixture
def pending(lifecycle):
    """A fresh Pending booking for 10:00-12:00 on the shoot day."""
    return lifecycle.create(make_draft())
