"""
Booking service: the operation set exposed to callers.

Transport-agnostic. A web layer, a staff console or a job runner calls
these methods; business failures surface as BookingError subclasses and
infrastructure failures as StorageError.

Usage:
    service = build_booking_service()
    reference = service.create_booking_request({...}, caller=caller)
    service.confirm(booking.id, photographer_id="ph-maya")
"""

from __future__ import annotations

from datetime import date, datetime, time, timezone
from typing import Callable, Optional, Union

from studio_booking.config import AppConfig, settings
from studio_booking.logging_context import get_request_logger
from studio_booking.scheduling.availability import AvailabilityStore
from studio_booking.scheduling.converter import ShootConverter
from studio_booking.scheduling.engine import SchedulingEngine
from studio_booking.scheduling.lifecycle import BookingLifecycle
from studio_booking.scheduling.reference import BookingReferenceGenerator
from studio_booking.schemas.availability_schema import AvailabilitySlot
from studio_booking.schemas.booking_schema import BookingDraft, BookingRequest, BookingStatus
from studio_booking.schemas.party_schema import CallerContext
from studio_booking.store.memory import InMemoryBookingRepository, InMemorySlotRepository
from studio_booking.store.ports import (
    BookingRepository,
    ClientDirectory,
    PackageCatalogPort,
    PhotographerDirectory,
    ShootManagementPort,
    SlotRepository,
)
from studio_booking.tools.clients import InMemoryClientDirectory
from studio_booking.tools.packages import PackageCatalog
from studio_booking.tools.photographers import InMemoryPhotographerDirectory
from studio_booking.tools.shoots import InMemoryShootManagement

logger = get_request_logger(__name__)


class BookingService:
    """Facade over the lifecycle and availability components."""

    def __init__(self, lifecycle: BookingLifecycle, availability: AvailabilityStore) -> None:
        self.lifecycle = lifecycle
        self.availability = availability

    # --- Booking requests ---

    def create_booking_request(
        self,
        fields: Union[BookingDraft, dict],
        caller: Optional[CallerContext] = None,
    ) -> str:
        """Create a Pending booking request and return its reference."""
        return self.lifecycle.create(fields, caller=caller).booking_reference

    def get_booking(self, booking_id: str) -> BookingRequest:
        return self.lifecycle.get(booking_id)

    def get_booking_by_reference(self, reference: str) -> Optional[BookingRequest]:
        return self.lifecycle.find_by_reference(reference)

    def list_bookings(self, status: Optional[BookingStatus] = None) -> list[BookingRequest]:
        if status is None:
            return self.lifecycle.list_all()
        return self.lifecycle.list_by_status(status)

    def list_client_bookings(self, client_id: str) -> list[BookingRequest]:
        return self.lifecycle.list_by_client(client_id)

    def count_pending(self) -> int:
        return self.lifecycle.count_pending()

    def status_counts(self) -> dict[BookingStatus, int]:
        return self.lifecycle.status_counts()

    def confirm(
        self,
        booking_id: str,
        photographer_id: Optional[str] = None,
        notes: Optional[str] = None,
        on_date: Optional[date] = None,
    ) -> None:
        self.lifecycle.confirm(booking_id, photographer_id, notes, on_date=on_date)

    def decline(self, booking_id: str, reason: str) -> None:
        self.lifecycle.decline(booking_id, reason)

    def cancel(self, booking_id: str) -> None:
        self.lifecycle.cancel(booking_id)

    def convert_to_shoot(self, booking_id: str) -> str:
        return self.lifecycle.convert_to_shoot(booking_id)

    def delete_booking(self, booking_id: str) -> None:
        self.lifecycle.delete(booking_id)

    def update_admin_notes(self, booking_id: str, notes: Optional[str]) -> None:
        self.lifecycle.update_admin_notes(booking_id, notes)

    # --- Availability ---

    def list_available_slots(
        self, day: date, photographer_id: Optional[str] = None
    ) -> list[AvailabilitySlot]:
        return self.availability.list_available(day, photographer_id)

    def list_photographer_slots(
        self,
        photographer_id: str,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> list[AvailabilitySlot]:
        return self.availability.list_photographer_slots(photographer_id, start, end)

    def create_availability_slot(
        self,
        photographer_id: str,
        start: datetime,
        end: datetime,
        notes: Optional[str] = None,
    ) -> str:
        return self.availability.create_slot(photographer_id, start, end, notes=notes).id

    def create_recurring_availability(
        self,
        photographer_id: str,
        day_of_week: int,
        start_time: time,
        end_time: time,
        until: Optional[date] = None,
        starting: Optional[date] = None,
    ) -> list[str]:
        slots = self.availability.create_recurring_slots(
            photographer_id, day_of_week, start_time, end_time, until=until, starting=starting
        )
        return [s.id for s in slots]

    def block_time_slot(
        self,
        photographer_id: str,
        start: datetime,
        end: datetime,
        notes: Optional[str] = None,
    ) -> str:
        return self.availability.block_slot(photographer_id, start, end, notes=notes).id

    def delete_availability_slot(self, slot_id: str) -> None:
        self.availability.delete_slot(slot_id)

    def update_slot_notes(self, slot_id: str, notes: Optional[str]) -> None:
        self.availability.update_slot_notes(slot_id, notes)


def build_booking_service(
    config: Optional[AppConfig] = None,
    bookings: Optional[BookingRepository] = None,
    slots: Optional[SlotRepository] = None,
    clients: Optional[ClientDirectory] = None,
    photographers: Optional[PhotographerDirectory] = None,
    packages: Optional[PackageCatalogPort] = None,
    shoots: Optional[ShootManagementPort] = None,
    clock: Optional[Callable[[], datetime]] = None,
    reference_generator: Optional[BookingReferenceGenerator] = None,
) -> BookingService:
    """Wire a BookingService, defaulting every collaborator to its in-process version."""
    config = config or settings
    clock = clock or (lambda: datetime.now(timezone.utc))
    photographers = photographers or InMemoryPhotographerDirectory()

    availability = AvailabilityStore(
        slots=slots or InMemorySlotRepository(),
        photographers=photographers,
        config=config.availability,
        clock=clock,
        timezone_name=config.studio.timezone_name,
    )
    lifecycle = BookingLifecycle(
        bookings=bookings or InMemoryBookingRepository(),
        engine=SchedulingEngine(availability),
        converter=ShootConverter(shoots or InMemoryShootManagement()),
        clients=clients or InMemoryClientDirectory(),
        photographers=photographers,
        packages=packages or PackageCatalog(),
        config=config.booking,
        reference_generator=reference_generator,
        clock=clock,
        timezone_name=config.studio.timezone_name,
    )
    logger.debug("Booking service wired for '%s'", config.studio.name)
    return BookingService(lifecycle, availability)
