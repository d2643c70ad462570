"""
In-process repositories for booking requests and availability slots.

Records are stored as deep copies so that callers never hold a live
reference into the store; every change goes through ``save``. The
booking store enforces reference uniqueness itself, independent of
how references are generated.
"""

from __future__ import annotations

import bisect
import logging
import threading
from datetime import datetime
from typing import Optional

from studio_booking.errors import DuplicateReferenceError, NotFoundError
from studio_booking.schemas.availability_schema import AvailabilitySlot
from studio_booking.schemas.booking_schema import BookingRequest, BookingStatus
from studio_booking.store.ports import BookingRepository, SlotRepository

logger = logging.getLogger(__name__)


class InMemoryBookingRepository(BookingRepository):
    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._bookings: dict[str, BookingRequest] = {}
        self._by_reference: dict[str, str] = {}

    def add(self, booking: BookingRequest) -> None:
        with self._lock:
            if booking.booking_reference in self._by_reference:
                raise DuplicateReferenceError(
                    f"Booking reference {booking.booking_reference} is already in use."
                )
            self._bookings[booking.id] = booking.model_copy(deep=True)
            self._by_reference[booking.booking_reference] = booking.id

    def get(self, booking_id: str) -> Optional[BookingRequest]:
        with self._lock:
            booking = self._bookings.get(booking_id)
            return booking.model_copy(deep=True) if booking else None

    def get_by_reference(self, reference: str) -> Optional[BookingRequest]:
        with self._lock:
            booking_id = self._by_reference.get(reference)
            return self.get(booking_id) if booking_id else None

    def save(self, booking: BookingRequest) -> None:
        with self._lock:
            existing = self._bookings.get(booking.id)
            if existing is None:
                raise NotFoundError(f"Booking {booking.id} not found.")
            if existing.booking_reference != booking.booking_reference:
                raise ValueError("booking reference is immutable once assigned")
            self._bookings[booking.id] = booking.model_copy(deep=True)

    def delete(self, booking_id: str) -> None:
        with self._lock:
            booking = self._bookings.pop(booking_id, None)
            if booking is None:
                raise NotFoundError(f"Booking {booking_id} not found.")
            # The reference stays reserved so it is never reissued.
            logger.debug("Booking %s removed from store", booking.booking_reference)

    def list(
        self,
        status: Optional[BookingStatus] = None,
        client_id: Optional[str] = None,
    ) -> list[BookingRequest]:
        with self._lock:
            matches = [
                b.model_copy(deep=True)
                for b in self._bookings.values()
                if (status is None or b.status == status)
                and (client_id is None or b.client_id == client_id)
            ]
        return sorted(matches, key=lambda b: b.created_date, reverse=True)

    def reference_exists(self, reference: str) -> bool:
        with self._lock:
            return reference in self._by_reference

    def count(self, status: Optional[BookingStatus] = None) -> int:
        with self._lock:
            if status is None:
                return len(self._bookings)
            return sum(1 for b in self._bookings.values() if b.status == status)


class InMemorySlotRepository(SlotRepository):
    """Slot store with a per-photographer index sorted by start time."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._slots: dict[str, AvailabilitySlot] = {}
        self._index: dict[str, list[tuple[datetime, str]]] = {}

    def add(self, slot: AvailabilitySlot) -> None:
        with self._lock:
            if slot.id in self._slots:
                raise ValueError(f"slot {slot.id} already exists")
            self._slots[slot.id] = slot.model_copy(deep=True)
            bisect.insort(self._index.setdefault(slot.photographer_id, []), (slot.start_time, slot.id))

    def get(self, slot_id: str) -> Optional[AvailabilitySlot]:
        with self._lock:
            slot = self._slots.get(slot_id)
            return slot.model_copy(deep=True) if slot else None

    def save(self, slot: AvailabilitySlot) -> None:
        with self._lock:
            existing = self._slots.get(slot.id)
            if existing is None:
                raise NotFoundError(f"Availability slot {slot.id} not found.")
            if (existing.photographer_id, existing.start_time) != (slot.photographer_id, slot.start_time):
                self._unindex(existing)
                bisect.insort(
                    self._index.setdefault(slot.photographer_id, []), (slot.start_time, slot.id)
                )
            self._slots[slot.id] = slot.model_copy(deep=True)

    def delete(self, slot_id: str) -> None:
        with self._lock:
            slot = self._slots.pop(slot_id, None)
            if slot is None:
                raise NotFoundError(f"Availability slot {slot_id} not found.")
            self._unindex(slot)

    def _unindex(self, slot: AvailabilitySlot) -> None:
        entries = self._index.get(slot.photographer_id, [])
        entries.remove((slot.start_time, slot.id))

    def list_for_photographer(
        self,
        photographer_id: str,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> list[AvailabilitySlot]:
        with self._lock:
            entries = self._index.get(photographer_id, [])
            if end is not None:
                # Only slots starting before the window end can intersect it.
                entries = entries[: bisect.bisect_left(entries, (end, ""))]
            slots = [self._slots[slot_id] for _, slot_id in entries]
            if start is not None:
                slots = [s for s in slots if s.end_time > start]
            return [s.model_copy(deep=True) for s in slots]

    def list_between(self, start: datetime, end: datetime) -> list[AvailabilitySlot]:
        with self._lock:
            photographers = list(self._index)
            slots = [
                slot
                for photographer_id in photographers
                for slot in self.list_for_photographer(photographer_id, start, end)
            ]
        return sorted(slots, key=lambda s: (s.start_time, s.photographer_id))

    def find_by_booking(self, booking_id: str) -> list[AvailabilitySlot]:
        with self._lock:
            return [
                s.model_copy(deep=True)
                for s in self._slots.values()
                if s.booking_request_id == booking_id
            ]
