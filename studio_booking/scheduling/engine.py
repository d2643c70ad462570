"""
Scheduling engine: find, reserve and release photographer slots.

Reservation is a read-modify-write over the photographer's slot set and
runs entirely under that photographer's lock. Two concurrent Confirm
calls for the same window therefore serialize, and the second sees the
slot already booked.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import date, datetime
from typing import Iterable, Iterator, Optional

from studio_booking.errors import NoAvailabilityError, StorageError
from studio_booking.scheduling.availability import AvailabilityStore
from studio_booking.scheduling.conflicts import ConflictDetector
from studio_booking.schemas.availability_schema import AvailabilitySlot

logger = logging.getLogger(__name__)


class SchedulingEngine:
    """Composes the availability store and conflict detector into atomic reservations."""

    def __init__(
        self,
        availability: AvailabilityStore,
        detector: Optional[ConflictDetector] = None,
    ) -> None:
        self.availability = availability
        self.detector = detector or availability.detector
        self._slots = availability.slots
        self._locks = availability.locks

    @contextmanager
    def holding(self, photographer_ids: Iterable[str]) -> Iterator[None]:
        """Hold the locks of several photographers across a multi-step change."""
        with self._locks.hold_many(photographer_ids):
            yield

    def free_slots(self, day: date, photographer_id: Optional[str] = None) -> list[AvailabilitySlot]:
        return self.availability.list_available(day, photographer_id)

    def find_slot(
        self, photographer_id: str, start: datetime, end: datetime
    ) -> Optional[AvailabilitySlot]:
        """
        Return the first free slot fully containing ``[start, end)``, or None.

        A candidate is rejected if any part of it overlaps a booked or
        blocked slot, since booking it would break the no-overlap rule.
        """
        nearby = self._slots.list_for_photographer(photographer_id, start, end)
        for candidate in self.detector.containing_candidates(nearby, start, end):
            around = self._slots.list_for_photographer(
                photographer_id, candidate.start_time, candidate.end_time
            )
            if not self.detector.is_shadowed(candidate, around):
                return candidate
        return None

    def reserve(
        self, photographer_id: str, start: datetime, end: datetime, booking_id: str
    ) -> AvailabilitySlot:
        """
        Atomically find a free slot for the window and bind it to a booking.

        Raises:
            NoAvailabilityError: If no free slot contains the window.
        """
        with self._locks.hold(photographer_id):
            slot = self.find_slot(photographer_id, start, end)
            if slot is None:
                raise NoAvailabilityError(
                    f"No slots available for photographer {photographer_id} "
                    f"on {start:%Y-%m-%d} from {start:%H:%M} to {end:%H:%M}."
                )
            booked = slot.model_copy(
                update={
                    "is_booked": True,
                    "booking_request_id": booking_id,
                    "updated_date": self.availability.now(),
                }
            )
            self._slots.save(booked)
        logger.info(
            "Slot %s reserved for booking %s (%s %s-%s)",
            slot.id, booking_id, photographer_id, start.strftime("%Y-%m-%d %H:%M"), end.strftime("%H:%M"),
        )
        return booked

    def bound_slots(self, booking_id: str) -> list[AvailabilitySlot]:
        return self._slots.find_by_booking(booking_id)

    def release(self, booking_id: str) -> list[AvailabilitySlot]:
        """Unbind every slot held by a booking. Returns the slots as they were."""
        released = []
        for slot in self._slots.find_by_booking(booking_id):
            with self._locks.hold(slot.photographer_id):
                current = self._slots.get(slot.id)
                if current is None or current.booking_request_id != booking_id:
                    continue
                self._slots.save(
                    current.model_copy(
                        update={
                            "is_booked": False,
                            "booking_request_id": None,
                            "updated_date": self.availability.now(),
                        }
                    )
                )
                released.append(current)
            logger.info("Slot %s released from booking %s", slot.id, booking_id)
        return released

    def restore(self, slots: Iterable[AvailabilitySlot]) -> None:
        """Write back slot records captured before a failed multi-step change."""
        for slot in slots:
            with self._locks.hold(slot.photographer_id):
                try:
                    self._slots.save(slot)
                except StorageError:
                    logger.error("Could not restore slot %s after a failed write", slot.id)
                    raise
