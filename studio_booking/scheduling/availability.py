"""
Photographer availability management.

Creates, blocks, lists and deletes slots. Every write that depends on
an overlap check runs under the photographer's lock, so two concurrent
writers can never both pass the check against the same slot set.
"""

from __future__ import annotations

import logging
import uuid
from datetime import date, datetime, time, timedelta, timezone
from typing import Callable, Optional
from zoneinfo import ZoneInfo

from studio_booking.config import AvailabilityConfig
from studio_booking.errors import (
    NotFoundError,
    OverlapError,
    SlotInUseError,
    ValidationError,
)
from studio_booking.scheduling.conflicts import ConflictDetector, overlaps
from studio_booking.scheduling.locks import KeyedLocks
from studio_booking.schemas.availability_schema import AvailabilitySlot
from studio_booking.store.ports import PhotographerDirectory, SlotRepository
from studio_booking.utils import day_bounds

logger = logging.getLogger(__name__)

WEEKDAY_NAMES = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]


class AvailabilityStore:
    """Owns photographer slot records: open, booked, blocked and recurring."""

    def __init__(
        self,
        slots: SlotRepository,
        photographers: PhotographerDirectory,
        detector: Optional[ConflictDetector] = None,
        locks: Optional[KeyedLocks] = None,
        config: Optional[AvailabilityConfig] = None,
        clock: Optional[Callable[[], datetime]] = None,
        timezone_name: str = "UTC",
    ) -> None:
        self.slots = slots
        self.detector = detector or ConflictDetector()
        self.locks = locks or KeyedLocks("photographer")
        self._photographers = photographers
        self._config = config or AvailabilityConfig()
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._tz = ZoneInfo(timezone_name)

    # ------------------------------------------------------------------ #
    # Helpers
    # ------------------------------------------------------------------ #

    def now(self) -> datetime:
        return self._clock()

    def _today(self) -> date:
        return self._clock().astimezone(self._tz).date()

    def _require_photographer(self, photographer_id: str) -> None:
        if not self._photographers.photographer_exists(photographer_id):
            raise NotFoundError(f"Photographer {photographer_id} does not exist.")

    def _wall_clock(self, value: datetime) -> datetime:
        """Slots hold naive studio wall-clock times; aware values are converted."""
        if value.tzinfo is None:
            return value
        return value.astimezone(self._tz).replace(tzinfo=None)

    def _require_range(self, start: datetime, end: datetime) -> tuple[datetime, datetime]:
        start, end = self._wall_clock(start), self._wall_clock(end)
        if end <= start:
            raise ValidationError("Start time must be before end time.")
        return start, end

    def _new_slot(self, photographer_id: str, start: datetime, end: datetime, **fields) -> AvailabilitySlot:
        now = self.now()
        return AvailabilitySlot(
            id=uuid.uuid4().hex,
            photographer_id=photographer_id,
            start_time=start,
            end_time=end,
            created_date=now,
            updated_date=now,
            **fields,
        )

    def _insert_checked(self, slot: AvailabilitySlot) -> AvailabilitySlot:
        """Overlap-check and insert under the photographer's lock."""
        with self.locks.hold(slot.photographer_id):
            existing = self.slots.list_for_photographer(
                slot.photographer_id, slot.start_time, slot.end_time
            )
            clashes = self.detector.conflicts(existing, slot.start_time, slot.end_time)
            if clashes:
                first = clashes[0]
                logger.info(
                    "Slot for %s at %s rejected: overlaps slot %s",
                    slot.photographer_id, slot.start_time.isoformat(), first.id,
                )
                raise OverlapError(
                    "This time overlaps a "
                    f"{'booked' if first.is_booked else 'blocked'} slot "
                    f"({first.start_time:%Y-%m-%d %H:%M}-{first.end_time:%H:%M})."
                )
            self.slots.add(slot)
        return slot

    # ------------------------------------------------------------------ #
    # Writes
    # ------------------------------------------------------------------ #

    def create_slot(
        self,
        photographer_id: str,
        start: datetime,
        end: datetime,
        notes: Optional[str] = None,
        recurring_day_of_week: Optional[int] = None,
    ) -> AvailabilitySlot:
        """
        Create an open slot.

        Raises:
            ValidationError: If ``end <= start``, or ``recurring_day_of_week``
                is not the weekday of ``start``.
            NotFoundError: If the photographer is unknown.
            OverlapError: If the slot overlaps a booked or blocked slot.
        """
        start, end = self._require_range(start, end)
        if recurring_day_of_week is not None and recurring_day_of_week != start.weekday():
            raise ValidationError(
                f"A slot starting on a {WEEKDAY_NAMES[start.weekday()]} cannot recur "
                f"on day {recurring_day_of_week}."
            )
        self._require_photographer(photographer_id)
        slot = self._new_slot(
            photographer_id,
            start,
            end,
            notes=notes,
            is_recurring=recurring_day_of_week is not None,
            recurring_day_of_week=recurring_day_of_week,
        )
        self._insert_checked(slot)
        logger.info(
            "Availability created for %s: %s - %s",
            photographer_id, start.isoformat(), end.isoformat(),
        )
        return slot

    def block_slot(
        self,
        photographer_id: str,
        start: datetime,
        end: datetime,
        notes: Optional[str] = None,
    ) -> AvailabilitySlot:
        """Mark a window as unavailable. Same checks as ``create_slot``."""
        start, end = self._require_range(start, end)
        self._require_photographer(photographer_id)
        slot = self._new_slot(photographer_id, start, end, is_blocked=True, notes=notes)
        self._insert_checked(slot)
        logger.info(
            "Time blocked for %s: %s - %s (%s)",
            photographer_id, start.isoformat(), end.isoformat(), notes or "no reason given",
        )
        return slot

    def create_recurring_slots(
        self,
        photographer_id: str,
        day_of_week: int,
        start_time: time,
        end_time: time,
        until: Optional[date] = None,
        starting: Optional[date] = None,
    ) -> list[AvailabilitySlot]:
        """
        Create one open slot per week on ``day_of_week`` (0 = Monday).

        The series runs from ``starting`` (default today) through ``until``
        (default the configured horizon). Occurrences overlapping any
        existing slot of the photographer are skipped, so re-applying a
        series does not duplicate it.
        """
        if not 0 <= day_of_week <= 6:
            raise ValidationError(f"Day of week must be 0-6, got {day_of_week}.")
        if end_time <= start_time:
            raise ValidationError("Start time must be before end time.")
        self._require_photographer(photographer_id)

        first_day = starting or self._today()
        last_day = until or first_day + timedelta(weeks=self._config.recurring_horizon_weeks)
        if last_day < first_day:
            raise ValidationError("The series must end on or after its first day.")

        current = first_day + timedelta(days=(day_of_week - first_day.weekday()) % 7)
        span_start, _ = day_bounds(first_day)
        _, span_end = day_bounds(last_day)

        created: list[AvailabilitySlot] = []
        with self.locks.hold(photographer_id):
            existing = self.slots.list_for_photographer(photographer_id, span_start, span_end)
            while current <= last_day:
                start = datetime.combine(current, start_time)
                end = datetime.combine(current, end_time)
                if any(overlaps(s.start_time, s.end_time, start, end) for s in existing):
                    logger.debug(
                        "Skipping recurring occurrence for %s on %s: overlaps an existing slot",
                        photographer_id, current.isoformat(),
                    )
                else:
                    slot = self._new_slot(
                        photographer_id,
                        start,
                        end,
                        is_recurring=True,
                        recurring_day_of_week=day_of_week,
                    )
                    self.slots.add(slot)
                    created.append(slot)
                current += timedelta(weeks=1)

        logger.info(
            "Recurring availability for %s on %ss: %d slot(s) created through %s",
            photographer_id, WEEKDAY_NAMES[day_of_week], len(created), last_day.isoformat(),
        )
        return created

    def delete_slot(self, slot_id: str) -> None:
        """
        Delete a slot.

        Raises:
            NotFoundError: If the slot is unknown.
            SlotInUseError: If the slot is booked.
        """
        slot = self.get_slot(slot_id)
        with self.locks.hold(slot.photographer_id):
            slot = self.get_slot(slot_id)
            if slot.is_booked:
                raise SlotInUseError("Cannot delete a booked availability slot.")
            self.slots.delete(slot_id)
        logger.info("Availability slot deleted: %s", slot_id)

    def update_slot_notes(self, slot_id: str, notes: Optional[str]) -> AvailabilitySlot:
        slot = self.get_slot(slot_id)
        with self.locks.hold(slot.photographer_id):
            slot = self.get_slot(slot_id).model_copy(
                update={"notes": notes or None, "updated_date": self.now()}
            )
            self.slots.save(slot)
        return slot

    # ------------------------------------------------------------------ #
    # Reads
    # ------------------------------------------------------------------ #

    def get_slot(self, slot_id: str) -> AvailabilitySlot:
        slot = self.slots.get(slot_id)
        if slot is None:
            raise NotFoundError(f"Availability slot {slot_id} not found.")
        return slot

    def list_available(
        self, day: date, photographer_id: Optional[str] = None
    ) -> list[AvailabilitySlot]:
        """
        Open slots on ``day``, ordered by start time.

        Open slots overlapped by a booked or blocked slot of the same
        photographer are left out.
        """
        start, end = day_bounds(day)
        if photographer_id is not None:
            candidates = self.slots.list_for_photographer(photographer_id, start, end)
        else:
            candidates = self.slots.list_between(start, end)

        available = []
        for slot in candidates:
            if not slot.is_open:
                continue
            neighbours = self.slots.list_for_photographer(
                slot.photographer_id, slot.start_time, slot.end_time
            )
            if not self.detector.is_shadowed(slot, neighbours):
                available.append(slot)
        return available

    def list_photographer_slots(
        self,
        photographer_id: str,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> list[AvailabilitySlot]:
        """Every slot of a photographer, in any state, ordered by start time."""
        if start is not None:
            start = self._wall_clock(start)
        if end is not None:
            end = self._wall_clock(end)
        return self.slots.list_for_photographer(photographer_id, start, end)
