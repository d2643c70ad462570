"""
Temporal conflict rules for photographer slots.

All intervals are half-open: ``[start, end)``. A slot ending at 12:00
does not conflict with one starting at 12:00.
"""

from datetime import datetime
from typing import Iterable, Optional

from studio_booking.schemas.availability_schema import AvailabilitySlot


def overlaps(start_a: datetime, end_a: datetime, start_b: datetime, end_b: datetime) -> bool:
    return start_a < end_b and start_b < end_a


def contains(slot: AvailabilitySlot, start: datetime, end: datetime) -> bool:
    return slot.start_time <= start and end <= slot.end_time


class ConflictDetector:
    """Answers overlap and fit questions over one photographer's slot set."""

    def conflicts(
        self,
        slots: Iterable[AvailabilitySlot],
        start: datetime,
        end: datetime,
        exclude_id: Optional[str] = None,
    ) -> list[AvailabilitySlot]:
        """Return the booked or blocked slots overlapping ``[start, end)``."""
        return [
            s
            for s in slots
            if s.is_committed
            and s.id != exclude_id
            and overlaps(s.start_time, s.end_time, start, end)
        ]

    def has_conflict(
        self,
        slots: Iterable[AvailabilitySlot],
        start: datetime,
        end: datetime,
        exclude_id: Optional[str] = None,
    ) -> bool:
        return bool(self.conflicts(slots, start, end, exclude_id))

    def is_shadowed(self, slot: AvailabilitySlot, slots: Iterable[AvailabilitySlot]) -> bool:
        """An open slot overlapped by a commitment is never offered."""
        return self.has_conflict(slots, slot.start_time, slot.end_time, exclude_id=slot.id)

    def containing_candidates(
        self, slots: Iterable[AvailabilitySlot], start: datetime, end: datetime
    ) -> list[AvailabilitySlot]:
        """
        Open slots that fully contain ``[start, end)``.

        Ordered by start time, then by length, so the tightest early fit
        is tried first. Slots are never split: a slot that only partly
        covers the window is not a candidate.
        """
        matches = [s for s in slots if s.is_open and contains(s, start, end)]
        return sorted(matches, key=lambda s: (s.start_time, s.end_time))
