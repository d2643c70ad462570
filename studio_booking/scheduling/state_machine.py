"""
Finite state machine for the booking request lifecycle.

Defines the five booking statuses and the explicit transitions between
them. Any status change not listed in TRANSITIONS is rejected, so a
booking can only move along the documented edges.

Usage:
    sm = BookingStateMachine()
    sm.next_status(BookingStatus.PENDING, BookingTrigger.CONFIRM)
    # -> BookingStatus.CONFIRMED
"""

import logging
from dataclasses import dataclass
from enum import Enum

from studio_booking.errors import (
    AlreadyTerminalError,
    InvalidTransitionError,
    NotConfirmedError,
)
from studio_booking.schemas.booking_schema import TERMINAL_STATUSES, BookingStatus

logger = logging.getLogger(__name__)


class BookingTrigger(str, Enum):
    """Actions that move a booking between statuses."""
    CONFIRM = "confirm"
    DECLINE = "decline"
    CANCEL = "cancel"
    CONVERT = "convert"


@dataclass(frozen=True)
class Transition:
    """A single valid status transition."""
    from_status: BookingStatus
    to_status: BookingStatus
    trigger: BookingTrigger


class BookingStateMachine:
    """
    Transition table for booking requests.

    Declined, Cancelled and Completed are terminal: no trigger is valid
    from them.
    """

    TRANSITIONS: list[Transition] = [
        # --- Staff review ---
        Transition(BookingStatus.PENDING, BookingStatus.CONFIRMED, BookingTrigger.CONFIRM),
        Transition(BookingStatus.PENDING, BookingStatus.DECLINED, BookingTrigger.DECLINE),

        # --- Cancellation ---
        Transition(BookingStatus.PENDING, BookingStatus.CANCELLED, BookingTrigger.CANCEL),
        Transition(BookingStatus.CONFIRMED, BookingStatus.CANCELLED, BookingTrigger.CANCEL),

        # --- Conversion ---
        Transition(BookingStatus.CONFIRMED, BookingStatus.COMPLETED, BookingTrigger.CONVERT),
    ]

    def next_status(self, current: BookingStatus, trigger: BookingTrigger) -> BookingStatus:
        """
        Resolve the status reached by applying a trigger.

        Raises:
            NotConfirmedError: Converting from any status other than Confirmed.
            AlreadyTerminalError: Any trigger from a terminal status.
            InvalidTransitionError: Any other undefined edge.
        """
        for t in self.TRANSITIONS:
            if t.from_status == current and t.trigger == trigger:
                logger.debug(
                    "Status transition: %s -> %s (trigger: %s)",
                    current.value, t.to_status.value, trigger.value,
                )
                return t.to_status

        if trigger == BookingTrigger.CONVERT:
            raise NotConfirmedError(
                f"Only confirmed bookings can be converted to a shoot (status is '{current.value}')."
            )
        if current in TERMINAL_STATUSES:
            raise AlreadyTerminalError(
                f"Booking is already {current.value}; it cannot be {_past_tense(trigger)}."
            )
        valid = [t.value for t in self.valid_triggers(current)]
        raise InvalidTransitionError(
            f"Cannot {trigger.value} a booking that is '{current.value}'. "
            f"Valid actions: {valid}"
        )

    def can_transition(self, current: BookingStatus, trigger: BookingTrigger) -> bool:
        return trigger in self.valid_triggers(current)

    def valid_triggers(self, current: BookingStatus) -> list[BookingTrigger]:
        """Return all triggers valid from the given status."""
        return [t.trigger for t in self.TRANSITIONS if t.from_status == current]

    def is_terminal(self, status: BookingStatus) -> bool:
        return status in TERMINAL_STATUSES


def _past_tense(trigger: BookingTrigger) -> str:
    return {
        BookingTrigger.CONFIRM: "confirmed",
        BookingTrigger.DECLINE: "declined",
        BookingTrigger.CANCEL: "cancelled",
        BookingTrigger.CONVERT: "converted",
    }[trigger]
