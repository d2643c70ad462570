"""
Error taxonomy for the booking and availability engine.

Every business-rule failure derives from BookingError and carries a
message that can be shown to staff or clients as the reason an action
was rejected. StorageError is deliberately outside that hierarchy: it
signals an infrastructure failure the caller may retry.
"""


class BookingError(Exception):
    """Base class for recoverable, caller-facing booking failures."""

    code = "booking_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(BookingError):
    """Raised when input is malformed (bad duration, empty reason, end <= start)."""

    code = "validation_error"


class NotFoundError(BookingError):
    """Raised when a booking, reference, slot, client, photographer or package is unknown."""

    code = "not_found"


class InvalidTransitionError(BookingError):
    """Raised when a status change is not an edge of the booking state machine."""

    code = "invalid_transition"


class AlreadyTerminalError(InvalidTransitionError):
    """Raised when acting on a Declined, Cancelled or Completed booking."""

    code = "already_terminal"


class NotConfirmedError(InvalidTransitionError):
    """Raised when converting a booking that is not Confirmed."""

    code = "not_confirmed"


class NoAvailabilityError(BookingError):
    """Raised when no free slot contains the requested window."""

    code = "no_availability"


class OverlapError(BookingError):
    """Raised when a new slot overlaps a booked or blocked slot."""

    code = "overlap"


class SlotInUseError(BookingError):
    """Raised when deleting a slot that is bound to a booking."""

    code = "slot_in_use"


class AlreadyConvertedError(BookingError):
    """Raised when converting a booking that already has a shoot."""

    code = "already_converted"


class DuplicateReferenceError(BookingError):
    """Raised by a booking store when a reference is already taken."""

    code = "duplicate_reference"


class StorageError(Exception):
    """Infrastructure failure in a repository (connection loss, I/O error).

    Not a business rule violation. The engine never retries these;
    callers may retry at their discretion.
    """
