"""
Booking request lifecycle.

Creates booking requests and drives them through
Pending -> Confirmed | Declined | Cancelled, and Confirmed -> Completed |
Cancelled, applying the slot side effects of each transition. Every
transition runs under the booking's lock; slot changes additionally run
under the photographer's lock. A failed write rolls back the slot side
effect before the error is re-raised, so callers never observe a
half-applied transition.
"""

from __future__ import annotations

import uuid
from datetime import date, datetime, timezone
from typing import Callable, Optional, Union
from zoneinfo import ZoneInfo

from pydantic import ValidationError as PydanticValidationError

from studio_booking.config import BookingConfig
from studio_booking.errors import (
    AlreadyConvertedError,
    DuplicateReferenceError,
    NoAvailabilityError,
    NotFoundError,
    ValidationError,
)
from studio_booking.logging_context import get_request_logger
from studio_booking.scheduling.converter import ShootConverter
from studio_booking.scheduling.engine import SchedulingEngine
from studio_booking.scheduling.locks import KeyedLocks
from studio_booking.scheduling.reference import BookingReferenceGenerator
from studio_booking.scheduling.state_machine import BookingStateMachine, BookingTrigger
from studio_booking.schemas.booking_schema import BookingDraft, BookingRequest, BookingStatus
from studio_booking.schemas.party_schema import CallerContext
from studio_booking.store.ports import (
    BookingRepository,
    ClientDirectory,
    PackageCatalogPort,
    PhotographerDirectory,
)

logger = get_request_logger(__name__)


def _describe_validation(exc: PydanticValidationError) -> str:
    parts = []
    for err in exc.errors():
        location = ".".join(str(p) for p in err["loc"]) or "request"
        parts.append(f"{location}: {err['msg']}")
    return "; ".join(parts)


class BookingLifecycle:
    """State machine plus side effects for booking requests."""

    def __init__(
        self,
        bookings: BookingRepository,
        engine: SchedulingEngine,
        converter: ShootConverter,
        clients: ClientDirectory,
        photographers: PhotographerDirectory,
        packages: PackageCatalogPort,
        config: Optional[BookingConfig] = None,
        reference_generator: Optional[BookingReferenceGenerator] = None,
        clock: Optional[Callable[[], datetime]] = None,
        timezone_name: str = "UTC",
    ) -> None:
        self._bookings = bookings
        self._engine = engine
        self._converter = converter
        self._clients = clients
        self._photographers = photographers
        self._packages = packages
        self._config = config or BookingConfig()
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._tz = ZoneInfo(timezone_name)
        self._references = reference_generator or BookingReferenceGenerator(
            prefix=self._config.reference_prefix,
            suffix_digits=self._config.reference_suffix_digits,
            max_attempts=self._config.reference_max_attempts,
            clock=self._clock,
        )
        self._machine = BookingStateMachine()
        self._locks = KeyedLocks("booking")

    # ------------------------------------------------------------------ #
    # Creation
    # ------------------------------------------------------------------ #

    def create(
        self,
        draft: Union[BookingDraft, dict],
        caller: Optional[CallerContext] = None,
    ) -> BookingRequest:
        """
        Validate a booking draft and store it as a Pending request.

        No slot is reserved: the preferred date and time are intent only.

        Raises:
            ValidationError: Malformed fields, past date or out-of-range duration.
            NotFoundError: Unknown client, caller without a client profile,
                unknown photographer or package.
        """
        if not isinstance(draft, BookingDraft):
            try:
                draft = BookingDraft.model_validate(draft)
            except PydanticValidationError as exc:
                raise ValidationError(_describe_validation(exc)) from exc

        client_id = self._resolve_client(draft, caller)
        today = self._clock().astimezone(self._tz).date()
        if draft.preferred_date < today and not self._config.allow_past_dates:
            raise ValidationError("Booking date cannot be in the past.")

        if draft.photographer_id and not self._photographers.photographer_exists(draft.photographer_id):
            raise NotFoundError(f"Photographer {draft.photographer_id} does not exist.")

        estimated_price = None
        duration = draft.estimated_duration_hours
        if draft.service_package_id:
            package = self._packages.get_package(draft.service_package_id)
            if package is None:
                raise NotFoundError(f"Service package {draft.service_package_id} does not exist.")
            estimated_price = package.effective_price
            if duration is None:
                duration = package.duration_hours
        if duration is None:
            duration = self._config.default_duration_hours
        if not self._config.min_duration_hours <= duration <= self._config.max_duration_hours:
            raise ValidationError(
                f"Estimated duration must be between {self._config.min_duration_hours} and "
                f"{self._config.max_duration_hours} hours, got {duration}."
            )

        fields = draft.model_dump(exclude={"client_id", "estimated_duration_hours"})
        for attempt in range(1, self._references.max_attempts + 1):
            now = self._clock()
            booking = BookingRequest(
                id=uuid.uuid4().hex,
                booking_reference=self._references.generate(self._bookings.reference_exists),
                client_id=client_id,
                estimated_duration_hours=duration,
                estimated_price=estimated_price,
                status=BookingStatus.PENDING,
                created_date=now,
                updated_date=now,
                **fields,
            )
            try:
                self._bookings.add(booking)
            except DuplicateReferenceError:
                # Lost a race for the reference between the check and the insert.
                logger.debug("Reference %s taken on insert (attempt %d)", booking.booking_reference, attempt)
                continue
            logger.info(
                "Booking %s created for client %s: %s on %s at %s",
                booking.booking_reference, client_id, booking.event_type,
                booking.preferred_date.isoformat(), booking.preferred_start_time.strftime("%H:%M"),
            )
            return booking
        raise DuplicateReferenceError("Could not allocate a unique booking reference.")

    def _resolve_client(self, draft: BookingDraft, caller: Optional[CallerContext]) -> str:
        if draft.client_id:
            if not self._clients.client_exists(draft.client_id):
                raise NotFoundError(f"Client {draft.client_id} does not exist.")
            return draft.client_id
        if caller is None:
            raise ValidationError("A client is required: pass client_id or a caller context.")
        client_id = self._clients.resolve_client(caller)
        if client_id is None:
            raise NotFoundError(f"No client profile is linked to user {caller.user_id}.")
        return client_id

    # ------------------------------------------------------------------ #
    # Transitions
    # ------------------------------------------------------------------ #

    def _require(self, booking_id: str) -> BookingRequest:
        booking = self._bookings.get(booking_id)
        if booking is None:
            raise NotFoundError(f"Booking {booking_id} not found.")
        return booking

    def _log_transition(self, booking: BookingRequest, old: BookingStatus) -> None:
        logger.info(
            "Booking %s: %s -> %s", booking.booking_reference, old.value, booking.status.value
        )

    def confirm(
        self,
        booking_id: str,
        photographer_id: Optional[str] = None,
        admin_notes: Optional[str] = None,
        on_date: Optional[date] = None,
    ) -> BookingRequest:
        """
        Confirm a pending booking and reserve the matching slot.

        The photographer is the explicit argument, else the one requested.
        The slot is searched on the preferred date unless ``on_date``
        explicitly re-requests the booking's alternative date; dates are
        never substituted silently.

        Raises:
            NotFoundError: Unknown booking or photographer.
            AlreadyTerminalError / InvalidTransitionError: Booking is not Pending.
            ValidationError: No photographer, or ``on_date`` is not one of the booking's dates.
            NoAvailabilityError: No free slot contains the requested window.
        """
        with self._locks.hold(booking_id):
            booking = self._require(booking_id)
            new_status = self._machine.next_status(booking.status, BookingTrigger.CONFIRM)

            effective = photographer_id or booking.photographer_id
            if not effective:
                raise ValidationError("A photographer must be assigned before confirming the booking.")
            if not self._photographers.photographer_exists(effective):
                raise NotFoundError(f"Photographer {effective} does not exist.")

            day = on_date or booking.preferred_date
            if day not in (booking.preferred_date, booking.alternative_date):
                raise ValidationError(
                    f"{day.isoformat()} is neither the preferred nor the alternative date of this booking."
                )
            start, end = booking.requested_window(day)

            with self._engine.holding([effective]):
                try:
                    slot = self._engine.reserve(effective, start, end, booking.id)
                except NoAvailabilityError as exc:
                    logger.info("Booking %s not confirmed: %s", booking.booking_reference, exc.message)
                    raise
                now = self._clock()
                updates = {
                    "status": new_status,
                    "photographer_id": effective,
                    "scheduled_start": start,
                    "scheduled_end": end,
                    "confirmed_date": now,
                    "updated_date": now,
                }
                if admin_notes:
                    updates["admin_notes"] = admin_notes
                confirmed = booking.model_copy(update=updates)
                try:
                    self._bookings.save(confirmed)
                except Exception:
                    logger.warning(
                        "Confirming %s failed after reserving slot %s; releasing it",
                        booking.booking_reference, slot.id,
                    )
                    self._engine.release(booking.id)
                    raise

        self._log_transition(confirmed, booking.status)
        return confirmed

    def decline(self, booking_id: str, reason: str) -> BookingRequest:
        """
        Decline a pending booking. A non-empty reason is required.

        No slot is touched: none is reserved before confirmation.
        """
        with self._locks.hold(booking_id):
            booking = self._require(booking_id)
            if not reason or not reason.strip():
                raise ValidationError("A reason is required to decline a booking.")
            new_status = self._machine.next_status(booking.status, BookingTrigger.DECLINE)
            now = self._clock()
            declined = booking.model_copy(
                update={
                    "status": new_status,
                    "decline_reason": reason.strip(),
                    "declined_date": now,
                    "updated_date": now,
                }
            )
            self._bookings.save(declined)

        self._log_transition(declined, booking.status)
        return declined

    def cancel(self, booking_id: str) -> BookingRequest:
        """Cancel a pending or confirmed booking, releasing any reserved slot."""
        with self._locks.hold(booking_id):
            booking = self._require(booking_id)
            new_status = self._machine.next_status(booking.status, BookingTrigger.CANCEL)
            now = self._clock()
            cancelled = booking.model_copy(
                update={"status": new_status, "cancelled_date": now, "updated_date": now}
            )
            bound = self._engine.bound_slots(booking.id)
            with self._engine.holding(s.photographer_id for s in bound):
                self._bookings.save(cancelled)
                try:
                    self._engine.release(booking.id)
                except Exception:
                    logger.warning(
                        "Releasing slots of %s failed; restoring booking status",
                        booking.booking_reference,
                    )
                    self._engine.restore(bound)
                    self._bookings.save(booking)
                    raise

        self._log_transition(cancelled, booking.status)
        return cancelled

    def convert_to_shoot(self, booking_id: str) -> str:
        """
        Materialize a confirmed booking as a scheduled shoot.

        Raises:
            AlreadyConvertedError: The booking already has a shoot.
            NotConfirmedError: The booking is not Confirmed.
        """
        with self._locks.hold(booking_id):
            booking = self._require(booking_id)
            if booking.shoot_id is not None:
                raise AlreadyConvertedError(
                    f"Booking {booking.booking_reference} has already been converted "
                    f"to shoot {booking.shoot_id}."
                )
            new_status = self._machine.next_status(booking.status, BookingTrigger.CONVERT)
            shoot_id = self._converter.convert(booking)
            completed = booking.model_copy(
                update={"status": new_status, "shoot_id": shoot_id, "updated_date": self._clock()}
            )
            try:
                self._bookings.save(completed)
            except Exception:
                logger.error(
                    "Shoot %s was created for %s but the booking could not be updated; "
                    "retrying the conversion reuses that shoot",
                    shoot_id, booking.booking_reference,
                )
                raise

        self._log_transition(completed, booking.status)
        return shoot_id

    def delete(self, booking_id: str) -> None:
        """Administrative hard delete from any status. Bound slots are released first."""
        with self._locks.hold(booking_id):
            booking = self._require(booking_id)
            bound = self._engine.bound_slots(booking.id)
            with self._engine.holding(s.photographer_id for s in bound):
                self._engine.release(booking.id)
                try:
                    self._bookings.delete(booking.id)
                except Exception:
                    self._engine.restore(bound)
                    raise
        logger.info("Booking %s deleted (%s)", booking.booking_reference, booking.status.value)

    def update_admin_notes(self, booking_id: str, notes: Optional[str]) -> BookingRequest:
        with self._locks.hold(booking_id):
            booking = self._require(booking_id)
            updated = booking.model_copy(
                update={"admin_notes": notes or None, "updated_date": self._clock()}
            )
            self._bookings.save(updated)
        return updated

    # ------------------------------------------------------------------ #
    # Queries
    # ------------------------------------------------------------------ #

    def get(self, booking_id: str) -> BookingRequest:
        return self._require(booking_id)

    def find_by_reference(self, reference: str) -> Optional[BookingRequest]:
        return self._bookings.get_by_reference(reference.strip())

    def list_all(self) -> list[BookingRequest]:
        return self._bookings.list()

    def list_by_status(self, status: BookingStatus) -> list[BookingRequest]:
        return self._bookings.list(status=status)

    def list_by_client(self, client_id: str) -> list[BookingRequest]:
        return self._bookings.list(client_id=client_id)

    def count_pending(self) -> int:
        return self._bookings.count(BookingStatus.PENDING)

    def count_by_status(self, status: BookingStatus) -> int:
        return self._bookings.count(status)

    def status_counts(self) -> dict[BookingStatus, int]:
        return {status: self._bookings.count(status) for status in BookingStatus}
