"""Turns a confirmed booking into a scheduled shoot in the shoot-management subsystem."""

import logging
from decimal import Decimal

from studio_booking.errors import NotConfirmedError, ValidationError
from studio_booking.schemas.booking_schema import BookingRequest, BookingStatus
from studio_booking.schemas.shoot_schema import ShootDraft
from studio_booking.store.ports import ShootManagementPort
from studio_booking.utils import split_hours

logger = logging.getLogger(__name__)


class ShootConverter:
    def __init__(self, shoots: ShootManagementPort) -> None:
        self._shoots = shoots

    def build_draft(self, booking: BookingRequest) -> ShootDraft:
        if booking.status != BookingStatus.CONFIRMED:
            raise NotConfirmedError("Only confirmed bookings can be converted to a shoot.")
        if not booking.photographer_id:
            raise ValidationError("A photographer must be assigned before converting to a shoot.")

        start, end = booking.scheduled_start, booking.scheduled_end
        if start is None or end is None:
            start, end = booking.requested_window()
        hours, minutes = split_hours(booking.estimated_duration_hours)

        return ShootDraft(
            title=f"{booking.event_type} - {booking.booking_reference}",
            description=booking.special_requirements,
            scheduled_start=start,
            scheduled_end=end,
            duration_hours=hours,
            duration_minutes=minutes,
            location=booking.location,
            price=booking.estimated_price if booking.estimated_price is not None else Decimal("0"),
            client_id=booking.client_id,
            photographer_id=booking.photographer_id,
            booking_reference=booking.booking_reference,
            notes=f"Converted from booking {booking.booking_reference}",
        )

    def convert(self, booking: BookingRequest) -> str:
        """Create the shoot and return its id."""
        draft = self.build_draft(booking)
        shoot_id = self._shoots.create_shoot(draft)
        logger.debug("Booking %s materialized as shoot %s", booking.booking_reference, shoot_id)
        return shoot_id
