"""Booking request data models."""

from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from studio_booking.utils import is_valid_email, normalize_phone, window_for


class BookingStatus(str, Enum):
    """Lifecycle status of a booking request."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    DECLINED = "declined"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


TERMINAL_STATUSES = frozenset(
    {BookingStatus.DECLINED, BookingStatus.CANCELLED, BookingStatus.COMPLETED}
)


class BookingDraft(BaseModel):
    """Caller-supplied fields for a new booking request."""

    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    client_id: Optional[str] = None
    photographer_id: Optional[str] = None
    service_package_id: Optional[str] = None
    event_type: str = Field(min_length=1, max_length=200)
    preferred_date: date
    alternative_date: Optional[date] = None
    preferred_start_time: time
    estimated_duration_hours: Optional[float] = Field(default=None, gt=0)
    location: str = Field(min_length=1, max_length=500)
    special_requirements: Optional[str] = Field(default=None, max_length=2000)
    contact_name: Optional[str] = Field(default=None, max_length=100)
    contact_email: Optional[str] = Field(default=None, max_length=200)
    contact_phone: Optional[str] = Field(default=None, max_length=20)

    @field_validator("contact_email")
    @classmethod
    def _check_email(cls, value: Optional[str]) -> Optional[str]:
        if value and not is_valid_email(value):
            raise ValueError("contact email is not a valid address")
        return value or None

    @field_validator("contact_phone")
    @classmethod
    def _normalize_phone(cls, value: Optional[str]) -> Optional[str]:
        if not value:
            return None
        return normalize_phone(value)

    @model_validator(mode="after")
    def _check_alternative_date(self) -> "BookingDraft":
        if self.alternative_date is not None and self.alternative_date == self.preferred_date:
            raise ValueError("alternative date must differ from the preferred date")
        return self


class BookingRequest(BaseModel):
    """A client's request to book a shoot, tracked through its lifecycle."""

    id: str
    booking_reference: str
    client_id: str
    photographer_id: Optional[str] = None
    service_package_id: Optional[str] = None

    event_type: str
    preferred_date: date
    alternative_date: Optional[date] = None
    preferred_start_time: time
    estimated_duration_hours: float = Field(gt=0)

    location: str
    special_requirements: Optional[str] = None
    contact_name: Optional[str] = None
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = None

    estimated_price: Optional[Decimal] = None

    status: BookingStatus = BookingStatus.PENDING
    admin_notes: Optional[str] = None
    decline_reason: Optional[str] = None
    scheduled_start: Optional[datetime] = None
    scheduled_end: Optional[datetime] = None

    created_date: datetime
    updated_date: datetime
    confirmed_date: Optional[datetime] = None
    declined_date: Optional[datetime] = None
    cancelled_date: Optional[datetime] = None

    shoot_id: Optional[str] = None

    def requested_window(self, on_date: Optional[date] = None) -> tuple[datetime, datetime]:
        """Half-open window for the preferred start time on the given date."""
        return window_for(
            on_date or self.preferred_date,
            self.preferred_start_time,
            self.estimated_duration_hours,
        )

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES
