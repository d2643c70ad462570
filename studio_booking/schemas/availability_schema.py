"""Photographer availability slot models."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, model_validator


class AvailabilitySlot(BaseModel):
    """A contiguous interval during which a photographer is open, booked or blocked."""

    id: str
    photographer_id: str
    start_time: datetime
    end_time: datetime
    is_recurring: bool = False
    recurring_day_of_week: Optional[int] = Field(default=None, ge=0, le=6)
    is_booked: bool = False
    is_blocked: bool = False
    booking_request_id: Optional[str] = None
    notes: Optional[str] = Field(default=None, max_length=500)
    created_date: datetime
    updated_date: datetime

    @model_validator(mode="after")
    def _check_consistency(self) -> "AvailabilitySlot":
        if self.start_time >= self.end_time:
            raise ValueError("slot start must be before its end")
        if self.is_booked and self.is_blocked:
            raise ValueError("a slot cannot be both booked and blocked")
        if self.is_recurring != (self.recurring_day_of_week is not None):
            raise ValueError("recurring slots need a day of week, and only they may have one")
        if (self.booking_request_id is not None) != self.is_booked:
            raise ValueError("booking_request_id must be set exactly when the slot is booked")
        return self

    @property
    def is_committed(self) -> bool:
        """Booked or blocked slots are commitments that must never overlap."""
        return self.is_booked or self.is_blocked

    @property
    def is_open(self) -> bool:
        return not self.is_committed

    @property
    def duration_hours(self) -> float:
        return (self.end_time - self.start_time).total_seconds() / 3600
