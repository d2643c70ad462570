"""Scheduled-shoot payload handed to the shoot-management subsystem."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel


class ShootDraft(BaseModel):
    """Fields for a new scheduled shoot, built from a confirmed booking."""

    title: str
    description: Optional[str] = None
    scheduled_start: datetime
    scheduled_end: datetime
    duration_hours: int
    duration_minutes: int
    location: str
    price: Decimal
    client_id: str
    photographer_id: str
    booking_reference: str
    notes: Optional[str] = None
