"""
Storage and collaborator interfaces for the booking engine.

The lifecycle and scheduling engine depend only on these abstractions.
Related records are fetched explicitly by id; nothing is lazy-loaded.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from studio_booking.schemas.availability_schema import AvailabilitySlot
from studio_booking.schemas.booking_schema import BookingRequest, BookingStatus
from studio_booking.schemas.party_schema import CallerContext, ServicePackage
from studio_booking.schemas.shoot_schema import ShootDraft


class BookingRepository(ABC):
    """Booking requests keyed by id, unique on booking reference."""

    @abstractmethod
    def add(self, booking: BookingRequest) -> None:
        """Insert a new booking. Raises DuplicateReferenceError if the reference is taken."""
        raise NotImplementedError

    @abstractmethod
    def get(self, booking_id: str) -> Optional[BookingRequest]:
        raise NotImplementedError

    @abstractmethod
    def get_by_reference(self, reference: str) -> Optional[BookingRequest]:
        raise NotImplementedError

    @abstractmethod
    def save(self, booking: BookingRequest) -> None:
        """Persist changes to an existing booking."""
        raise NotImplementedError

    @abstractmethod
    def delete(self, booking_id: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def list(
        self,
        status: Optional[BookingStatus] = None,
        client_id: Optional[str] = None,
    ) -> list[BookingRequest]:
        """Return matching bookings, newest first."""
        raise NotImplementedError

    @abstractmethod
    def reference_exists(self, reference: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    def count(self, status: Optional[BookingStatus] = None) -> int:
        raise NotImplementedError


class SlotRepository(ABC):
    """Availability slots keyed by id, indexed by (photographer, start time)."""

    @abstractmethod
    def add(self, slot: AvailabilitySlot) -> None:
        raise NotImplementedError

    @abstractmethod
    def get(self, slot_id: str) -> Optional[AvailabilitySlot]:
        raise NotImplementedError

    @abstractmethod
    def save(self, slot: AvailabilitySlot) -> None:
        raise NotImplementedError

    @abstractmethod
    def delete(self, slot_id: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def list_for_photographer(
        self,
        photographer_id: str,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> list[AvailabilitySlot]:
        """Slots of one photographer intersecting ``[start, end)``, ordered by start time."""
        raise NotImplementedError

    @abstractmethod
    def list_between(
        self, start: datetime, end: datetime
    ) -> list[AvailabilitySlot]:
        """Slots of every photographer intersecting ``[start, end)``, ordered by start time."""
        raise NotImplementedError

    @abstractmethod
    def find_by_booking(self, booking_id: str) -> list[AvailabilitySlot]:
        raise NotImplementedError


class ClientDirectory(ABC):
    @abstractmethod
    def resolve_client(self, caller: CallerContext) -> Optional[str]:
        """Return the client id for a caller, or None if the caller is not a client."""
        raise NotImplementedError

    @abstractmethod
    def client_exists(self, client_id: str) -> bool:
        raise NotImplementedError


class PhotographerDirectory(ABC):
    @abstractmethod
    def photographer_exists(self, photographer_id: str) -> bool:
        raise NotImplementedError


class PackageCatalogPort(ABC):
    @abstractmethod
    def get_package(self, package_id: str) -> Optional[ServicePackage]:
        raise NotImplementedError


class ShootManagementPort(ABC):
    @abstractmethod
    def create_shoot(self, draft: ShootDraft) -> str:
        """
        Create a scheduled shoot and return its id.

        ``draft.booking_reference`` is an idempotency key: a second call for
        the same reference returns the existing shoot id instead of
        creating another shoot.
        """
        raise NotImplementedError
