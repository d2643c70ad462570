from studio_booking.store.memory import InMemoryBookingRepository, InMemorySlotRepository
from studio_booking.store.ports import (
    BookingRepository,
    ClientDirectory,
    PackageCatalogPort,
    PhotographerDirectory,
    ShootManagementPort,
    SlotRepository,
)

__all__ = [
    "BookingRepository",
    "SlotRepository",
    "ClientDirectory",
    "PhotographerDirectory",
    "PackageCatalogPort",
    "ShootManagementPort",
    "InMemoryBookingRepository",
    "InMemorySlotRepository",
]
