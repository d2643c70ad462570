from studio_booking.scheduling.availability import AvailabilityStore
from studio_booking.scheduling.conflicts import ConflictDetector, overlaps
from studio_booking.scheduling.converter import ShootConverter
from studio_booking.scheduling.engine import SchedulingEngine
from studio_booking.scheduling.lifecycle import BookingLifecycle
from studio_booking.scheduling.reference import BookingReferenceGenerator
from studio_booking.scheduling.state_machine import BookingStateMachine, BookingTrigger

__all__ = [
    "AvailabilityStore",
    "ConflictDetector",
    "overlaps",
    "ShootConverter",
    "SchedulingEngine",
    "BookingLifecycle",
    "BookingReferenceGenerator",
    "BookingStateMachine",
    "BookingTrigger",
]
