"""
In-process shoot-management stand-in.

In production, converting a booking would call the shoot-management
subsystem, which also raises the draft invoice and contract.
"""

import logging
import threading
import uuid
from typing import Optional

from studio_booking.schemas.shoot_schema import ShootDraft
from studio_booking.store.ports import ShootManagementPort

logger = logging.getLogger(__name__)


class InMemoryShootManagement(ShootManagementPort):
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._shoots: dict[str, ShootDraft] = {}
        self._by_reference: dict[str, str] = {}

    def create_shoot(self, draft: ShootDraft) -> str:
        with self._lock:
            existing = self._by_reference.get(draft.booking_reference)
            if existing is not None:
                logger.info(
                    "Shoot %s already exists for booking %s", existing, draft.booking_reference
                )
                return existing
            shoot_id = f"SH-{uuid.uuid4().hex[:8].upper()}"
            self._shoots[shoot_id] = draft.model_copy(deep=True)
            self._by_reference[draft.booking_reference] = shoot_id
        logger.info(
            "Shoot created: %s '%s' on %s", shoot_id, draft.title, draft.scheduled_start.isoformat()
        )
        return shoot_id

    def get_shoot(self, shoot_id: str) -> Optional[ShootDraft]:
        with self._lock:
            return self._shoots.get(shoot_id)

    def count(self) -> int:
        with self._lock:
            return len(self._shoots)

    def shoots_for_booking(self, booking_reference: str) -> list[ShootDraft]:
        with self._lock:
            return [s for s in self._shoots.values() if s.booking_reference == booking_reference]
