"""
In-process photographer roster.

In production, this would be backed by the studio's photographer profiles.
"""

import logging
from typing import Optional

from studio_booking.schemas.party_schema import PhotographerRecord
from studio_booking.store.ports import PhotographerDirectory

logger = logging.getLogger(__name__)

DEMO_PHOTOGRAPHERS: list[PhotographerRecord] = [
    PhotographerRecord(id="ph-maya", name="Maya Lindqvist", specialties=["wedding", "portrait"]),
    PhotographerRecord(id="ph-omar", name="Omar Haddad", specialties=["event", "commercial"]),
    PhotographerRecord(id="ph-jun", name="Jun Tanaka", specialties=["family", "newborn"]),
]


class InMemoryPhotographerDirectory(PhotographerDirectory):
    def __init__(self, photographers: Optional[list[PhotographerRecord]] = None) -> None:
        seed = DEMO_PHOTOGRAPHERS if photographers is None else photographers
        self._photographers: dict[str, PhotographerRecord] = {p.id: p for p in seed}

    def photographer_exists(self, photographer_id: str) -> bool:
        return photographer_id in self._photographers

    def get_photographer(self, photographer_id: str) -> Optional[PhotographerRecord]:
        return self._photographers.get(photographer_id)

    def all_photographers(self) -> list[PhotographerRecord]:
        return list(self._photographers.values())

    def add_photographer(self, photographer: PhotographerRecord) -> None:
        self._photographers[photographer.id] = photographer
        logger.info("Photographer added to roster: %s", photographer.name)
