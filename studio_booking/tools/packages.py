"""Photography package catalog with pricing and default durations."""

import logging
from decimal import Decimal
from typing import Optional

from studio_booking.schemas.party_schema import ServicePackage
from studio_booking.store.ports import PackageCatalogPort

logger = logging.getLogger(__name__)

PACKAGE_CATALOG: dict[str, dict] = {
    "wedding-full-day": {
        "name": "Full Day Wedding",
        "category": "Wedding",
        "description": "Preparations through to the first dance, with an online gallery and album.",
        "base_price": Decimal("3800.00"),
        "discounted_price": None,
        "duration_hours": 8.0,
    },
    "wedding-elopement": {
        "name": "Elopement",
        "category": "Wedding",
        "description": "Ceremony and portraits for intimate weddings.",
        "base_price": Decimal("1450.00"),
        "discounted_price": Decimal("1290.00"),
        "duration_hours": 3.0,
    },
    "portrait-studio": {
        "name": "Studio Portrait Session",
        "category": "Portrait",
        "description": "Studio lighting, two outfit changes, ten retouched images.",
        "base_price": Decimal("390.00"),
        "discounted_price": None,
        "duration_hours": 1.5,
    },
    "family-outdoor": {
        "name": "Outdoor Family Session",
        "category": "Family",
        "description": "Golden-hour session at a location of your choice.",
        "base_price": Decimal("520.00"),
        "discounted_price": None,
        "duration_hours": 2.0,
    },
    "event-coverage": {
        "name": "Event Coverage",
        "category": "Event",
        "description": "Corporate or private event coverage with same-week delivery.",
        "base_price": Decimal("950.00"),
        "discounted_price": None,
        "duration_hours": 4.0,
    },
}


class PackageCatalog(PackageCatalogPort):
    """Read-only view over the package catalog."""

    def __init__(self, catalog: Optional[dict[str, dict]] = None) -> None:
        source = PACKAGE_CATALOG if catalog is None else catalog
        self._packages: dict[str, ServicePackage] = {
            pid: ServicePackage(id=pid, **info) for pid, info in source.items()
        }

    def get_package(self, package_id: str) -> Optional[ServicePackage]:
        package = self._packages.get(package_id.strip().lower())
        if package is None:
            logger.debug("Unknown package requested: %s", package_id)
        return package

    def all_packages(self) -> list[dict]:
        """Return all packages with basic info."""
        return [
            {"id": p.id, "name": p.name, "price": str(p.effective_price)}
            for p in self._packages.values()
        ]
