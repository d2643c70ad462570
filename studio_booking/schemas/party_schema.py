"""Caller identity and collaborator records consumed by the booking engine."""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field


@dataclass(frozen=True)
class CallerContext:
    """
    Identity of whoever is invoking an operation.

    Authentication and permission checks happen before the engine is
    called; the engine only uses this to resolve the requesting client.
    """

    user_id: str
    roles: frozenset[str] = field(default_factory=frozenset)

    @property
    def is_staff(self) -> bool:
        return bool(self.roles & {"admin", "staff", "photographer"})


class ClientRecord(BaseModel):
    """Client profile known to the studio."""

    id: str
    user_id: Optional[str] = None
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None


class PhotographerRecord(BaseModel):
    """Photographer profile known to the studio."""

    id: str
    name: str
    specialties: list[str] = Field(default_factory=list)


class ServicePackage(BaseModel):
    """Read-only photography package: price snapshot and default duration."""

    id: str
    name: str
    category: str
    base_price: Decimal
    discounted_price: Optional[Decimal] = None
    duration_hours: float = Field(default=2.0, gt=0)
    description: str = ""

    @property
    def effective_price(self) -> Decimal:
        if self.discounted_price is not None and self.discounted_price < self.base_price:
            return self.discounted_price
        return self.base_price
