"""
In-process client directory.

In production, this would query the studio's client-profile records to
map an authenticated user onto a client id.
"""

import logging
from typing import Optional

from studio_booking.schemas.party_schema import CallerContext, ClientRecord
from studio_booking.store.ports import ClientDirectory
from studio_booking.utils import normalize_phone

logger = logging.getLogger(__name__)

DEMO_CLIENTS: list[ClientRecord] = [
    ClientRecord(
        id="client-ava",
        user_id="user-ava",
        name="Ava Thompson",
        email="ava.thompson@email.com",
        phone="0412345678",
    ),
    ClientRecord(
        id="client-noah",
        user_id="user-noah",
        name="Noah Patel",
        email="noah.p@email.com",
        phone="0498765432",
    ),
]


class InMemoryClientDirectory(ClientDirectory):
    def __init__(self, clients: Optional[list[ClientRecord]] = None) -> None:
        seed = DEMO_CLIENTS if clients is None else clients
        self._clients: dict[str, ClientRecord] = {c.id: c for c in seed}

    def resolve_client(self, caller: CallerContext) -> Optional[str]:
        for client in self._clients.values():
            if client.user_id == caller.user_id:
                logger.debug("Caller %s resolved to client %s", caller.user_id, client.id)
                return client.id
        return None

    def client_exists(self, client_id: str) -> bool:
        return client_id in self._clients

    def get_client(self, client_id: str) -> Optional[ClientRecord]:
        return self._clients.get(client_id)

    def register_client(
        self,
        client_id: str,
        name: str,
        user_id: Optional[str] = None,
        email: Optional[str] = None,
        phone: Optional[str] = None,
    ) -> ClientRecord:
        """Create a new client record."""
        client = ClientRecord(
            id=client_id,
            user_id=user_id,
            name=name,
            email=email,
            phone=normalize_phone(phone) if phone else None,
        )
        self._clients[client_id] = client
        logger.info("New client registered: %s (%s)", name, client_id)
        return client
