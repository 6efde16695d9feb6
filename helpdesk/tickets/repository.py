from __future__ import annotations

from threading import Lock
from typing import MutableMapping
from uuid import UUID

from .models import Ticket


class TicketRepository:
    """In-memory store holding the authoritative copy of every ticket.

    Tickets are immutable, so a save is a single map assignment. The lock is
    only held for that assignment or for one lookup/snapshot, which serializes
    writers for the same ticket without making writers for other tickets wait
    on anything but the assignment itself.
    """

    def __init__(self) -> None:
        self._tickets: MutableMapping[UUID, Ticket] = {}
        self._lock = Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._tickets)

    def save(self, ticket: Ticket) -> Ticket:
        with self._lock:
            self._tickets[ticket.ticket_id] = ticket
        return ticket

    def get_ticket(self, ticket_id: UUID) -> Ticket | None:
        with self._lock:
            return self._tickets.get(ticket_id)

    def list_tickets(self) -> list[Ticket]:
        with self._lock:
            return list(self._tickets.values())
