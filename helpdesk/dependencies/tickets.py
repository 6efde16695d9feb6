from __future__ import annotations

from typing import Annotated
from uuid import UUID

from fastapi import Depends, HTTPException, Request

from helpdesk.tickets.errors import TicketNotFoundError
from helpdesk.tickets.service import TicketService


def get_ticket_service(request: Request) -> TicketService:
    service = getattr(request.app.state, "ticket_service", None)
    if service is None:
        raise HTTPException(status_code=503, detail="Ticket service is not configured")
    return service


def parse_ticket_id(ticket_id: str) -> UUID:
    """Path identifiers that are not UUIDs cannot name a stored ticket."""

    try:
        return UUID(ticket_id)
    except ValueError as exc:
        raise TicketNotFoundError(ticket_id) from exc


TicketServiceDep = Annotated[TicketService, Depends(get_ticket_service)]
TicketIdDep = Annotated[UUID, Depends(parse_ticket_id)]
