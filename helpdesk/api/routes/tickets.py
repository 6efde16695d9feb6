from __future__ import annotations

from datetime import datetime
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query, status
from pydantic import AfterValidator, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

from helpdesk.dependencies.tickets import TicketIdDep, TicketServiceDep
from helpdesk.tickets.models import CommentVisibility, Ticket, TicketStatus

router = APIRouter(prefix="/tickets", tags=["tickets"])


def _not_blank(label: str) -> AfterValidator:
    def check(value: str | None) -> str:
        if value is None or not value.strip():
            raise PydanticCustomError("blank_field", f"{label} is required and cannot be empty")
        return value

    return AfterValidator(check)


class _RequestModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TicketCreateRequest(_RequestModel):
    user_id: Annotated[str | None, _not_blank("User ID")] = Field(default=None, validate_default=True)
    subject: Annotated[str | None, _not_blank("Subject")] = Field(default=None, validate_default=True)
    description: Annotated[str | None, _not_blank("Description")] = Field(
        default=None, validate_default=True
    )


class TicketStatusChangeRequest(_RequestModel):
    status: Annotated[str | None, _not_blank("Status")] = Field(default=None, validate_default=True)


class CommentCreateRequest(_RequestModel):
    author_id: Annotated[str | None, _not_blank("Author ID")] = Field(
        default=None, validate_default=True
    )
    content: Annotated[str | None, _not_blank("Content")] = Field(default=None, validate_default=True)
    visibility: str


class _ResponseModel(BaseModel):
    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)


class CommentResponse(_ResponseModel):
    comment_id: UUID
    ticket_id: UUID
    author_id: str
    content: str
    visibility: CommentVisibility
    created_at: datetime


class TicketResponse(_ResponseModel):
    ticket_id: UUID
    subject: str
    description: str
    status: TicketStatus
    user_id: str
    assignee_id: str | None
    created_at: datetime
    updated_at: datetime
    comments: list[CommentResponse]


def _to_response(ticket: Ticket) -> TicketResponse:
    return TicketResponse.model_validate(ticket)


@router.post("", response_model=TicketResponse, status_code=status.HTTP_201_CREATED)
def create_ticket(payload: TicketCreateRequest, service: TicketServiceDep) -> TicketResponse:
    ticket = service.create_ticket(
        user_id=payload.user_id,
        subject=payload.subject,
        description=payload.description,
    )
    return _to_response(ticket)


@router.get("", response_model=list[TicketResponse])
def list_tickets(
    service: TicketServiceDep,
    status_filter: str | None = Query(default=None, alias="status"),
    user_id: str | None = Query(default=None, alias="userId"),
    assignee_id: str | None = Query(default=None, alias="assigneeId"),
) -> list[TicketResponse]:
    tickets = service.list_tickets(status=status_filter, user_id=user_id, assignee_id=assignee_id)
    return [_to_response(ticket) for ticket in tickets]


@router.patch("/{ticket_id}/status", response_model=TicketResponse)
def change_ticket_status(
    ticket_id: TicketIdDep,
    payload: TicketStatusChangeRequest,
    service: TicketServiceDep,
) -> TicketResponse:
    ticket = service.update_status(ticket_id, payload.status)
    return _to_response(ticket)


@router.post(
    "/{ticket_id}/comments",
    response_model=TicketResponse,
    status_code=status.HTTP_201_CREATED,
)
def add_comment(
    ticket_id: TicketIdDep,
    payload: CommentCreateRequest,
    service: TicketServiceDep,
) -> TicketResponse:
    ticket = service.add_comment(
        ticket_id,
        author_id=payload.author_id,
        content=payload.content,
        visibility_text=payload.visibility,
    )
    return _to_response(ticket)
