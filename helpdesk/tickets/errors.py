from __future__ import annotations

from typing import Iterable


class TicketServiceError(RuntimeError):
    """Base error for ticket service issues."""

    code = "TICKET_ERROR"

    @property
    def message(self) -> str:
        return str(self)


class TicketNotFoundError(TicketServiceError):
    """Raised when a ticket could not be located."""

    code = "RESOURCE_NOT_FOUND"

    def __init__(self, ticket_id: object) -> None:
        super().__init__(f"Ticket {ticket_id} not found")
        self.ticket_id = ticket_id


class InvalidEnumValueError(TicketServiceError):
    """Raised when free text does not name one of the allowed values."""

    code = "INVALID_ARGUMENT"
    kind = "value"

    def __init__(self, value: str, valid_values: Iterable[str]) -> None:
        self.value = value
        self.valid_values = tuple(valid_values)
        super().__init__(
            f"Invalid {self.kind} value '{value}'. Valid values are: {', '.join(self.valid_values)}"
        )


class InvalidStatusValueError(InvalidEnumValueError):
    kind = "status"


class InvalidVisibilityValueError(InvalidEnumValueError):
    kind = "visibility"


class BusinessRuleViolationError(TicketServiceError):
    """Raised when a well-formed request is forbidden by the ticket lifecycle."""

    code = "BUSINESS_RULE_VIOLATION"


class CommentNotPermittedError(TicketServiceError):
    """Raised when a customer author attempts to post an internal comment."""

    code = "INVALID_ARGUMENT"

    def __init__(self, author_id: str) -> None:
        super().__init__("Users can only post public comments")
        self.author_id = author_id
