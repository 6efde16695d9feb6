"""Ticket domain models, rules and services."""

from .errors import (
    BusinessRuleViolationError,
    CommentNotPermittedError,
    InvalidStatusValueError,
    InvalidVisibilityValueError,
    TicketNotFoundError,
    TicketServiceError,
)
from .models import Comment, CommentVisibility, Ticket, TicketStatus
from .repository import TicketRepository
from .service import TicketService
from .state import TicketStateMachine, parse_status
from .visibility import CommentLens, apply_visibility, parse_visibility, resolve_lens

__all__ = [
    "BusinessRuleViolationError",
    "Comment",
    "CommentLens",
    "CommentNotPermittedError",
    "CommentVisibility",
    "InvalidStatusValueError",
    "InvalidVisibilityValueError",
    "Ticket",
    "TicketNotFoundError",
    "TicketRepository",
    "TicketService",
    "TicketServiceError",
    "TicketStateMachine",
    "TicketStatus",
    "apply_visibility",
    "parse_status",
    "parse_visibility",
    "resolve_lens",
]
