from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from uuid import UUID


class TicketStatus(str, Enum):
    """Supported states for a ticket's lifecycle."""

    OPEN = "open"
    IN_PROGRESS = "in_progress"
    RESOLVED = "resolved"
    CLOSED = "closed"


class CommentVisibility(str, Enum):
    """Audience a comment is written for."""

    PUBLIC = "public"
    INTERNAL = "internal"


@dataclass(frozen=True, slots=True)
class Comment:
    """Immutable note attached to a ticket."""

    comment_id: UUID
    ticket_id: UUID
    author_id: str
    content: str
    visibility: CommentVisibility
    created_at: datetime


@dataclass(frozen=True, slots=True)
class Ticket:
    """Aggregate representing a support ticket and its comment thread.

    Instances are never mutated; changes are expressed as new values handed to
    the repository.
    """

    ticket_id: UUID
    subject: str
    description: str
    status: TicketStatus
    user_id: str
    assignee_id: str | None
    created_at: datetime
    updated_at: datetime
    comments: tuple[Comment, ...] = ()
