"""Read-time filtering of ticket comments by audience."""

from __future__ import annotations

from dataclasses import replace
from enum import Enum
from typing import Iterable

from .errors import InvalidVisibilityValueError
from .models import Comment, CommentVisibility, Ticket


class CommentLens(str, Enum):
    """Perspective a listing request is made from."""

    CUSTOMER = "customer"
    AGENT = "agent"
    UNFILTERED = "unfiltered"


def parse_visibility(text: str) -> CommentVisibility:
    """Resolve ``text`` to a visibility by case-insensitive name match."""

    wanted = text.upper()
    for visibility in CommentVisibility:
        if visibility.name == wanted:
            return visibility
    raise InvalidVisibilityValueError(text, (visibility.value for visibility in CommentVisibility))


def resolve_lens(user_id: str | None, assignee_id: str | None) -> CommentLens:
    """Pick the lens for a listing; a user filter wins over an assignee filter."""

    if user_id is not None:
        return CommentLens.CUSTOMER
    if assignee_id is not None:
        return CommentLens.AGENT
    return CommentLens.UNFILTERED


def visible_comments(comments: Iterable[Comment], lens: CommentLens) -> tuple[Comment, ...]:
    if lens is CommentLens.CUSTOMER:
        return tuple(comment for comment in comments if comment.visibility is CommentVisibility.PUBLIC)
    return tuple(comments)


def apply_visibility(ticket: Ticket, lens: CommentLens) -> Ticket:
    """Return a detached copy of ``ticket`` holding only the comments ``lens`` may see."""

    return replace(ticket, comments=visible_comments(ticket.comments, lens))
