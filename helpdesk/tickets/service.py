from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import replace
from datetime import datetime, timezone
from typing import Callable, Iterator
from uuid import UUID, uuid4

from opentelemetry import trace

from helpdesk.metrics import MetricsRegistry, register_default_metrics
from helpdesk.metrics.definitions import (
    COMMENTS_ADDED,
    OPERATION_FAILURES,
    STATUS_CHANGES,
    TICKETS_CREATED,
)

from .errors import CommentNotPermittedError, TicketNotFoundError, TicketServiceError
from .models import Comment, CommentVisibility, Ticket
from .repository import TicketRepository
from .state import TicketStateMachine, parse_status
from .visibility import apply_visibility, parse_visibility, resolve_lens

logger = logging.getLogger(__name__)
_tracer = trace.get_tracer(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TicketService:
    """High level orchestration for ticket lifecycle operations."""

    def __init__(
        self,
        repository: TicketRepository,
        *,
        state_machine: TicketStateMachine | None = None,
        default_assignee_id: str | None = None,
        customer_author_prefix: str | None = None,
        clock: Callable[[], datetime] = _utcnow,
        metrics: MetricsRegistry | None = None,
    ) -> None:
        self.repository = repository
        self.state_machine = state_machine or TicketStateMachine()
        self.default_assignee_id = default_assignee_id or None
        self.customer_author_prefix = customer_author_prefix or None
        self._clock = clock
        self.metrics = register_default_metrics(metrics or MetricsRegistry())

    @contextmanager
    def _operation(self, name: str) -> Iterator[None]:
        with _tracer.start_as_current_span(f"tickets.{name}"):
            try:
                yield
            except TicketServiceError as exc:
                self.metrics.counter(OPERATION_FAILURES).inc(
                    labels={"operation": name, "code": exc.code}
                )
                logger.info("Ticket %s rejected: %s", name, exc)
                raise

    def _touch(self, ticket: Ticket) -> datetime:
        # updated_at must never fall behind a previous value, even if the clock does
        return max(self._clock(), ticket.updated_at)

    def create_ticket(self, *, user_id: str, subject: str, description: str) -> Ticket:
        with self._operation("create_ticket"):
            now = self._clock()
            ticket = Ticket(
                ticket_id=uuid4(),
                subject=subject,
                description=description,
                status=self.state_machine.initial_state(),
                user_id=user_id,
                assignee_id=self.default_assignee_id,
                created_at=now,
                updated_at=now,
            )
            stored = self.repository.save(ticket)
        self.metrics.counter(TICKETS_CREATED).inc()
        logger.info("Created ticket %s for user %s", stored.ticket_id, user_id)
        return stored

    def get_ticket(self, ticket_id: UUID) -> Ticket:
        ticket = self.repository.get_ticket(ticket_id)
        if ticket is None:
            raise TicketNotFoundError(ticket_id)
        return ticket

    def list_tickets(
        self,
        *,
        status: str | None = None,
        user_id: str | None = None,
        assignee_id: str | None = None,
    ) -> list[Ticket]:
        """Return tickets matching every supplied filter.

        Filtering by ``user_id`` is treated as a customer request, so only
        public comments are kept on the returned copies. The stored tickets
        are never modified.
        """

        wanted_status = status.casefold() if status is not None else None
        lens = resolve_lens(user_id, assignee_id)
        results: list[Ticket] = []
        for ticket in self.repository.list_tickets():
            if wanted_status is not None and ticket.status.name.casefold() != wanted_status:
                continue
            if user_id is not None and ticket.user_id != user_id:
                continue
            if assignee_id is not None and ticket.assignee_id != assignee_id:
                continue
            results.append(apply_visibility(ticket, lens))
        logger.debug(
            "Listed %d tickets (status=%s, user=%s, assignee=%s, lens=%s)",
            len(results),
            status,
            user_id,
            assignee_id,
            lens.value,
        )
        return results

    def update_status(self, ticket_id: UUID, status_text: str) -> Ticket:
        with self._operation("update_status"):
            ticket = self.get_ticket(ticket_id)
            requested = parse_status(status_text)
            new_status = self.state_machine.transition(ticket.status, requested)
            updated = self.repository.save(
                replace(ticket, status=new_status, updated_at=self._touch(ticket))
            )
        self.metrics.counter(STATUS_CHANGES).inc(labels={"status": new_status.value})
        logger.info(
            "Ticket %s status changed %s -> %s", ticket_id, ticket.status.value, new_status.value
        )
        return updated

    def add_comment(
        self,
        ticket_id: UUID,
        *,
        author_id: str,
        content: str,
        visibility_text: str,
    ) -> Ticket:
        with self._operation("add_comment"):
            ticket = self.get_ticket(ticket_id)
            visibility = parse_visibility(visibility_text)
            if (
                self.customer_author_prefix is not None
                and visibility is CommentVisibility.INTERNAL
                and author_id.startswith(self.customer_author_prefix)
            ):
                raise CommentNotPermittedError(author_id)

            updated_at = self._touch(ticket)
            comment = Comment(
                comment_id=uuid4(),
                ticket_id=ticket.ticket_id,
                author_id=author_id,
                content=content,
                visibility=visibility,
                created_at=updated_at,
            )
            updated = self.repository.save(
                replace(ticket, comments=(*ticket.comments, comment), updated_at=updated_at)
            )
        self.metrics.counter(COMMENTS_ADDED).inc(labels={"visibility": visibility.value})
        logger.info(
            "Added %s comment %s to ticket %s", visibility.value, comment.comment_id, ticket_id
        )
        return updated
