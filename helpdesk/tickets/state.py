from __future__ import annotations

from typing import Mapping

from .errors import BusinessRuleViolationError, InvalidStatusValueError
from .models import TicketStatus

CLOSED_TICKET_MESSAGE = "Cannot update closed ticket"


def parse_status(text: str) -> TicketStatus:
    """Resolve ``text`` to a status by case-insensitive name match."""

    wanted = text.upper()
    for status in TicketStatus:
        if status.name == wanted:
            return status
    raise InvalidStatusValueError(text, (status.value for status in TicketStatus))


class TicketStateMachine:
    """Validate ticket lifecycle transitions.

    Only one rule is enforced by default: a closed ticket never changes status
    again. Any other move, backwards included, is accepted. With ``strict``
    enabled the documented forward lifecycle is enforced instead, with
    administrative closure still allowed from every open state.
    """

    _FORWARD_TRANSITIONS: Mapping[TicketStatus, frozenset[TicketStatus]] = {
        TicketStatus.OPEN: frozenset({TicketStatus.IN_PROGRESS, TicketStatus.CLOSED}),
        TicketStatus.IN_PROGRESS: frozenset({TicketStatus.RESOLVED, TicketStatus.CLOSED}),
        TicketStatus.RESOLVED: frozenset({TicketStatus.CLOSED}),
        TicketStatus.CLOSED: frozenset(),
    }

    def __init__(self, *, strict: bool = False) -> None:
        self.strict = strict

    @staticmethod
    def initial_state() -> TicketStatus:
        return TicketStatus.OPEN

    @staticmethod
    def is_terminal(status: TicketStatus) -> bool:
        return status is TicketStatus.CLOSED

    def can_transition(self, current: TicketStatus, requested: TicketStatus) -> bool:
        if self.is_terminal(current):
            return False
        if not self.strict or current == requested:
            return True
        return requested in self._FORWARD_TRANSITIONS[current]

    def transition(self, current: TicketStatus, requested: TicketStatus) -> TicketStatus:
        if self.is_terminal(current):
            raise BusinessRuleViolationError(CLOSED_TICKET_MESSAGE)
        if not self.can_transition(current, requested):
            raise BusinessRuleViolationError(
                f"Invalid status transition: {current.value} -> {requested.value}"
            )
        return requested
