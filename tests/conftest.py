from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from helpdesk.core.config import Settings
from helpdesk.main import create_app
from helpdesk.tickets.repository import TicketRepository
from helpdesk.tickets.service import TicketService


class StepClock:
    """Deterministic clock advancing by one second per call."""

    def __init__(self, start: datetime | None = None) -> None:
        self.current = start or datetime(2024, 6, 28, 10, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        value = self.current
        self.current += timedelta(seconds=1)
        return value


@pytest.fixture
def clock():
    return StepClock()


@pytest.fixture
def repository():
    return TicketRepository()


@pytest.fixture
def service(repository, clock):
    return TicketService(repository, default_assignee_id="agent-123", clock=clock)


@pytest.fixture
def client():
    app = create_app(Settings(_env_file=None))
    with TestClient(app) as test_client:
        yield test_client
