from contextlib import asynccontextmanager

from fastapi import FastAPI

from helpdesk.api.errors import register_exception_handlers
from helpdesk.api.routes import metrics, ping, tickets
from helpdesk.core.config import Settings, get_settings
from helpdesk.core.logging import configure_logging, init_tracer, shutdown_tracer
from helpdesk.metrics import MetricsRegistry
from helpdesk.tickets.repository import TicketRepository
from helpdesk.tickets.service import TicketService
from helpdesk.tickets.state import TicketStateMachine


def build_ticket_service(settings: Settings) -> TicketService:
    """Wire a service to a fresh in-memory store according to ``settings``."""

    return TicketService(
        TicketRepository(),
        state_machine=TicketStateMachine(strict=settings.enforce_forward_lifecycle),
        default_assignee_id=settings.default_assignee_id,
        customer_author_prefix=settings.customer_author_prefix,
        metrics=MetricsRegistry(),
    )


@asynccontextmanager
async def lifespan(app: FastAPI):  # pragma: no cover - executed by framework
    settings: Settings = app.state.settings
    app.state.logger = configure_logging(settings)
    app.state.tracer_provider = init_tracer(settings)
    app.state.logger.info("Starting %s (%s)", settings.app_name, settings.environment)
    try:
        yield
    finally:
        shutdown_tracer(app.state.tracer_provider)
        app.state.tracer_provider = None


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    app = FastAPI(title=settings.app_name, lifespan=lifespan)
    app.state.settings = settings
    app.state.ticket_service = build_ticket_service(settings)
    register_exception_handlers(app)
    app.include_router(ping.router)
    app.include_router(metrics.router)
    app.include_router(tickets.router)
    return app


app = create_app()
