from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

from helpdesk.dependencies.tickets import TicketServiceDep
from helpdesk.metrics import PrometheusExporter

router = APIRouter(prefix="/metrics", tags=["health"])


@router.get("", response_class=PlainTextResponse, summary="Prometheus metrics")
def metrics(service: TicketServiceDep) -> PlainTextResponse:
    return PlainTextResponse(PrometheusExporter(service.metrics).export())
