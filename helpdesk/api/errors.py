"""Translate service and validation failures into ``{code, message}`` payloads."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic.alias_generators import to_camel

from helpdesk.tickets.errors import (
    BusinessRuleViolationError,
    TicketNotFoundError,
    TicketServiceError,
)

logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = "The requested resource was not found"
VALIDATION_ERROR = "VALIDATION_ERROR"

_STATUS_CODES: dict[type[TicketServiceError], int] = {
    TicketNotFoundError: status.HTTP_404_NOT_FOUND,
    BusinessRuleViolationError: status.HTTP_409_CONFLICT,
}


def error_payload(code: str, message: str) -> dict[str, str]:
    return {"code": code, "message": message}


def status_code_for(exc: TicketServiceError) -> int:
    for error_type, status_code in _STATUS_CODES.items():
        if isinstance(exc, error_type):
            return status_code
    return status.HTTP_400_BAD_REQUEST


async def ticket_error_handler(request: Request, exc: TicketServiceError) -> JSONResponse:
    message = NOT_FOUND_MESSAGE if isinstance(exc, TicketNotFoundError) else exc.message
    status_code = status_code_for(exc)
    logger.info("%s %s -> %d %s", request.method, request.url.path, status_code, exc.code)
    return JSONResponse(status_code=status_code, content=error_payload(exc.code, message))


def _describe(error: dict) -> str:
    location = [
        part
        for part in error.get("loc", ())
        if isinstance(part, str) and part not in ("body", "query", "path")
    ]
    field = location[-1] if location else "body"
    if "_" in field:
        # defaulted fields are reported under their Python name, not the wire alias
        field = to_camel(field)
    return f"{field}: {error.get('msg', 'Invalid value')}"


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    message = ", ".join(_describe(error) for error in exc.errors())
    logger.info("%s %s rejected: %s", request.method, request.url.path, message)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_payload(VALIDATION_ERROR, message),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(TicketServiceError, ticket_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
