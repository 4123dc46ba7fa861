from __future__ import annotations

from typing import Any

import structlog
from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from events_api.api.hal import HALResponse, link, url_for
from events_api.domain.validation import FieldError
from events_api.services.exceptions import (
    AuthenticationError,
    ConflictError,
    EventValidationError,
    NotFoundError,
    PermissionDeniedError,
    ServiceError,
    ValidationError,
)

logger = structlog.get_logger(__name__)

STRUCTURAL_OBJECT_NAME = "eventIn"


def http_error_from_service(err: ServiceError) -> HTTPException:
    headers = None
    if isinstance(err, NotFoundError):
        status = 404
    elif isinstance(err, AuthenticationError):
        status = 401
        headers = {"WWW-Authenticate": "Bearer"}
    elif isinstance(err, PermissionDeniedError):
        status = 403
    elif isinstance(err, ConflictError):
        status = 409
    elif isinstance(err, ValidationError):
        status = 422
    else:
        status = 500

    return HTTPException(
        status_code=status,
        detail={"code": err.code, "message": err.message},
        headers=headers,
    )


def field_error_entry(error: FieldError) -> dict[str, Any]:
    return {
        "objectName": error.object_name,
        "field": error.field,
        "code": error.code,
        "defaultMessage": error.message,
    }


def structural_error_entries(exc: RequestValidationError) -> list[dict[str, Any]]:
    entries = []
    for err in exc.errors():
        # loc is ("body" | "query" | "path", <field>, ...)
        loc = [str(part) for part in err.get("loc", ())[1:]]
        entries.append(
            {
                "objectName": STRUCTURAL_OBJECT_NAME,
                "field": ".".join(loc) or None,
                "code": err.get("type", "invalid"),
                "defaultMessage": err.get("msg", "invalid value"),
            }
        )
    return entries


def errors_response(request: Request, entries: list[dict[str, Any]]) -> HALResponse:
    """400 carrying every violation plus a way back to the API index."""
    return HALResponse(
        status_code=400,
        content={
            "errors": entries,
            "_links": {"index": link(url_for(request, "index"))},
        },
    )


async def _handle_request_validation(request: Request, exc: RequestValidationError) -> HALResponse:
    entries = structural_error_entries(exc)
    logger.info("request_rejected", path=request.url.path, fields=[e["field"] for e in entries])
    return errors_response(request, entries)


async def _handle_service_error(request: Request, exc: ServiceError) -> JSONResponse:
    if isinstance(exc, EventValidationError):
        return errors_response(request, [field_error_entry(e) for e in exc.errors])

    http_exc = http_error_from_service(exc)
    return JSONResponse(
        status_code=http_exc.status_code,
        content={"detail": http_exc.detail},
        headers=http_exc.headers,
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, _handle_request_validation)
    app.add_exception_handler(ServiceError, _handle_service_error)
