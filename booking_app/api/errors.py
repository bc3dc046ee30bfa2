from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from booking_app.api.v1.schemas import EnvelopeSchema, ErrorSchema
from booking_app.application.exceptions import BookingError

logger = logging.getLogger(__name__)

STATUS_BY_KIND = {
    "validation": 400,
    "invalid_date": 400,
    "not_found": 404,
    "conflict": 409,
    "store_unavailable": 503,
}


def _envelope(status_code: int, message: str, error: ErrorSchema) -> JSONResponse:
    body = EnvelopeSchema(success=False, message=message, error=error)
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


async def booking_error_handler(request: Request, exc: BookingError) -> JSONResponse:
    return _envelope(
        STATUS_BY_KIND.get(exc.kind, 500),
        exc.message,
        ErrorSchema(**exc.to_dict()),
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    fields = [str(err["loc"][-1]) for err in exc.errors() if err.get("loc")]
    return _envelope(
        400,
        "Request is malformed",
        ErrorSchema(kind="validation", message="Request is malformed", details={"fields": fields}),
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(BookingError, booking_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
