"""RFC 7807 Problem Details helpers."""
from __future__ import annotations

import logging
from http import HTTPStatus

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .domain_errors import INTERNAL_ERROR, VALIDATION_ERROR, DomainError

logger = logging.getLogger(__name__)

PROBLEM_TYPE_BASE = "https://api.maintrack.local/problems"


def _problem_response(*, status: int, code: str, detail: str, details: dict | None = None) -> JSONResponse:
    try:
        title = HTTPStatus(status).phrase
    except ValueError:
        title = "Domain Error"

    payload: dict[str, object] = {
        "type": f"{PROBLEM_TYPE_BASE}/{code.lower()}",
        "title": title,
        "status": status,
        "detail": detail,
        "code": code,
    }
    if details is not None:
        payload["details"] = details

    return JSONResponse(
        status_code=status,
        content=payload,
        media_type="application/problem+json",
    )


def build_problem_details_response(exc: DomainError) -> JSONResponse:
    """Render DomainError as RFC 7807 payload with stable domain code."""
    if exc.code == INTERNAL_ERROR:
        # Internal detail stays in the logs.
        logger.error("Internal domain error: %s details=%s", exc.message, exc.details)
        return _problem_response(
            status=exc.http_status,
            code=INTERNAL_ERROR,
            detail="An unexpected error occurred",
        )
    return _problem_response(
        status=exc.http_status,
        code=exc.code,
        detail=exc.message,
        details=exc.details,
    )


async def domain_error_handler(_: Request, exc: DomainError) -> JSONResponse:
    return build_problem_details_response(exc)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return _problem_response(
        status=500,
        code=INTERNAL_ERROR,
        detail="An unexpected error occurred",
    )


async def request_validation_error_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {
            "field": ".".join(str(part) for part in error.get("loc", ()) if part != "body"),
            "message": error.get("msg", ""),
        }
        for error in exc.errors()
    ]
    return _problem_response(
        status=400,
        code=VALIDATION_ERROR,
        detail="Request validation failed",
        details={"errors": errors},
    )
