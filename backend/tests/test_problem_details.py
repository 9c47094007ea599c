from __future__ import annotations

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.testclient import TestClient

from maintrack.domain_errors import (
    DomainError,
    Forbidden,
    InternalError,
    InvalidStateTransition,
    NotFound,
    ValidationError,
)
from maintrack.problem_details import (
    build_problem_details_response,
    domain_error_handler,
    request_validation_error_handler,
    unhandled_error_handler,
)


def test_problem_details_payload_contains_stable_code_and_rfc7807_fields() -> None:
    response = build_problem_details_response(
        DomainError(
            code="SAMPLE_ERROR",
            http_status=409,
            message="sample failed",
            details={"sample": True},
        )
    )

    assert response.status_code == 409
    assert response.media_type == "application/problem+json"

    body = response.body.decode("utf-8")
    assert '"type":"https://api.maintrack.local/problems/sample_error"' in body
    assert '"title":"Conflict"' in body
    assert '"status":409' in body
    assert '"detail":"sample failed"' in body
    assert '"code":"SAMPLE_ERROR"' in body
    assert '"details":{"sample":true}' in body


def test_problem_details_omits_details_when_none() -> None:
    response = build_problem_details_response(ValidationError("validation failed"))

    body = response.body.decode("utf-8")
    assert response.status_code == 400
    assert '"code":"VALIDATION_ERROR"' in body
    assert '"details"' not in body


def test_domain_error_subclasses_map_to_codes_and_statuses() -> None:
    assert (Forbidden().code, Forbidden().http_status) == ("FORBIDDEN", 403)
    assert (NotFound("gone").code, NotFound("gone").http_status) == ("NOT_FOUND", 404)
    transition = InvalidStateTransition("no")
    assert (transition.code, transition.http_status) == ("INVALID_STATE_TRANSITION", 400)
    assert isinstance(transition, ValidationError)


def test_internal_error_message_is_not_exposed() -> None:
    response = build_problem_details_response(InternalError("connection refused at 10.0.0.5"))

    body = response.body.decode("utf-8")
    assert response.status_code == 500
    assert '"code":"INTERNAL_ERROR"' in body
    assert "10.0.0.5" not in body
    assert '"detail":"An unexpected error occurred"' in body


def _app() -> FastAPI:
    app = FastAPI()
    app.add_exception_handler(DomainError, domain_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    @app.get("/boom")
    def _boom():
        raise NotFound("Request not found", details={"source": "test"})

    @app.get("/crash")
    def _crash():
        raise RuntimeError("secret internals")

    @app.get("/items/{item_id}")
    def _item(item_id: int):
        return {"id": item_id}

    return app


def test_fastapi_exception_handler_maps_domain_error_to_problem_details() -> None:
    client = TestClient(_app())
    response = client.get("/boom")

    assert response.status_code == 404
    assert response.headers["content-type"].startswith("application/problem+json")
    payload = response.json()
    assert payload["code"] == "NOT_FOUND"
    assert payload["detail"] == "Request not found"
    assert payload["details"] == {"source": "test"}


def test_unhandled_errors_become_generic_internal_error() -> None:
    client = TestClient(_app(), raise_server_exceptions=False)
    response = client.get("/crash")

    assert response.status_code == 500
    payload = response.json()
    assert payload["code"] == "INTERNAL_ERROR"
    assert "secret" not in response.text


def test_request_validation_errors_use_validation_code() -> None:
    client = TestClient(_app())
    response = client.get("/items/not-a-number")

    assert response.status_code == 400
    payload = response.json()
    assert payload["code"] == "VALIDATION_ERROR"
    assert payload["details"]["errors"][0]["field"] == "path.item_id"
