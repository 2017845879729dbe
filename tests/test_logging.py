import contextvars
import json
import logging

from app.core import context
from app.core.logging import AUDIT_LOGGER, JsonFormatter, RequestContextFilter


def _record(name: str, message: str = "User logged in user_id=%s", *args) -> logging.LogRecord:
    return logging.LogRecord(
        name=name,
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg=message,
        args=args or ("user-1",),
        exc_info=None,
    )


def _format(record: logging.LogRecord, bind=None) -> dict:
    def _emit() -> dict:
        if bind is not None:
            bind()
        RequestContextFilter().filter(record)
        return json.loads(JsonFormatter(environment="test").format(record))

    # A copied context keeps bound fields out of other tests.
    return contextvars.copy_context().run(_emit)


def test_audit_records_are_tagged_and_carry_request_fields():
    def bind() -> None:
        context.bind_request("req-42", "POST", "/api/auth/login")
        context.bind_user("user-1", "EMP001")

    payload = _format(_record(AUDIT_LOGGER), bind)

    assert payload["stream"] == "audit"
    assert payload["environment"] == "test"
    assert payload["message"] == "User logged in user_id=user-1"
    assert payload["request_id"] == "req-42"
    assert payload["method"] == "POST"
    assert payload["path"] == "/api/auth/login"
    assert payload["employee_id"] == "EMP001"


def test_application_records_outside_a_request_have_no_request_fields():
    payload = _format(_record("app.services.stock_grants"))

    assert payload["stream"] == "app"
    assert payload["logger"] == "app.services.stock_grants"
    assert "request_id" not in payload
    assert "user_id" not in payload


def test_binding_a_new_request_drops_the_previous_user():
    def bind() -> None:
        context.bind_request("req-1", "GET", "/api/stock/balance")
        context.bind_user("user-1", None)
        context.bind_request("req-2", "GET", "/health")

    payload = _format(_record("app.audit.session"), bind)

    assert payload["stream"] == "audit"
    assert payload["request_id"] == "req-2"
    assert "user_id" not in payload
