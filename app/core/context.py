"""Request-scoped log fields carried across awaits."""

import contextvars
from typing import Mapping

UNSET = "-"

_log_fields: contextvars.ContextVar[Mapping[str, str]] = contextvars.ContextVar(
    "log_fields", default={}
)


def bind_request(request_id: str, method: str, path: str) -> None:
    """Start a fresh field set for an incoming request."""
    _log_fields.set({"request_id": request_id, "method": method, "path": path})


def bind_user(user_id: str, employee_id: str | None) -> None:
    _log_fields.set(
        {**_log_fields.get(), "user_id": user_id, "employee_id": employee_id or UNSET}
    )


def current_fields() -> Mapping[str, str]:
    return _log_fields.get()
