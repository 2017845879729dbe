from __future__ import annotations

import json
from http import HTTPStatus
from typing import Any

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse, Response


def _success_message(status_code: int) -> str:
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return "Success"


def _build_success_envelope(data: Any) -> dict[str, Any]:
    return {
        "success": True,
        "data": data,
    }


def _is_enveloped(payload: Any) -> bool:
    if not isinstance(payload, dict):
        return False
    return "success" in payload and ("data" in payload or "message" in payload)


def _normalize_envelope(payload: dict[str, Any]) -> dict[str, Any]:
    normalized = dict(payload)
    normalized.setdefault("data", None)
    if normalized.get("message") is None:
        normalized.pop("message", None)
    return normalized


def _copy_headers(source: Response, target: Response) -> Response:
    for key, value in source.headers.items():
        if key.lower() in {"content-length", "content-type"}:
            continue
        target.headers[key] = value
    return target


def _is_json(response: Response) -> bool:
    content_type = response.headers.get("content-type", "")
    return content_type.split(";")[0].strip() == "application/json"


class ResponseEnvelopeMiddleware(BaseHTTPMiddleware):
    """Wrap successful JSON responses as ``{"success": true, "data": ...}``."""

    async def dispatch(self, request, call_next) -> Response:
        response = await call_next(request)

        if request.url.path == request.app.openapi_url:
            return response

        if response.status_code < 200 or response.status_code >= 300:
            return response

        # Convert 204 to a 200 success envelope for frontend consistency
        if response.status_code == 204:
            content = _build_success_envelope(None)
            content["message"] = _success_message(200)
            return _copy_headers(response, JSONResponse(status_code=200, content=content))

        if not _is_json(response):
            return response

        raw_body = b"".join([chunk async for chunk in response.body_iterator])
        try:
            payload = json.loads(raw_body) if raw_body else None
        except ValueError:
            return _copy_headers(
                response,
                Response(
                    content=raw_body,
                    status_code=response.status_code,
                    media_type=response.media_type,
                ),
            )

        if _is_enveloped(payload):
            content = _normalize_envelope(payload)
        else:
            content = _build_success_envelope(payload)
        return _copy_headers(response, JSONResponse(status_code=response.status_code, content=content))


def register_response_envelope(app) -> None:
    app.add_middleware(ResponseEnvelopeMiddleware)
