from starlette.types import ASGIApp, Message, Receive, Scope, Send

from app.core.settings import Settings

Header = tuple[bytes, bytes]

BASE_HEADERS: tuple[Header, ...] = (
    (b"x-content-type-options", b"nosniff"),
    (b"x-frame-options", b"DENY"),
    (b"referrer-policy", b"no-referrer"),
    (b"cross-origin-opener-policy", b"same-origin"),
)
HSTS_HEADER: Header = (b"strict-transport-security", b"max-age=63072000; includeSubDomains")
# Swagger UI and ReDoc load their assets from a CDN.
CSP_EXEMPT_PATHS = ("/docs", "/redoc")


class SecurityHeadersMiddleware:
    """Add hardening headers the app did not set itself, built once from config."""

    def __init__(self, app: ASGIApp, config: Settings) -> None:
        self.app = app
        headers = list(BASE_HEADERS)
        if config.enable_hsts:
            headers.append(HSTS_HEADER)
        self.headers = tuple(headers)
        policy = config.content_security_policy
        self.csp_header: Header | None = (
            (b"content-security-policy", policy.encode("latin-1")) if policy else None
        )

    def headers_for(self, path: str) -> tuple[Header, ...]:
        if self.csp_header is None or path.startswith(CSP_EXEMPT_PATHS):
            return self.headers
        return self.headers + (self.csp_header,)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        extra = self.headers_for(scope.get("path", ""))

        async def send_with_headers(message: Message) -> None:
            if message["type"] == "http.response.start":
                raw = list(message.get("headers", []))
                present = {name.lower() for name, _ in raw}
                raw.extend(header for header in extra if header[0] not in present)
                message["headers"] = raw
            await send(message)

        await self.app(scope, receive, send_with_headers)
