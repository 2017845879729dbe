"""Per-app rate limiting on top of slowapi.

Each app gets its own ``Limiter`` built from the config passed to
``create_app``. Routes opt out with ``rate_limit_exempt``.
"""

from typing import Callable, TypeVar

from fastapi import FastAPI
from fastapi.routing import APIRoute
from slowapi import Limiter
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address

from app.core.settings import Settings

Endpoint = TypeVar("Endpoint", bound=Callable)


def rate_limit_exempt(endpoint: Endpoint) -> Endpoint:
    endpoint.rate_limit_exempt = True
    return endpoint


def build_limiter(config: Settings) -> Limiter:
    return Limiter(
        key_func=get_remote_address,
        default_limits=[f"{config.rate_limit_per_minute}/minute"],
        storage_uri=config.rate_limit_storage_uri,
    )


def install_rate_limiting(app: FastAPI, config: Settings) -> Limiter:
    """Attach a fresh limiter to ``app``; call after the routers are included."""
    limiter = build_limiter(config)
    for route in app.routes:
        if isinstance(route, APIRoute) and getattr(route.endpoint, "rate_limit_exempt", False):
            limiter.exempt(route.endpoint)
    app.state.limiter = limiter
    app.add_middleware(SlowAPIMiddleware)
    return limiter
