from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.routers import api_router, health_router
from app.core.container import ServiceContainer, build_container
from app.core.errors import register_exception_handlers
from app.core.limiter import install_rate_limiting
from app.core.logging import configure_logging
from app.core.response_envelope import register_response_envelope
from app.core.settings import Settings, settings as default_settings
from app.events import register_event_handlers
from app.middlewares.request_context import RequestContextMiddleware
from app.middlewares.security_headers import SecurityHeadersMiddleware


def create_app(config: Settings | None = None, container: ServiceContainer | None = None) -> FastAPI:
    config = config or default_settings
    configure_logging(config=config)
    app = FastAPI(
        title=config.app_name,
        version=config.app_version,
        docs_url="/docs" if config.docs_enabled else None,
        redoc_url="/redoc" if config.docs_enabled else None,
        openapi_url="/openapi.json" if config.docs_enabled else None,
    )
    app.state.settings = config
    app.state.container = container or build_container(config)
    app.include_router(health_router)
    app.include_router(api_router, prefix=config.api_prefix)
    register_exception_handlers(app)
    register_response_envelope(app)
    install_rate_limiting(app, config)
    app.add_middleware(RequestContextMiddleware)
    app.add_middleware(SecurityHeadersMiddleware, config=config)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_event_handlers(app)
    return app


app = create_app()
