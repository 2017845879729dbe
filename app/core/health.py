from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from app.core.settings import Settings, settings as default_settings


async def live_payload(config: Settings | None = None) -> dict[str, Any]:
    config = config or default_settings
    return {
        "status": "UP",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": config.app_version,
        "environment": config.environment,
    }


async def api_banner_payload(config: Settings | None = None) -> dict[str, Any]:
    config = config or default_settings
    return {
        "message": config.app_name,
        "version": config.app_version,
        "documentation": "/docs" if config.docs_enabled else None,
    }
