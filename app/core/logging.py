import json
import logging
import logging.config
from datetime import datetime, timezone
from typing import Optional

from app.core.context import current_fields
from app.core.settings import Settings, settings as default_settings

AUDIT_LOGGER = "app.audit"


class RequestContextFilter(logging.Filter):
    """Copy the bound request fields onto each record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_fields = dict(current_fields())
        return True


class JsonFormatter(logging.Formatter):
    """One JSON object per line. Audit records are tagged by logger name."""

    def __init__(self, environment: str = "development") -> None:
        super().__init__()
        self.environment = environment

    def format(self, record: logging.LogRecord) -> str:
        is_audit = record.name == AUDIT_LOGGER or record.name.startswith(f"{AUDIT_LOGGER}.")
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "stream": "audit" if is_audit else "app",
            "environment": self.environment,
        }
        payload.update(getattr(record, "request_fields", {}))
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def configure_logging(level: Optional[str] = None, config: Settings | None = None) -> None:
    config = config or default_settings
    log_level = (level or config.log_level).upper()
    handler = {"handlers": ["stdout"], "level": log_level, "propagate": False}
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "filters": {"request_context": {"()": RequestContextFilter}},
            "formatters": {
                "json": {"()": JsonFormatter, "environment": config.environment},
            },
            "handlers": {
                "stdout": {
                    "class": "logging.StreamHandler",
                    "level": log_level,
                    "formatter": "json",
                    "filters": ["request_context"],
                    "stream": "ext://sys.stdout",
                },
            },
            "loggers": {
                "": handler,
                "uvicorn": handler,
                "uvicorn.error": handler,
                "uvicorn.access": handler,
            },
        }
    )
    logging.getLogger(__name__).info(
        "Logging configured for environment=%s level=%s", config.environment, log_level
    )


def get_audit_logger() -> logging.Logger:
    return logging.getLogger(AUDIT_LOGGER)
