"""Structured logging configuration.

structlog on top of stdlib logging. JSON lines by default, a coloured console
renderer when LOG_FORMAT=console. Request-scoped context (request_id, method,
path) is bound by RequestIDMiddleware and merged into every event through
structlog.contextvars.
"""

import logging
import logging.config
import sys
from datetime import UTC, datetime
from typing import Any, Literal

import structlog
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from structlog.stdlib import BoundLogger


def _add_timestamp(
    _logger: object,
    _method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    event_dict["timestamp"] = datetime.now(UTC).isoformat()
    return event_dict


class LoggingSettings(BaseSettings):
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_format: Literal["json", "console"] = Field(default="json", alias="LOG_FORMAT")

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )


def _renderer(settings: LoggingSettings) -> Any:
    if settings.log_format == "console":
        return structlog.dev.ConsoleRenderer()
    return structlog.processors.JSONRenderer()


def configure_logging(settings: LoggingSettings) -> None:
    """Configure structlog and the root stdlib logger.

    Call once at startup. Third-party loggers (uvicorn, sqlalchemy) go through
    the same formatter via ``foreign_pre_chain``.
    """
    shared: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        _add_timestamp,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *shared,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "structured": {
                    "()": structlog.stdlib.ProcessorFormatter,
                    "processor": _renderer(settings),
                    "foreign_pre_chain": shared,
                },
            },
            "handlers": {
                "default": {
                    "class": "logging.StreamHandler",
                    "formatter": "structured",
                    "stream": sys.stdout,
                },
            },
            "loggers": {
                "": {
                    "handlers": ["default"],
                    "level": settings.log_level,
                    "propagate": True,
                },
            },
        }
    )


configure_logging(LoggingSettings())


def get_logger(name: str) -> BoundLogger:
    """Get a structured logger.

    Example:
        logger = get_logger(__name__)
        logger.info("roaster_created", roaster_id=12)
        # {"event": "roaster_created", "roaster_id": 12, "request_id": "...", ...}
    """
    return structlog.get_logger(name)  # type: ignore[no-any-return]
