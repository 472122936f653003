"""Logging configuration and utilities."""

import logging
import sys
from typing import Any

import structlog
from structlog.processors import JSONRenderer, TimeStamper, add_log_level
from structlog.stdlib import add_logger_name, filter_by_level

from chargeback_api.core.config import Settings


def _service_metadata(service_name: str, version: str) -> Any:
    """Build a processor that stamps every event with service name and version."""

    def add_service_metadata(logger: Any, method_name: str, event_dict: dict) -> dict:
        if service_name:
            event_dict.setdefault("service", service_name)
        if version:
            event_dict.setdefault("version", version)
        return event_dict

    return add_service_metadata


def setup_logging(settings: Settings, force_json: bool = False) -> None:
    """Configure structured logging.

    Args:
        settings: Application settings.
        force_json: Render JSON regardless of the configured format. The Lambda
            handler sets this so CloudWatch always receives structured lines.
    """
    log_level = settings.app.log_level.upper()

    processors: list[Any] = [
        filter_by_level,
        add_log_level,
        add_logger_name,
        _service_metadata(settings.observability.service_name, settings.app.version),
        TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if force_json or settings.observability.log_record_format == "json":
        processors.append(JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        wrapper_class=structlog.stdlib.BoundLogger,
        processors=processors,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=log_level,
        force=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger for a module."""
    return structlog.get_logger(name)


class LoggerMixin:
    """Mixin providing logger access."""

    @property
    def logger(self) -> structlog.stdlib.BoundLogger:
        """Get logger for this instance."""
        return get_logger(self.__class__.__module__)
