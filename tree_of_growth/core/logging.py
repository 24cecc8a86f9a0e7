"""Logfire setup and the span/log helpers used by the services and router.

Modules log through logging.getLogger(__name__) with extra={...}; once
configure_logfire() has run, Logfire picks those records up.
"""

import logging

import logfire
from fastapi import FastAPI

from tree_of_growth.core.config import settings


logger = logging.getLogger(__name__)


def configure_logfire() -> None:
    """Configure Logfire; without a logfire_token nothing leaves the process."""
    logfire.configure(
        token=settings.logfire_token,
        service_name="tree_of_growth",
        service_version="0.1.0",
        environment=settings.environment,
        send_to_logfire="if-token-present",
    )
    logger.info("Logfire configured", extra={"environment": settings.environment})


def instrument_fastapi(app: FastAPI) -> None:
    logfire.instrument_fastapi(app)
    logger.info("FastAPI instrumentation configured")


def span(name: str) -> logfire.LogfireSpan:
    """Open a span named after the service operation, e.g. "task_service.toggle_task"."""
    return logfire.span(name)


def log_with_context(target: logging.Logger, level: str, message: str, **context: object) -> None:
    """Log message at a named level ("warning", "error", ...) with context as extra fields."""
    target.log(logging.getLevelNamesMapping()[level.upper()], message, extra=context)
