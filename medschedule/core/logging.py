"""Logging configuration."""

import logging
import sys

import structlog

from medschedule.config import Settings, settings as default_settings


def _select_renderer(settings: Settings) -> structlog.typing.Processor:
    """
    Pick the final renderer for the configured log format.

    ``auto`` keeps colored console output for local development and emits
    JSON lines in every other environment.
    """
    log_format = settings.log_format
    if log_format == "auto":
        log_format = "console" if settings.is_development else "json"

    if log_format == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=settings.is_development and sys.stdout.isatty())


def configure_logging(settings: Settings | None = None) -> None:
    """
    Configure structured logging from settings.

    Every event carries the application name, version and environment.
    Production drops stack info rendering and the positional formatter.

    Args:
        settings: Settings to configure from, defaults to the module settings
    """
    settings = settings or default_settings
    level = getattr(logging, settings.log_level.upper())

    processors: list[structlog.typing.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=settings.is_production),
    ]
    if not settings.is_production:
        processors += [
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
        ]
    processors += [
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        _select_renderer(settings),
    ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=not settings.is_development,
    )

    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(
        app=settings.app_name,
        version=settings.app_version,
        environment=settings.environment,
    )

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)
    logging.getLogger().setLevel(level)
