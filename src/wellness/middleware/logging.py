"""structlog setup: level filtering, request context, JSON or console rendering."""

import logging

import structlog

from wellness.config import Settings

# Chatty libraries held at WARNING unless running with debug on.
_QUIET_LOGGERS = ("sqlalchemy.engine", "aiosqlite", "asyncio")


def build_processors(settings: Settings) -> list[structlog.types.Processor]:
    """Processor chain for ``settings``.

    ``filter_by_level`` runs first, so events below the configured level
    (the engine's per-badge debug events, say) are dropped before any
    formatting work is done.
    """
    renderer: structlog.types.Processor = (
        structlog.processors.JSONRenderer() if settings.log_format == "json" else structlog.dev.ConsoleRenderer()
    )
    return [
        structlog.stdlib.filter_by_level,
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        renderer,
    ]


def setup_logging(settings: Settings) -> None:
    """Configure structlog on top of stdlib logging at ``settings.log_level``."""
    level = getattr(logging, settings.log_level.upper(), logging.INFO)

    structlog.configure(
        processors=build_processors(settings),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(level=level, format="%(message)s")
    logging.getLogger().setLevel(level)
    if not settings.debug:
        for name in _QUIET_LOGGERS:
            logging.getLogger(name).setLevel(max(level, logging.WARNING))
