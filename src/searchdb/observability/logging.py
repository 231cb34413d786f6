"""Structured logging configuration using structlog.

SearchDB modules log through stdlib ``logging`` under the ``searchdb``
logger hierarchy.  ``setup_logging`` attaches a structlog
``ProcessorFormatter`` to that hierarchy so those records come out as JSON
(or console) events, tagged with the tenant namespace.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from searchdb.config.settings import ObservabilitySettings

LOGGER_NAME = "searchdb"


def setup_logging(settings: ObservabilitySettings | None = None, namespace: str | None = None) -> None:
    """Configure structured logging for the ``searchdb`` logger hierarchy.

    Args:
        settings: Observability settings. Uses defaults if None.
        namespace: Tenant namespace bound to every event, if given.
    """
    log_level = settings.log_level.upper() if settings else "INFO"
    log_format = settings.log_format if settings else "json"

    shared: list = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    renderer = structlog.dev.ConsoleRenderer() if log_format == "console" else structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *shared,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.UnicodeDecoder(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=[*shared, structlog.stdlib.ExtraAdder()],
        processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
    )
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    logger = logging.getLogger(LOGGER_NAME)
    logger.handlers = [handler]
    logger.setLevel(getattr(logging, log_level, logging.INFO))
    logger.propagate = False

    if namespace is not None:
        structlog.contextvars.bind_contextvars(namespace=namespace)
