"""Structured logging: structlog events routed through stdlib logging.

Library modules log through ``get_logger(__name__)``. Until an application
calls ``setup_logging()`` those events reach plain stdlib loggers with no
handlers, so debug and info output stays silent.
"""

from __future__ import annotations

import logging
import logging.config
import os

import structlog


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """structlog logger over the stdlib logger ``name``."""
    return structlog.wrap_logger(
        logging.getLogger(name), wrapper_class=structlog.stdlib.BoundLogger
    )


def setup_logging(level: str | None = None, fmt: str | None = None) -> None:
    """Configure structlog and stdlib logging to write to stderr.

    The library never calls this on import; applications and test harnesses
    opt in. Arguments override the environment variables:
        CARGO_HARNESS_LOG_LEVEL  log level (default: INFO)
        CARGO_HARNESS_LOG_FORMAT console | json (default: console)
    """
    log_level = (level or os.environ.get("CARGO_HARNESS_LOG_LEVEL", "INFO")).upper()
    log_format = (fmt or os.environ.get("CARGO_HARNESS_LOG_FORMAT", "console")).lower()

    # applied to structlog events and to records from plain stdlib loggers
    pre_chain: list[structlog.types.Processor] = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]

    if log_format == "json":
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
        tail: list[structlog.types.Processor] = [structlog.processors.format_exc_info]
    else:
        renderer = structlog.dev.ConsoleRenderer()
        tail = []

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *pre_chain,
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
                "cargo_harness": {
                    "()": structlog.stdlib.ProcessorFormatter,
                    "foreign_pre_chain": pre_chain,
                    "processors": [
                        structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                        *tail,
                        renderer,
                    ],
                },
            },
            "handlers": {
                "stderr": {
                    "class": "logging.StreamHandler",
                    "stream": "ext://sys.stderr",
                    "formatter": "cargo_harness",
                },
            },
            "root": {"handlers": ["stderr"], "level": "WARNING"},
            "loggers": {
                "cargo_harness": {"level": log_level},
            },
        }
    )
