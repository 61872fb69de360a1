"""
Structured logging setup for the API, the CLI and local runs.

Logs go to stdout (stderr for the CLI) as one JSON object per line, so
they can be shipped to any log aggregator without parsing. Modules obtain
loggers through ``structlog.get_logger(__name__)`` and log event-style
keys such as ``calculation.completed``.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional, TextIO

import structlog


def configure_logging(
    level: str = "INFO",
    stream: Optional[TextIO] = None,
) -> structlog.stdlib.BoundLogger:
    """
    Configure structured JSON logging.

    Parameters
    ----------
    level : str
        Stdlib level name ("DEBUG", "INFO", ...). Unknown names fall back
        to INFO.
    stream : file-like, optional
        Destination of the log lines. Defaults to stdout; the CLI passes
        stderr so its report on stdout stays clean.

    Returns
    -------
    structlog.stdlib.BoundLogger
        Logger bound with ``service="retireplan"``.

    Example log entry::

        {"event": "calculation.completed", "level": "info",
         "timestamp": "2026-01-05T13:00:00Z", "service": "retireplan",
         "n_sims": 1000, "elapsed_ms": 41.2}
    """
    logging.basicConfig(
        format="%(message)s",
        stream=stream if stream is not None else sys.stdout,
        level=getattr(logging, level.upper(), logging.INFO),
        force=True,
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    return structlog.get_logger("retireplan").bind(service="retireplan")
