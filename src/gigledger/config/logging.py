"""Logging setup: structlog events routed through stdlib handlers on stderr.

gigledger's own loggers log at WARNING, or DEBUG with ``--verbose``.
``--log-json`` swaps the console renderer for one JSON object per line.
Library loggers (SQLAlchemy in particular) stay at WARNING either way.

Every event logged while a command runs carries ``caller_id`` once
:func:`bind_caller` has been called for the resolved profile.
"""

from __future__ import annotations

import logging
import sys

import structlog
from structlog.types import Processor

_QUIET_LIBRARIES = ("sqlalchemy",)


def _shared_processors() -> list[Processor]:
    """Processors applied to structlog and foreign stdlib records alike."""
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def _renderer(log_json: bool) -> Processor:
    if log_json:
        return structlog.processors.JSONRenderer(sort_keys=True)
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())


def _stderr_handler(log_json: bool) -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=_shared_processors(),
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(log_json),
            ],
        )
    )
    return handler


def configure_logging(*, verbose: bool = False, log_json: bool = False) -> None:
    """Install the stderr handler and set gigledger's log level.

    Safe to call more than once; each call replaces the root handlers.
    """
    structlog.contextvars.clear_contextvars()
    structlog.configure(
        processors=[
            *_shared_processors(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    root = logging.getLogger()
    root.handlers[:] = [_stderr_handler(log_json)]
    root.setLevel(logging.WARNING)

    logging.getLogger("gigledger").setLevel(logging.DEBUG if verbose else logging.WARNING)
    for name in _QUIET_LIBRARIES:
        logging.getLogger(name).setLevel(logging.WARNING)


def bind_caller(profile_id: int) -> None:
    """Tag every later log event in this context with ``caller_id``."""
    structlog.contextvars.bind_contextvars(caller_id=profile_id)
