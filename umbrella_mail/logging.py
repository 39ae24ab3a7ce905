"""Structured logging setup using structlog.

The library itself only emits ``debug`` events (``mail_session_derived``,
``mime_message_built``); errors are raised to the caller, never logged.
"""

from __future__ import annotations

import logging
import sys
from typing import TextIO

import structlog


def setup_logging(
    *,
    json: bool = True,
    level: str = "WARNING",
    stream: TextIO | None = None,
) -> None:
    """Route umbrella_mail's structlog events through stdlib logging.

    Parameters
    ----------
    json:
        Render JSON lines if *True*, otherwise the console renderer.
    level:
        Root log level name.  Pass ``"DEBUG"`` to see the library's events.
    stream:
        Where log lines go.  Defaults to the current ``sys.stderr`` so the
        CLI can keep stdout for the rendered message.
    """
    if json:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    # module-level loggers must follow later reconfiguration, so no caching
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                renderer,
            ],
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level.upper())
