import logging
import sys
from contextlib import contextmanager
from typing import Any, Iterator

import structlog

from marketbed.core.errors import ConfigurationError

# Libraries whose request-level chatter drowns out step logs
NOISY_LOGGERS = ("httpx", "httpcore")


def configure_logging(level: int | str = logging.INFO, log_format: str = "auto") -> None:
    """Configure structlog on top of standard logging.

    ``log_format`` is "json", "console", or "auto" (console on a TTY,
    JSON otherwise).
    """
    if isinstance(level, str):
        name = level
        level = logging.getLevelName(name.upper())
        if not isinstance(level, int):
            raise ConfigurationError(f"Unknown log level: {name}", details={"log_level": name})

    if log_format == "auto":
        log_format = "console" if sys.stderr.isatty() else "json"
    renderer = (
        structlog.dev.ConsoleRenderer()
        if log_format == "console"
        else structlog.processors.JSONRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.format_exc_info,
            renderer,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(level=level, format="%(message)s", stream=sys.stderr)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))


@contextmanager
def run_context(**kwargs: Any) -> Iterator[None]:
    """Attach fields (run id, mode) to every log line emitted inside the block."""
    with structlog.contextvars.bound_contextvars(**kwargs):
        yield
