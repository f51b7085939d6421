import logging
import sys
from typing import Optional, Tuple

import structlog

# Libraries that log through the standard library while the browser runs
DRIVER_LOGGERS: Tuple[str, ...] = ("selenium", "urllib3")


def _level(name: str, default: int) -> int:
    return getattr(logging, name.upper(), default)


def configure_logging(
    log_level: str = "INFO",
    json_logs: bool = False,
    driver_log_level: str = "WARNING",
):
    """
    Route texcorrect events through structlog and the WebDriver client's
    stdlib loggers to the same stream.

    ``driver_log_level`` applies to the ``selenium`` and ``urllib3`` loggers
    only; their DEBUG output carries every WebDriver HTTP round trip.
    """
    level = _level(log_level, logging.INFO)

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.format_exc_info,
    ]
    if json_logs:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )

    logging.basicConfig(format="%(levelname)s %(name)s: %(message)s", stream=sys.stderr, level=level)
    for name in DRIVER_LOGGERS:
        logging.getLogger(name).setLevel(_level(driver_log_level, logging.WARNING))


def get_logger(name: Optional[str] = None):
    return structlog.get_logger(name)
