"""
Loguru setup for transit-http.

The request pipeline logs through loguru directly. httpx and httpcore log
through the standard library, so their records are forwarded into loguru by
InterceptHandler once setup_logging() has run.
"""

import logging
import sys

from loguru import logger

# Standard library loggers used by the HTTP stack
HTTP_LOGGERS = ("httpx", "httpcore")

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)


class InterceptHandler(logging.Handler):
    """
    Forwards standard library records to loguru.
    See: https://loguru.readthedocs.io/en/stable/overview.html#entirely-compatible-with-standard-logging
    """

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Skip logging-module frames so loguru reports the real caller
        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def intercept_http_loggers(names=HTTP_LOGGERS) -> None:
    """Route the named standard library loggers into loguru."""
    for name in names:
        std_logger = logging.getLogger(name)
        std_logger.handlers = [InterceptHandler()]
        std_logger.propagate = False


def setup_logging(level: str | None = None, serialize: bool = False) -> None:
    """
    Replace loguru's sinks with a single stdout sink.

    Args:
        level: Minimum level. Defaults to the LOG_LEVEL setting.
        serialize: Emit JSON lines instead of the colored format.
    """
    if level is None:
        from transit_core.config import settings

        level = settings.LOG_LEVEL

    logger.remove()
    if serialize:
        logger.add(sys.stdout, level=level, serialize=True)
    else:
        logger.add(sys.stdout, format=LOG_FORMAT, level=level, colorize=True)

    intercept_http_loggers()
    logger.debug(f"Logging initialized at {level}")
