"""
Core logging module.

This module configures the application logging with Loguru.
"""

import logging
import os
import sys

from loguru import logger

from shortener.core.config import settings


class InterceptHandler(logging.Handler):
    """
    Intercept standard logging and redirect to loguru.

    Repositories and services log through ``logging.getLogger(__name__)``;
    this handler forwards those records so every message ends up in the
    same Loguru sinks.
    """

    def emit(self, record: logging.LogRecord) -> None:
        # Try to get corresponding Loguru level or use level number
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Find caller from where the logged message originated
        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


def ensure_request_level() -> None:
    try:
        logger.level("REQUEST")
    except ValueError:
        logger.level("REQUEST", no=25, color="<green>")


def setup_logging():
    """
    Configure Loguru sinks and route standard library logging into them.

    Sinks:
        stderr: only when ``DEBUG`` is on
        file: when ``LOG_TO_FILE`` is on; one JSON object per line if
            ``LOG_JSON``, otherwise ``LOG_FORMAT`` text. Rotated and gzipped.

    Returns:
        The configured loguru logger
    """
    logger.remove()

    level = settings.LOG_LEVEL.upper()

    if settings.DEBUG:
        logger.add(
            sys.stderr,
            level=level,
            format=settings.LOG_FORMAT,
            backtrace=True,
            diagnose=True,
        )

    if settings.LOG_TO_FILE:
        os.makedirs(settings.LOG_DIR, exist_ok=True)
        layout = {"serialize": True} if settings.LOG_JSON else {"format": settings.LOG_FORMAT}
        logger.add(
            os.path.join(settings.LOG_DIR, settings.LOG_FILENAME),
            level=level,
            rotation=settings.LOG_ROTATION,
            retention=settings.LOG_RETENTION,
            compression="gz",
            **layout,
        )

    ensure_request_level()

    # Everything logged through the logging module ends up in Loguru
    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    for name in list(logging.root.manager.loggerDict):
        logging.getLogger(name).handlers = []
        logging.getLogger(name).propagate = True

    # Server loggers write to Loguru directly
    for name in ("uvicorn", "uvicorn.access", "uvicorn.error", "fastapi"):
        server_logger = logging.getLogger(name)
        server_logger.handlers = [InterceptHandler()]
        server_logger.propagate = False

    return logger
