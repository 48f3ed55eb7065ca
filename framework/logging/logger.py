import sys
from pathlib import Path
from contextvars import ContextVar
from typing import Optional
from loguru import logger
from fastapi import Request
from framework.config import settings

# Store current request in contextvars for async context
_current_request: ContextVar[Optional[Request]] = ContextVar("current_request", default=None)

LOG_DIR = Path(settings.LOG_DIR)
LOG_DIR.mkdir(parents=True, exist_ok=True)

FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} | Trace:{extra[trace_id]} - {message}"


class LogConfig:
    """Global logging configuration using Loguru."""

    @classmethod
    def setup_logging(cls, level: Optional[str] = None):
        logger.remove()

        logger.add(
            sys.stdout,
            enqueue=True,
            backtrace=True,
            diagnose=settings.DEBUG,
            format=(
                "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
                "<level>{level: <8}</level> | "
                "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
                "<magenta>Trace:{extra[trace_id]}</magenta> - <level>{message}</level>"
            ),
            level=level or settings.LOG_LEVEL,
        )

        logger.add(
            LOG_DIR / "app_{time:YYYY-MM-DD}.log",
            rotation="00:00",
            retention="30 days",
            compression="zip",
            enqueue=True,
            format=FILE_FORMAT,
            level="DEBUG",
        )

        logger.add(
            LOG_DIR / "error_{time:YYYY-MM-DD}.log",
            level="ERROR",
            rotation="100 MB",
            enqueue=True,
            format=FILE_FORMAT,
        )

        logger.configure(extra={"trace_id": "system"})


def get_logger(name: str = None, request: Optional[Request] = None):
    """
    Get logger instance.

    With a request (passed or current) its trace_id is bound. Without one,
    as for module-level loggers, trace_id is left unbound so the value set by
    LoggingMiddleware via logger.contextualize applies at log time.
    """
    current_request = request or _current_request.get()

    extra = {"name": name} if name else {}
    if current_request is not None:
        extra["trace_id"] = getattr(current_request.state, "trace_id", "unknown")
    return logger.bind(**extra)
