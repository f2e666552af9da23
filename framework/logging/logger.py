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
LOG_DIR.mkdir(exist_ok=True)

_RECORD = "{name}:{function}:{line} | {extra[deployment]} | Trace:{extra[trace_id]} - {message}"
CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<blue>{extra[deployment]}</blue> | <magenta>Trace:{extra[trace_id]}</magenta> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | " + _RECORD


class LogConfig:
    """Loguru sinks for one deployment: console, daily file and error file."""

    @classmethod
    def setup_logging(cls, deployment: str = "app", level: str = "INFO"):
        logger.remove()
        logger.configure(extra={"trace_id": "system", "deployment": deployment})

        logger.add(sys.stdout, enqueue=True, backtrace=True, diagnose=True,
                   format=CONSOLE_FORMAT, level=level)
        logger.add(
            LOG_DIR / f"{deployment}_{{time:YYYY-MM-DD}}.log",
            rotation="00:00",
            retention="30 days",
            compression="zip",
            enqueue=True,
            format=FILE_FORMAT,
            level="DEBUG",
        )
        logger.add(
            LOG_DIR / f"{deployment}_error_{{time:YYYY-MM-DD}}.log",
            format=FILE_FORMAT,
            level="ERROR",
            rotation="100 MB",
            enqueue=True,
        )

def get_logger(name: str = None, request: Optional[Request] = None):
    """Logger bound to the request's trace id (explicit request, else the one in context)."""
    current_request = request or _current_request.get()
    trace_id = getattr(current_request.state, "trace_id", "unknown") if current_request is not None else "unknown"
    bound = logger.bind(trace_id=trace_id)
    return bound.bind(name=name) if name else bound
