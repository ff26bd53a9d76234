"""Loguru setup for the record store.

Public API:
----------
setup_loguru_logger(verbose: bool = False) -> None
    Install the console and JSON file sinks

get_logger(name: str) -> Logger
    Logger bound to a module name; use ``get_logger(__name__)``

log_startup_info() -> None
    Banner plus the effective configuration (URLs masked)

@resilient_operation(operation_name: str)
    Log failures of an outbound call and re-raise them

configure_stdlib_logging() -> None
    Route uvicorn and httpx log records into Loguru
"""

from collections.abc import Awaitable, Callable
import functools
import logging
from pathlib import Path
import sys
from typing import Any, ParamSpec, TypeVar

from loguru import logger

from .settings import settings

P = ParamSpec("P")
R = TypeVar("R")

CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{extra[module]}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)

# =============================================================================
# SINKS
# =============================================================================


def setup_loguru_logger(verbose: bool = False) -> None:
    """Replace Loguru's default sink with the application sinks.

    Args:
        verbose: DEBUG on the console, with backtraces and variable dumps

    Note:
        - The console sink is colorized and human-oriented
        - The file sink writes one JSON object per record, rotated at 10 MB
    """
    logger.remove()
    logger.configure(extra={"service": "recordstore", "module": "root"})

    logger.add(
        sink=sys.stdout,
        level="DEBUG" if verbose else settings.logging.console_level,
        format=CONSOLE_FORMAT,
        colorize=True,
        backtrace=verbose,
        diagnose=verbose,
    )

    log_file = Path(settings.logging.log_file)
    log_file.parent.mkdir(parents=True, exist_ok=True)
    logger.add(
        sink=str(log_file),
        level=settings.logging.file_level,
        serialize=True,
        rotation="10 MB",
        retention="1 week",
        compression="zip",
        backtrace=True,
        diagnose=False,
        enqueue=not settings.logging.real_time_debug,
        catch=True,
    )


def get_logger(name: str) -> Any:  # loguru's Logger type is not public
    """Logger carrying ``module`` and ``service`` in its extra context.

    Example:
        ```python
        logger = get_logger(__name__)
        logger.info("Record created", record_id=42)
        ```
    """
    return logger.bind(module=name, service="recordstore")


def log_startup_info() -> None:
    """Log a banner, then every settings value at DEBUG."""
    startup_logger = get_logger(__name__)
    rule = "=" * 50

    startup_logger.info("{}", rule)
    startup_logger.info("Record Store API")
    startup_logger.info("{}", rule)

    for section, values in settings.model_dump().items():
        if not isinstance(values, dict):
            startup_logger.debug("{} = {}", section, values)
            continue
        for key, value in values.items():
            # Connection strings may carry credentials
            if key.endswith("url"):
                value = "<set>" if value else "<unset>"
            startup_logger.debug("{}.{} = {}", section, key, value)


# =============================================================================
# SERVICE BOUNDARIES
# =============================================================================


def resilient_operation(operation_name: str | None = None):
    """Log a failing outbound call with its operation name, then re-raise.

    Callers still decide which failures are soft.

    Example:
        >>> @resilient_operation("musicbrainz_release_xml")
        >>> async def fetch_release_xml(self, mbid):
        >>>     ...
    """

    def decorator(
        func: Callable[P, Awaitable[R]],
    ) -> Callable[P, Awaitable[R]]:
        name = operation_name or func.__name__

        @functools.wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            try:
                return await func(*args, **kwargs)
            except Exception as e:
                logger.bind(operation=name).warning(
                    f"{name} failed: {e!s}", error_type=type(e).__name__
                )
                raise

        return wrapper

    return decorator


# =============================================================================
# STDLIB BRIDGE
# =============================================================================


class _InterceptHandler(logging.Handler):
    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno
        logger.bind(module=record.name).opt(exception=record.exc_info).log(
            level, record.getMessage()
        )


def configure_stdlib_logging() -> None:
    """Send uvicorn and httpx records through Loguru instead of stderr."""
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access", "httpx"):
        std_logger = logging.getLogger(name)
        std_logger.handlers = [_InterceptHandler()]
        std_logger.propagate = False
