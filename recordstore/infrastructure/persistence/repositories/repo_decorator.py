"""Store method decorator: timing, structured logs and error translation.

Unique-constraint violations surface as ``ConflictError`` and any other
SQLAlchemy failure as ``StoreError``. Domain errors raised inside a store
method pass through untouched.
"""

import asyncio
from collections.abc import Callable, Coroutine
import functools
import time
from typing import Any, ParamSpec, TypeVar

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from recordstore.config import get_logger
from recordstore.domain.exceptions import ConflictError, RecordStoreError, StoreError

P = ParamSpec("P")
T = TypeVar("T")

logger = get_logger(__name__)

_LOGGABLE = int | str | float | bool


def db_operation(operation_name: str | None = None):
    """Wrap an async store method with logging and error translation.

    Args:
        operation_name: Name used in log records (defaults to the method name)

    Example:
        @db_operation("find_record_by_id")
        async def find_by_id(self, record_id: int) -> Record | None:
            ...
    """

    def decorator(
        method: Callable[P, Coroutine[Any, Any, T]],
    ) -> Callable[P, Coroutine[Any, Any, T]]:
        name = operation_name or method.__name__
        if not asyncio.iscoroutinefunction(method):
            raise TypeError(f"db_operation needs a coroutine function, got {name}")

        @functools.wraps(method)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            store = type(args[0]).__name__ if args else "store"
            bound = logger.bind(operation=name, **loggable_kwargs(kwargs))
            started = time.perf_counter()

            def took_ms() -> float:
                return round((time.perf_counter() - started) * 1000, 2)

            bound.trace(f"{store}.{name} started")
            try:
                result = await method(*args, **kwargs)
            except RecordStoreError:
                raise
            except IntegrityError as e:
                bound.warning(
                    f"{store}.{name} violated a constraint",
                    error=str(e.orig),
                    exec_time_ms=took_ms(),
                )
                raise ConflictError(str(e.orig)) from e
            except SQLAlchemyError as e:
                bound.error(
                    f"{store}.{name} failed",
                    error=str(e),
                    error_type=type(e).__name__,
                    exec_time_ms=took_ms(),
                )
                raise StoreError(f"{name} failed: {e}") from e

            bound.trace(f"{store}.{name} finished", exec_time_ms=took_ms())
            return result

        return wrapper

    return decorator


def loggable_kwargs(kwargs: dict[str, Any]) -> dict[str, Any]:
    """Scalar, non-private keyword arguments suitable for log context."""
    return {
        key: value
        for key, value in kwargs.items()
        if not key.startswith("_") and isinstance(value, _LOGGABLE)
    }
