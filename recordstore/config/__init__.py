"""Configuration module for the record store.

This module provides a type-safe configuration system using Pydantic Settings
together with the Loguru logging setup.

Public API:
----------
settings: Settings instance
    Pydantic settings object with nested configuration

get_logger(name: str) -> Logger
    Get a context-aware logger for your module

setup_loguru_logger(verbose: bool = False) -> None
    Configure Loguru logger for the application

resilient_operation(operation_name: str)
    Decorator for logging errors at service boundaries

Usage:
------
```python
from recordstore.config import settings
ttl = settings.cache.record_ttl

from recordstore.config import get_logger
logger = get_logger(__name__)
logger.info("Starting operation")
```
"""

from .logging import (
    configure_stdlib_logging,
    get_logger,
    log_startup_info,
    resilient_operation,
    setup_loguru_logger,
)
from .settings import Settings, settings

__all__ = [
    "Settings",
    "configure_stdlib_logging",
    "get_logger",
    "log_startup_info",
    "resilient_operation",
    "settings",
    "setup_loguru_logger",
]
