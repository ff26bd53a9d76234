"""HTTP API."""

from recordstore.infrastructure.api.app import create_app

__all__ = ["create_app"]
