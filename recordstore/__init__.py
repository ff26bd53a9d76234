"""Record store inventory and ordering service."""

__version__ = "1.0.0"
