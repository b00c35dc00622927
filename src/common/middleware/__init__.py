"""Common middleware for EventsFixer."""

from .observability import StructlogContextMiddleware

__all__ = ["StructlogContextMiddleware"]
