"""API route modules."""

from . import extension, health

__all__ = ["extension", "health"]
