"""Router exports for FastAPI composition."""

from . import entries, health, view

__all__ = ["entries", "health", "view"]
