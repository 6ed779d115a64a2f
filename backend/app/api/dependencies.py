"""Shared API dependencies."""

from __future__ import annotations

from functools import lru_cache

from ..context import AppContext, build_app_context

__all__ = ["get_app_context"]


@lru_cache()
def _app_context_singleton() -> AppContext:
    return build_app_context()


def get_app_context() -> AppContext:
    """Return the process-wide application context."""

    return _app_context_singleton()
