"""SQLAlchemy engine cache for the database blob backend."""

from functools import lru_cache
from typing import Any, Dict

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool


@lru_cache()
def get_engine(database_url: str) -> Engine:
    """One engine per URL; sqlite in-memory URLs share a single connection."""

    kwargs: Dict[str, Any] = {}
    if database_url.startswith("sqlite") and ":memory:" in database_url:
        kwargs = {"poolclass": StaticPool, "connect_args": {"check_same_thread": False}}
    return create_engine(database_url, echo=False, future=True, **kwargs)
