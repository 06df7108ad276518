"""Database package."""

from .db import configure_engine, get_session, init_db
from .models import Base, StoredValue

__all__ = ["configure_engine", "get_session", "init_db", "Base", "StoredValue"]
