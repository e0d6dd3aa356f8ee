"""Document store layer for fundbook."""

from fundbook.database.base import DocumentStore
from fundbook.database.factories import create_sqlite_store

__all__ = ["DocumentStore", "create_sqlite_store"]
