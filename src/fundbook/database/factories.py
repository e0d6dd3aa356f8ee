"""Factory functions for creating document store instances."""

import os
from pathlib import Path
from typing import Optional

from fundbook.database.sqlalchemy_store import SQLAlchemyDocumentStore


def create_sqlite_store(database_path: Optional[str] = None) -> SQLAlchemyDocumentStore:
    """Create a SQLite-backed document store.

    Args:
        database_path: Path to SQLite database file. If None, checks FUNDBOOK_DB_PATH
            environment variable, then defaults to ~/.fundbook/fundbook.db

    Returns:
        SQLAlchemyDocumentStore instance configured for SQLite
    """
    if database_path is None:
        database_path = os.environ.get("FUNDBOOK_DB_PATH")

    if database_path is None:
        db_dir = Path.home() / ".fundbook"
        db_dir.mkdir(exist_ok=True)
        database_path = str(db_dir / "fundbook.db")

    return SQLAlchemyDocumentStore(f"sqlite:///{database_path}")
