"""SQLAlchemy models for the fundbook document store."""

import json
from datetime import datetime, date, UTC
from decimal import Decimal
from functools import partial
from typing import Any

from sqlalchemy import (
    Column,
    Integer,
    String,
    DateTime,
    JSON,
    Index,
    UniqueConstraint,
    create_engine,
)
from sqlalchemy.orm import declarative_base, sessionmaker, Session

Base = declarative_base()


class Document(Base):
    """A JSON document owned by a tenant."""

    __tablename__ = "documents"

    id = Column(Integer, primary_key=True)
    tenant = Column(String, nullable=False)
    collection = Column(String, nullable=False)
    key = Column(String, nullable=False)
    sequence = Column(Integer, nullable=False)
    body = Column(JSON, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)
    updated_at = Column(DateTime, nullable=True)

    __table_args__ = (
        UniqueConstraint("tenant", "collection", "key", name="uq_document_key"),
        Index("ix_document_scan", "tenant", "collection", "sequence"),
    )


def _json_default(value: Any) -> Any:
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(
        database_url,
        echo=False,
        json_serializer=partial(json.dumps, default=_json_default),
    )
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
