from sqlalchemy.orm import DeclarativeBase

from ota_sync.config import SCHEMA


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    All models in this application inherit from this base class to provide
    consistent table metadata and ORM functionality across the database schema.
    """

    pass


def qualified(table: str) -> str:
    """Return the table name prefixed with the configured schema, if any."""
    return f"{SCHEMA}.{table}" if SCHEMA else table
