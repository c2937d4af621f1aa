"""
Connection Engine (SQLAlchemy)

Purpose
-------
Centralizes database initialization for the application:
- Builds the SQLAlchemy connection URL from environment-backed settings.
- Creates the Engine (connection pool + SQL execution entry point).
- Defines shared MetaData for table and schema objects.
- Exposes a Declarative Base class for ORM models.
- Exposes the portable column types shared by the entities.

Notes
-----
- `settings.DATABASE_URL` wins when set (used by the test-suite to point at SQLite);
  otherwise `URL.create(...)` assembles the URL from the `DB_*` parts.
- JSON and list columns resolve to JSONB / ARRAY(TEXT) on PostgreSQL and to plain
  JSON elsewhere, so the same models run against the managed Postgres and SQLite.
"""

from sqlalchemy import JSON, TEXT, create_engine
from sqlalchemy.dialects.postgresql import ARRAY, JSONB
from sqlalchemy.engine import URL, make_url
from sqlalchemy.orm import declarative_base
from sqlalchemy.schema import MetaData
from legal_intake.database.config.config import settings


def build_connection_url() -> URL:
    """Return the database URL, preferring an explicit `DATABASE_URL`."""
    if settings.DATABASE_URL:
        return make_url(settings.DATABASE_URL)
    return URL.create(
        drivername=settings.DB_DRIVER_NAME,
        username=settings.DB_USERNAME,
        password=settings.DB_PASSWORD,
        host=settings.DB_HOST,
        port=settings.DB_PORT,
        database=settings.DB_DATABASE_NAME,
    )


connection_url = build_connection_url()
"""SQLAlchemy connection URL built from Settings."""

# --------------------------------------------------------------------
# Engine object: core interface to the database.
# Responsible for managing connections, executing SQL, and pooling.
# --------------------------------------------------------------------
connection_engine = create_engine(connection_url, pool_pre_ping=True)
"""Engine object: Core interface to the database."""

metadata = MetaData()
"""
Metadata object: Stores schema-level information about tables, constraints, indexes, etc. Shared across all models.
"""

declarativeBase = declarative_base(metadata=metadata)
"""Declarative Base: Root class for ORM models."""

JSONType = JSON().with_variant(JSONB(), "postgresql")
"""Free-form JSON blob (JSONB on PostgreSQL)."""

StringList = JSON().with_variant(ARRAY(TEXT), "postgresql")
"""List of strings (text[] on PostgreSQL, JSON array elsewhere)."""
