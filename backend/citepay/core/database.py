"""Database configuration and session management.

This module constructs an asynchronous SQLAlchemy engine and session
factory for the application.  The connection string comes from
`DATABASE_URL` (or its counterpart on the `Settings` object) and is
normalised to an async driver: ``aiosqlite`` for SQLite, ``psycopg``
for PostgreSQL and ``aiomysql`` for MySQL/MariaDB, which is what the
citation office runs.  When no URL is configured a local SQLite file may
be used in development if `DB_DEV_FALLBACK_SQLITE` is set.
"""

from __future__ import annotations

import logging
from typing import Any, AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.engine.url import make_url
from sqlalchemy.orm import declarative_base

from citepay.core.config import settings, resolve_database_url

logger = logging.getLogger(__name__)

SQLITE_FALLBACK_URL = "sqlite+aiosqlite:///./citepay.db"


def normalize_database_url(raw_url: str) -> str:
    """Upgrade a sync driver name to its async counterpart.

    Unknown or unparsable URLs are returned unchanged so SQLAlchemy can
    report the problem itself when the engine first connects.
    """
    try:
        url_obj = make_url(raw_url)
    except Exception:
        return raw_url

    driver = url_obj.drivername or ""
    # SQLite: upgrade to aiosqlite
    if driver == "sqlite":
        url_obj = url_obj.set(drivername="sqlite+aiosqlite")
    # PostgreSQL: psycopg 3 speaks asyncio natively
    elif driver in {"postgresql", "postgres", "postgresql+psycopg2", "postgresql+asyncpg"}:
        url_obj = url_obj.set(drivername="postgresql+psycopg")
    # MySQL / MariaDB
    elif driver in {"mysql", "mysql+pymysql", "mysql+mysqldb", "mariadb"}:
        url_obj = url_obj.set(drivername="mysql+aiomysql")
    return url_obj.render_as_string(hide_password=False)


# -----------------------------------------------------------------------------
# Determine the connection string to use.
#
# DATABASE_URL wins.  If it is undefined a local SQLite database may be used
# when DB_DEV_FALLBACK_SQLITE=true; otherwise the application raises.

db_url = resolve_database_url()

if not db_url:
    if not settings.DB_DEV_FALLBACK_SQLITE:
        raise RuntimeError(
            "No database URL provided via DATABASE_URL; with "
            "DB_DEV_FALLBACK_SQLITE=false, a MySQL or Postgres URL is required."
        )
    logger.warning("DATABASE_URL is not set; using %s for development", SQLITE_FALLBACK_URL)
    db_url = SQLITE_FALLBACK_URL

db_url = normalize_database_url(db_url)

engine_kwargs: dict[str, Any] = dict(echo=False, pool_pre_ping=True)

engine = create_async_engine(db_url, **engine_kwargs)

# Create session factory
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)

# Declarative base
Base = declarative_base()


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Dependency that yields a database session.

    This function is intended for FastAPI dependency injection.  Each
    session is scoped to the request and closed after use.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()


async def init_db() -> None:
    """Create the citation tables on an empty database.

    Only ``citepay.scripts.init_db`` calls this, to seed development and
    test databases.  The API never issues DDL; a production database is
    owned by the citation office.
    """
    async with engine.begin() as conn:
        # Import all models to ensure metadata is populated
        from citepay.models import tables  # noqa: F401
        await conn.run_sync(Base.metadata.create_all)
