"""
MapIt Backend: Connection Provider
====================================

What:  Builds the async SQLAlchemy engine (and its asyncpg connection pool)
       from settings, and hands out per-request sessions.
How:   `Database` is an explicitly constructed resource: the app lifespan
       creates one with `Database.from_settings()`, stores it on
       `app.state.database`, and disposes it on shutdown. Route handlers
       receive it through the `get_database` / `get_db_session` dependencies.
       There is no module-level engine.

Connection Pooling:
    pool_size=20, max_overflow=10: at most 30 concurrent connections
    pool_pre_ping:   validates connections before checkout
    pool_timeout:    bounded wait for a free connection
    pool_recycle:    connections are recycled after one hour

    A session checks a connection out on its first statement and returns it
    when the session closes at the end of the request, on success or error.
"""

import logging
import ssl
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, AsyncGenerator, AsyncIterator, Dict, List

from fastapi import Depends, Request
from sqlalchemy import func, select
from sqlalchemy.engine import URL, make_url
from sqlalchemy.exc import ArgumentError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.sql.base import Executable

from mapit.config import Settings, settings
from mapit.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

ASYNC_DRIVER = "postgresql+asyncpg"

# libpq understands these in a connection string; asyncpg.connect() does not
LIBPQ_ONLY_OPTIONS = ("sslmode", "channel_binding")


# ── Base Model ────────────────────────────────────────────────────────────
class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    All models share this metadata, which Alembic reads for migrations and the
    SQLite test suite uses for `create_all`.
    """
    pass


# ── URL / Connect-Args Construction ───────────────────────────────────────
def build_engine_url(config: Settings) -> URL:
    """
    Turn settings into a SQLAlchemy URL for the async engine.

    Connection string form wins when present. `postgres://` and
    `postgresql://` (or another Postgres driver) are rewritten to use asyncpg;
    other backends (e.g. sqlite+aiosqlite) are left untouched.

    Raises:
        ConfigurationError: neither DATABASE_URL nor DB_HOST is configured,
            or DATABASE_URL cannot be parsed.
    """
    if config.database_url:
        try:
            url = make_url(config.database_url)
        except (ArgumentError, ValueError) as e:
            raise ConfigurationError(f"Invalid DATABASE_URL: {e}") from e
        backend = url.drivername.split("+", 1)[0]
        if backend in ("postgres", "postgresql"):
            url = url.set(drivername=ASYNC_DRIVER)
        return url.difference_update_query(LIBPQ_ONLY_OPTIONS)

    if config.db_host:
        return URL.create(
            ASYNC_DRIVER,
            username=config.db_user,
            password=config.db_password or None,
            host=config.db_host,
            port=config.db_port,
            database=config.db_name,
        )

    raise ConfigurationError()


def relaxed_ssl_context() -> ssl.SSLContext:
    """TLS context that encrypts but does not verify the server certificate."""
    context = ssl.create_default_context()
    context.check_hostname = False
    context.verify_mode = ssl.CERT_NONE
    return context


def build_connect_args(config: Settings) -> Dict[str, Any]:
    """
    asyncpg keyword arguments derived from settings.

    - timeout / command_timeout: connect and per-statement caps
    - ssl: relaxed context when DATABASE_SSL_RELAXED is on, otherwise the
      connection string's `sslmode` value (asyncpg accepts the libpq names)
    """
    url = build_engine_url(config)
    if url.get_backend_name() != "postgresql":
        return {}

    args: Dict[str, Any] = {
        "timeout": config.db_connect_timeout,
        "command_timeout": config.db_command_timeout,
    }
    if config.database_url:
        sslmode = make_url(config.database_url).query.get("sslmode")
        if config.database_ssl_relaxed:
            args["ssl"] = relaxed_ssl_context()
        elif sslmode:
            args["ssl"] = sslmode
    return args


# ── Pool Resource ─────────────────────────────────────────────────────────
@dataclass
class QueryResult:
    """Rows (as dicts) plus the row count of a single statement."""

    rows: List[Dict[str, Any]] = field(default_factory=list)
    row_count: int = 0


class Database:
    """
    Pooled database handle shared by all requests of one process.

    Safe for concurrent use: the only shared state is the engine's pool,
    and every session/connection is checked out and returned independently.
    """

    def __init__(self, engine: AsyncEngine):
        self.engine = engine
        # expire_on_commit=False: response models read attributes after commit
        self._session_factory = async_sessionmaker(
            engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @classmethod
    def from_settings(cls, config: Settings = settings) -> "Database":
        """
        Create the engine and its pool. No connection is opened until the
        first statement runs.

        Raises:
            ConfigurationError: no database configuration present, or the URL names
                no installed dialect.
        """
        url = build_engine_url(config)
        try:
            engine = create_async_engine(
                url,
                pool_size=config.db_pool_size,
                max_overflow=config.db_max_overflow,
                pool_pre_ping=config.db_pool_pre_ping,
                pool_timeout=config.db_pool_timeout,
                pool_recycle=3600,
                echo=config.log_level == "DEBUG",
                connect_args=build_connect_args(config),
            )
        except ArgumentError as e:
            # e.g. no dialect installed for the URL scheme
            raise ConfigurationError(f"Invalid DATABASE_URL: {e}") from e
        logger.info("Database pool configured for %s", url.render_as_string(hide_password=True))
        return cls(engine)

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """
        Unit-of-work session: commits on success, rolls back on any error,
        and always returns its connection to the pool.
        """
        async with self._session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def query(self, statement: Executable) -> QueryResult:
        """Run one statement on a pooled connection inside its own transaction."""
        async with self.engine.begin() as conn:
            result = await conn.execute(statement)
            if result.returns_rows:
                rows = [dict(row) for row in result.mappings().all()]
                return QueryResult(rows=rows, row_count=len(rows))
            return QueryResult(row_count=result.rowcount)

    async def current_time(self) -> datetime:
        """Server-side current timestamp; the cheapest end-to-end round trip."""
        result = await self.query(select(func.now().label("now")))
        return result.rows[0]["now"]

    async def dispose(self) -> None:
        """Close every pooled connection. Called once at shutdown."""
        await self.engine.dispose()


# ── FastAPI Dependencies ──────────────────────────────────────────────────
def get_database(request: Request) -> Database:
    """
    Resolve the process-wide `Database` from application state.

    Raises:
        ConfigurationError: the pool was never created (missing configuration).
    """
    database = getattr(request.app.state, "database", None)
    if database is None:
        if not settings.has_database_config:
            raise ConfigurationError()
        startup_error = getattr(request.app.state, "database_error", None)
        if startup_error:
            raise ConfigurationError(startup_error)
        raise ConfigurationError("Database connection pool is not initialized")
    return database


async def get_db_session(
    database: Database = Depends(get_database),
) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    Example usage in a route:
        @router.get("/maps")
        async def list_maps(db: AsyncSession = Depends(get_db_session)):
            ...
    """
    async with database.session() as session:
        yield session
