# Copyright (C) 2024 Hub Redirector Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""Database connection and session management."""

import logging
from collections.abc import AsyncGenerator

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from hub_redirector.config import settings
from hub_redirector.models.base import Base

logger = logging.getLogger(__name__)


WRITE_TRANSACTION = {"sqlite_begin": "IMMEDIATE"}


def configure_sqlite(engine: AsyncEngine) -> None:
    """Emit BEGIN ourselves so write transactions can ask for the lock up front.

    Reads stay deferred and, with WAL, never wait on a writer. Transactions
    started through begin_write() use BEGIN IMMEDIATE, which queues concurrent
    registrations instead of letting them deadlock on the lock upgrade.
    """

    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine.sync_engine, "begin")
    def _on_begin(conn):
        mode = conn.get_execution_options().get("sqlite_begin")
        conn.exec_driver_sql(f"BEGIN {mode}" if mode else "BEGIN")


async def begin_write(db: AsyncSession) -> None:
    """Start db's transaction as a write transaction.

    Must run before the first statement of the transaction; on backends
    other than SQLite the option is ignored.
    """
    await db.connection(execution_options=WRITE_TRANSACTION)


def create_engine(url: str) -> AsyncEngine:
    if url.startswith("sqlite"):
        engine = create_async_engine(url, echo=False)
        configure_sqlite(engine)
        return engine
    return create_async_engine(
        url,
        echo=False,
        pool_pre_ping=True,
        pool_size=10,
        max_overflow=20,
    )


engine = create_engine(settings.database_url)

async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Dependency for FastAPI that yields a database session."""
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def init_db() -> None:
    """Create all tables and seed bootstrap invites. Call at startup."""
    from hub_redirector.services.invites import create_invites

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    if settings.bootstrap_invites:
        async with async_session_maker() as session:
            created = await create_invites(session, settings.bootstrap_invites)
        if created:
            logger.info("Seeded %d bootstrap invite(s)", len(created))
