from contextlib import asynccontextmanager
from typing import AsyncIterator

import structlog
from fastapi import Request
from sqlalchemy import event
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from shared.errors import ConflictError, InternalError

logger = structlog.get_logger(__name__)

# Storefront tables (accounts, products, cart, orders) share one database so
# order placement can run as a single transaction. The federated services
# declare their own bases because each owns a separate store.
Base = declarative_base()


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """Connection pool plus session factory for one relational store.

    Built once by an app factory and stored on ``app.state.database``;
    nothing in the code base reaches for a process-wide engine.
    """

    def __init__(self, url: str, echo: bool = False, pool_size: int | None = None):
        self.url = url
        engine_kwargs = {"echo": echo}
        if pool_size and not url.startswith("sqlite"):
            engine_kwargs["pool_size"] = pool_size
        self.engine = create_async_engine(url, **engine_kwargs)
        if url.startswith("sqlite"):
            event.listen(self.engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
        self.sessionmaker = async_sessionmaker(self.engine, expire_on_commit=False)

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        async with self.sessionmaker() as session:
            yield session

    async def create_all(self, base=Base) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(base.metadata.create_all)

    async def drop_all(self, base=Base) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(base.metadata.drop_all)

    async def dispose(self) -> None:
        await self.engine.dispose()


async def get_db(request: Request) -> AsyncIterator[AsyncSession]:
    """One session per request, released on every exit path."""
    database: Database = request.app.state.database
    async with database.session() as session:
        yield session


@asynccontextmanager
async def unit_of_work(session: AsyncSession) -> AsyncIterator[AsyncSession]:
    """Commit on success, roll back on any exception.

    Constraint violations surface as ConflictError and other database faults
    as InternalError, both after the rollback; application errors raised
    inside the block propagate unchanged.
    """
    try:
        async with session.begin():
            yield session
    except IntegrityError as exc:
        logger.info("unit_of_work_conflict", error=str(exc.orig))
        raise ConflictError() from exc
    except SQLAlchemyError as exc:
        logger.error("unit_of_work_rolled_back", error=str(exc), error_type=type(exc).__name__)
        raise InternalError() from exc
