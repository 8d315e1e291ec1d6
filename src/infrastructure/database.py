"""
Async SQLAlchemy engine and session factory.

Uses ``asyncpg`` as the PostgreSQL driver for non-blocking I/O.  The
``Database`` object is built once by the app factory (or a script), handed
to request handlers through ``app.state`` and disposed on shutdown.
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy import MetaData, inspect, text
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Shared declarative base for all ORM models."""


class Database:
    """Engine + session factory; extra keyword arguments go to the engine."""

    def __init__(
        self,
        url: str,
        *,
        metadata: Optional[MetaData] = None,
        echo: bool = False,
        **engine_kwargs,
    ):
        self.engine = create_async_engine(url, echo=echo, **engine_kwargs)
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )
        self.metadata = metadata if metadata is not None else Base.metadata

    async def create_all(self) -> list[str]:
        """Create every table (and PostGIS on PostgreSQL); return table names."""
        async with self.engine.begin() as conn:
            if conn.dialect.name == "postgresql":
                await conn.execute(text("CREATE EXTENSION IF NOT EXISTS postgis"))
            await conn.run_sync(self.metadata.create_all)
        return sorted(self.metadata.tables)

    async def table_names(self) -> list[str]:
        """Tables that currently exist in the database."""
        async with self.engine.connect() as conn:
            names = await conn.run_sync(
                lambda sync_conn: inspect(sync_conn).get_table_names()
            )
        return sorted(names)

    async def drop_all(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(self.metadata.drop_all)

    async def dispose(self) -> None:
        await self.engine.dispose()
