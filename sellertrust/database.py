"""Database connection and session management."""

import ssl
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from urllib.parse import parse_qs, urlencode, urlparse, urlunparse

from sqlalchemy import JSON
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from sellertrust.config import Settings
from sellertrust.errors import PersistenceFailure


class Base(DeclarativeBase):
    """SQLAlchemy declarative base."""

    pass


def get_engine_url_and_connect_args(database_url: str) -> tuple[str, dict]:
    """Strip sslmode from URL (asyncpg doesn't accept it) and pass SSL via connect_args."""
    url = database_url
    connect_args: dict = {}
    if "sslmode=" in url or "ssl=" in url:
        parsed = urlparse(url)
        query = parse_qs(parsed.query)
        modes = query.pop("sslmode", []) + query.pop("ssl", [])
        new_query = urlencode(query, doseq=True)
        url = urlunparse(parsed._replace(query=new_query))
        if any(m not in ("disable", "false") for m in modes):
            connect_args["ssl"] = ssl.create_default_context()
    return url, connect_args


def create_engine(settings: Settings) -> AsyncEngine:
    url, connect_args = get_engine_url_and_connect_args(settings.database_url)
    return create_async_engine(
        url,
        echo=settings.log_level.upper() == "DEBUG",
        connect_args=connect_args,
    )


def create_session_maker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )


@asynccontextmanager
async def session_scope(
    session_maker: async_sessionmaker[AsyncSession],
) -> AsyncIterator[AsyncSession]:
    """One unit of work: commit on success, roll back everything on failure.

    Storage errors (including stale optimistic versions) surface as
    PersistenceFailure; domain errors propagate unchanged.
    """
    async with session_maker() as session:
        try:
            yield session
            await session.commit()
        except SQLAlchemyError as exc:
            await session.rollback()
            raise PersistenceFailure(str(exc)) from exc
        except BaseException:
            await session.rollback()
            raise


# Generic JSON everywhere, JSONB on PostgreSQL.
JSONDocument = JSON().with_variant(JSONB(), "postgresql")
