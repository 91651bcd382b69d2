"""Database connection, session management and transaction retries."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Awaitable, Callable, TypeVar

from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from staff_payroll.config import get_settings

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine

logger = logging.getLogger(__name__)

T = TypeVar("T")


def get_engine(database_url: str | None = None) -> AsyncEngine:
    """Create async database engine."""
    settings = get_settings()
    url = database_url or settings.database_url
    if url.startswith("sqlite"):
        return create_async_engine(url, echo=False)
    return create_async_engine(
        url,
        echo=False,
        pool_pre_ping=True,
        pool_size=10,
        max_overflow=20,
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Build a session factory bound to an engine."""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


# Global engine and session factory
_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def init_db() -> tuple[AsyncEngine, async_sessionmaker[AsyncSession]]:
    """Initialize database engine and session factory."""
    global _engine, _session_factory
    if _engine is None:
        _engine = get_engine()
        _session_factory = create_session_factory(_engine)
    return _engine, _session_factory


async def dispose_db() -> None:
    """Dispose the global engine."""
    global _engine, _session_factory
    if _engine is not None:
        await _engine.dispose()
    _engine = None
    _session_factory = None


async def run_in_transaction(
    factory: async_sessionmaker[AsyncSession],
    work: Callable[[AsyncSession], Awaitable[T]],
    attempts: int | None = None,
) -> T:
    """Run a unit of work in its own transaction, retrying transient failures.

    The whole unit is re-run in a fresh session when the store reports an
    OperationalError (lost connection, lock timeout). Business errors are
    rolled back and re-raised without a retry.
    """
    settings = get_settings()
    max_attempts = attempts or settings.transaction_retries

    for attempt in range(1, max_attempts + 1):
        async with factory() as session:
            try:
                result = await work(session)
                await session.commit()
                return result
            except OperationalError as exc:
                await session.rollback()
                if attempt >= max_attempts:
                    raise
                logger.warning(
                    "Transient store failure (attempt %d/%d): %s",
                    attempt,
                    max_attempts,
                    exc.orig,
                )
            except Exception:
                await session.rollback()
                raise
        await asyncio.sleep(settings.transaction_retry_backoff * attempt)

    raise RuntimeError("run_in_transaction exhausted without a result")
