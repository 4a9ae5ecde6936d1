"""
Async database access helpers (raw SQL) using asyncpg.

This module owns the connection pool. FastAPI initializes it on startup and
closes it on shutdown (see `api/main.py`).

SQL parameter style:
- asyncpg uses positional placeholders: $1, $2, $3, ...
"""

from __future__ import annotations

import asyncio
import functools
import logging
import os
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Awaitable, Callable, TypeVar
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

import asyncpg

from core.errors import PersistenceError

DEFAULT_POOL_MIN_SIZE = 1
DEFAULT_POOL_MAX_SIZE = 5
DEFAULT_COMMAND_TIMEOUT = 30

logger = logging.getLogger(__name__)

_pool: asyncpg.Pool | None = None

T = TypeVar("T")

# Failures raised by the driver or the network underneath it.
DRIVER_ERRORS = (
    asyncpg.PostgresError,
    asyncpg.InterfaceError,
    OSError,
    asyncio.TimeoutError,
)


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _sanitize_database_url(url: str) -> str:
    parts = urlsplit(url)
    if not parts.query:
        return url

    params = [(k, v) for (k, v) in parse_qsl(parts.query, keep_blank_values=True) if k != "sslmode"]
    query = urlencode(params)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))


def database_url() -> str:
    url = os.environ.get("DATABASE_URL", "").strip()
    if not url:
        raise RuntimeError("DATABASE_URL is not set.")
    return _sanitize_database_url(url)


def pool_min_size() -> int:
    return _env_int("DB_POOL_MIN_SIZE", DEFAULT_POOL_MIN_SIZE)


def pool_max_size() -> int:
    return max(pool_min_size(), _env_int("DB_POOL_MAX_SIZE", DEFAULT_POOL_MAX_SIZE))


def command_timeout() -> int:
    return _env_int("DB_COMMAND_TIMEOUT", DEFAULT_COMMAND_TIMEOUT)


async def init_pool() -> None:
    global _pool
    if _pool is not None:
        return None
    _pool = await asyncpg.create_pool(
        dsn=database_url(),
        min_size=pool_min_size(),
        max_size=pool_max_size(),
        command_timeout=command_timeout(),
    )
    logger.info("db_pool_opened min_size=%s max_size=%s", pool_min_size(), pool_max_size())


async def close_pool() -> None:
    global _pool
    if _pool is None:
        return None
    await _pool.close()
    _pool = None
    logger.info("db_pool_closed")


def pool() -> asyncpg.Pool:
    if _pool is None:
        raise RuntimeError("DB pool is not initialized. Call init_pool() on startup.")
    return _pool


@asynccontextmanager
async def transaction(target: asyncpg.Pool | None = None) -> AsyncIterator[asyncpg.Connection]:
    """
    Acquire a pooled connection and run the block inside a transaction.

    Uses the process pool unless `target` is given.

    Commits when the block exits normally, rolls back when it raises.
    """
    source = target if target is not None else pool()
    async with source.acquire() as conn:  # type: asyncpg.Connection
        async with conn.transaction():
            yield conn


def rows_affected(status: str | None) -> int:
    """
    Parse the row count out of an asyncpg command tag.

    "DELETE 3" -> 3, "UPDATE 0" -> 0, "INSERT 0 1" -> 1.
    """
    parts = (status or "").split()
    if not parts:
        return 0
    try:
        return int(parts[-1])
    except ValueError:
        return 0


def translate_errors(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
    """
    Re-raise driver failures from a coroutine as `PersistenceError`.
    """

    @functools.wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> T:
        try:
            return await func(*args, **kwargs)
        except DRIVER_ERRORS as exc:
            raise PersistenceError(f"{func.__qualname__} failed: {exc}") from exc

    return wrapper
