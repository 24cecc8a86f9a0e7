"""SQLite key-value client wrapper.

Values are stored as JSON text under string keys, one row per key.
"""

import asyncio
import json
import logging
import threading
from pathlib import Path
from typing import Any

import aiosqlite

from tree_of_growth.core.config import settings


logger = logging.getLogger(__name__)

KV_TABLE = "kv_store"


def get_db_path(db_path: str | None = None) -> Path:
    """Get the resolved SQLite database file path."""
    path_str = db_path or settings.sqlite_db_path
    return Path(path_str).resolve()


_db_connections: dict[tuple[int, int, str], tuple[asyncio.AbstractEventLoop, aiosqlite.Connection]] = {}
_db_lock = asyncio.Lock()


async def get_connection(*, db_path: str | None = None) -> aiosqlite.Connection:
    """Get or create a cached connection for the current thread, loop, and db path."""
    thread_id = threading.get_ident()
    loop = asyncio.get_running_loop()
    loop_id = id(loop)
    path = get_db_path(db_path)
    cache_key = (thread_id, loop_id, str(path))

    # A closed loop's id can be reused by a new loop; its connection is stale
    if cache_key in _db_connections:
        owner_loop, cached_conn = _db_connections[cache_key]
        if owner_loop is loop and not owner_loop.is_closed():
            return cached_conn
        async with _db_lock:
            _db_connections.pop(cache_key, None)
        logger.info("Dropped stale SQLite connection", extra={"db_path": str(path), "loop_id": loop_id})

    async with _db_lock:
        # Double-check after acquiring lock
        if cache_key in _db_connections:
            return _db_connections[cache_key][1]

        path.parent.mkdir(parents=True, exist_ok=True)

        conn = await aiosqlite.connect(str(path))
        await conn.execute("PRAGMA journal_mode = WAL")

        _db_connections[cache_key] = (loop, conn)

        logger.info(
            "Created new SQLite connection",
            extra={"db_path": str(path), "thread_id": thread_id, "loop_id": loop_id},
        )
        return conn


async def close_connection(*, db_path: str | None = None) -> None:
    """Close the cached SQLite connection for the current thread, loop, and db path."""
    thread_id = threading.get_ident()
    loop_id = id(asyncio.get_running_loop())
    path = get_db_path(db_path)
    cache_key = (thread_id, loop_id, str(path))

    if cache_key not in _db_connections:
        return

    try:
        async with _db_lock:
            entry = _db_connections.pop(cache_key, None)
            if entry is not None:
                _, conn = entry
                await conn.close()
                logger.info("Closed SQLite connection", extra={"db_path": str(path)})
    except Exception as e:
        logger.warning("Error closing SQLite connection", extra={"error": str(e), "db_path": str(path)})


async def init_db(*, db_path: str | None = None) -> None:
    """Initialize the database schema by delegating to schema.init_db()."""
    from tree_of_growth.core import schema  # local import to avoid cycle

    await schema.init_db(db_path=db_path)


async def get_item(*, key: str, db_path: str | None = None) -> Any | None:
    """Return the decoded value stored under key, or None if absent."""
    try:
        conn = await get_connection(db_path=db_path)
        cursor = await conn.execute(f"SELECT value FROM {KV_TABLE} WHERE key = ?", (key,))  # noqa: S608
        row = await cursor.fetchone()
        if row is None:
            return None
        return json.loads(row[0])
    except Exception as e:
        logger.error("get_item_failed", extra={"key": key, "error": str(e)})
        msg = f"Failed to read item {key}: {e}"
        raise RuntimeError(msg) from e


async def set_item(*, key: str, value: Any, db_path: str | None = None) -> None:
    """Store value (JSON-encoded) under key, replacing any previous value."""
    try:
        conn = await get_connection(db_path=db_path)
        await conn.execute(
            f"INSERT INTO {KV_TABLE} (key, value) VALUES (?, ?) "  # noqa: S608
            "ON CONFLICT(key) DO UPDATE SET value = excluded.value",
            (key, json.dumps(value)),
        )
        await conn.commit()
        logger.info("Stored item", extra={"key": key})
    except Exception as e:
        logger.error("set_item_failed", extra={"key": key, "error": str(e)})
        msg = f"Failed to write item {key}: {e}"
        raise RuntimeError(msg) from e


async def multi_get(*, keys: list[str], db_path: str | None = None) -> dict[str, Any | None]:
    """Return a mapping of each key to its decoded value (None when absent)."""
    return {key: await get_item(key=key, db_path=db_path) for key in keys}


async def multi_set(*, items: dict[str, Any], db_path: str | None = None) -> None:
    """Store several values in a single transaction."""
    try:
        conn = await get_connection(db_path=db_path)
        await conn.executemany(
            f"INSERT INTO {KV_TABLE} (key, value) VALUES (?, ?) "  # noqa: S608
            "ON CONFLICT(key) DO UPDATE SET value = excluded.value",
            [(key, json.dumps(value)) for key, value in items.items()],
        )
        await conn.commit()
        logger.info("Stored items", extra={"keys": list(items)})
    except Exception as e:
        logger.error("multi_set_failed", extra={"keys": list(items), "error": str(e)})
        msg = f"Failed to write items {list(items)}: {e}"
        raise RuntimeError(msg) from e
