"""SQLite schema for the key-value store."""

import logging

from tree_of_growth.core import db_client


logger = logging.getLogger(__name__)

SCHEMA_STATEMENTS = [
    f"""
    CREATE TABLE IF NOT EXISTS {db_client.KV_TABLE} (
        key TEXT PRIMARY KEY,
        value TEXT NOT NULL
    )
    """,
]


async def init_db(*, db_path: str | None = None) -> None:
    """Create the key-value table if it does not already exist."""
    conn = await db_client.get_connection(db_path=db_path)
    for statement in SCHEMA_STATEMENTS:
        await conn.execute(statement)
    await conn.commit()
    logger.info("Schema initialized", extra={"db_path": str(db_client.get_db_path(db_path))})
