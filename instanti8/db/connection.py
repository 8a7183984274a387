"""aiosqlite access for the deployment registry."""

import logging

import aiosqlite

from instanti8.db.schema import SCHEMA_SQL, SCHEMA_VERSION

logger = logging.getLogger(__name__)

DEFAULT_DB_PATH = "instanti8.db"


class Database:
    """One shared aiosqlite connection. Writes commit immediately."""

    def __init__(self, connection: aiosqlite.Connection) -> None:
        self._conn = connection

    @classmethod
    async def connect(cls, path: str = DEFAULT_DB_PATH) -> "Database":
        conn = await aiosqlite.connect(path)
        conn.row_factory = aiosqlite.Row
        # In-memory databases report "memory" and ignore WAL
        await conn.execute("PRAGMA journal_mode=WAL")
        await conn.execute("PRAGMA busy_timeout=5000")

        db = cls(conn)
        await db._migrate()
        logger.info("Opened deployment database %s (schema v%d)", path, SCHEMA_VERSION)
        return db

    async def schema_version(self) -> int:
        row = await self.fetchone("PRAGMA user_version")
        return row[0] if row is not None else 0

    async def execute(self, sql: str, params: tuple = ()) -> int:
        """Run one write statement, commit, and return the affected row count."""
        cursor = await self._conn.execute(sql, params)
        await self._conn.commit()
        return cursor.rowcount

    async def fetchone(self, sql: str, params: tuple = ()) -> aiosqlite.Row | None:
        async with self._conn.execute(sql, params) as cursor:
            return await cursor.fetchone()

    async def fetchall(self, sql: str, params: tuple = ()) -> list[aiosqlite.Row]:
        async with self._conn.execute(sql, params) as cursor:
            return list(await cursor.fetchall())

    async def close(self) -> None:
        await self._conn.close()

    async def _migrate(self) -> None:
        if await self.schema_version() >= SCHEMA_VERSION:
            return
        await self._conn.executescript(SCHEMA_SQL)
        await self._conn.execute(f"PRAGMA user_version={SCHEMA_VERSION}")
        await self._conn.commit()
