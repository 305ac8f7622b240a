"""KeyValueStore SQLite 实现

同一个数据库文件可以被多个连接（多个上下文）同时打开，
WAL 模式下读写互不阻塞，写写之间由 busy_timeout 排队，整键后写者胜出。
"""

from datetime import UTC, datetime

import aiosqlite

_UPSERT_SQL = """
INSERT INTO kv_storage (key, value, revision, updated_at)
VALUES (?, ?, 1, ?)
ON CONFLICT(key) DO UPDATE SET
    value = excluded.value,
    revision = kv_storage.revision + 1,
    updated_at = excluded.updated_at
"""


class SqliteKeyValueStore:
    """KeyValueStore 的 SQLite 实现"""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self._conn = conn

    async def get(self, key: str) -> str | None:
        cursor = await self._conn.execute(
            "SELECT value FROM kv_storage WHERE key = ?",
            (key,),
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        return row[0]

    async def set(self, key: str, value: str) -> None:
        await self.write_many({key: value})

    async def remove(self, key: str) -> None:
        await self.write_many({key: None})

    async def write_many(self, changes: dict[str, str | None]) -> None:
        """在同一事务内写入多个键（None 写入墓碑值）

        Raises:
            Exception: 如果事务提交失败，自动回滚
        """
        ts = datetime.now(UTC).isoformat()
        try:
            for key, value in changes.items():
                await self._conn.execute(_UPSERT_SQL, (key, value, ts))
            await self._conn.commit()
        except Exception:
            await self._conn.rollback()
            raise

    async def revisions(self) -> dict[str, int]:
        cursor = await self._conn.execute("SELECT key, revision FROM kv_storage")
        rows = await cursor.fetchall()
        return {row[0]: row[1] for row in rows}
