"""FieldSync Core Store -- 键值持久化实现

提供工厂函数创建共享同一个键值仓库的 Store 实例组。
每个 StoreGroup 对应一个浏览上下文（标签页/窗口）。
"""

import asyncio
from pathlib import Path

import aiosqlite
from ulid import ULID

from ..clock import Clock, now_ms
from .chat_store import ChatStore
from .codec import RecordList
from .memory_kv import InMemoryKeyValueStore
from .outbox_queue import OutboxQueue, append_change, build_action, clear_change
from .protocols import KeyValueStore
from .session_store import SessionStore
from .sqlite_init import init_db
from .sqlite_kv import SqliteKeyValueStore
from .task_store import KvTaskStore
from .transaction import (
    reset_tasks_and_clear_outbox,
    write_chat_and_append_action,
    write_tasks_and_append_action,
)


class StoreGroup:
    """Store 实例组 -- 共享同一个键值仓库和上下文写锁"""

    def __init__(
        self,
        kv: KeyValueStore,
        clock: Clock = now_ms,
        conn: aiosqlite.Connection | None = None,
    ) -> None:
        self.kv = kv
        self.clock = clock
        self.conn = conn
        # 日志中区分不同上下文
        self.context_id = f"ctx-{ULID()}"
        # 同一上下文内的整键读-改-写串行执行
        self.write_lock = asyncio.Lock()
        self.task_store = KvTaskStore(kv)
        self.outbox = OutboxQueue(kv, clock, self.write_lock)
        self.chat_store = ChatStore(kv)
        self.session_store = SessionStore(kv)

    async def close(self) -> None:
        """关闭底层数据库连接（内存实现无需关闭）"""
        if self.conn is not None:
            await self.conn.close()


async def create_store_group(db_path: str, clock: Clock = now_ms) -> StoreGroup:
    """创建基于 SQLite 的 Store 实例组

    Args:
        db_path: SQLite 数据库文件路径
        clock: 毫秒时间源

    Returns:
        StoreGroup 实例
    """
    # 确保数据库目录存在
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    conn = await aiosqlite.connect(db_path)
    await init_db(conn)

    return StoreGroup(SqliteKeyValueStore(conn), clock=clock, conn=conn)


def create_memory_store_group(
    kv: InMemoryKeyValueStore | None = None,
    clock: Clock = now_ms,
) -> StoreGroup:
    """创建基于内存仓库的 Store 实例组（传入同一 kv 可模拟多个上下文）"""
    return StoreGroup(kv if kv is not None else InMemoryKeyValueStore(), clock=clock)


__all__ = [
    "StoreGroup",
    "create_store_group",
    "create_memory_store_group",
    "KeyValueStore",
    "SqliteKeyValueStore",
    "InMemoryKeyValueStore",
    "KvTaskStore",
    "OutboxQueue",
    "ChatStore",
    "SessionStore",
    "build_action",
    "append_change",
    "clear_change",
    "RecordList",
    "init_db",
    "write_tasks_and_append_action",
    "write_chat_and_append_action",
    "reset_tasks_and_clear_outbox",
]
