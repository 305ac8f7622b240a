"""StorageChangeHub -- 跨上下文存储变更通知

轮询键值仓库的 revision，把发生变化的键名推送给订阅者。
通知只携带键名，不携带增量：订阅者收到后应失效缓存并重新读取。
每个订阅者持有一个 asyncio.Queue，支持 subscribe/unsubscribe/broadcast。
"""

import asyncio
import contextlib
from collections import defaultdict

import structlog

from fieldsync.core.config import STORE_REFRESH_INTERVAL_S
from fieldsync.core.store import KeyValueStore

log = structlog.get_logger()


class StorageChangeHub:
    """存储变更广播器 -- 基于 revision 轮询 + asyncio.Queue 的发布/订阅模式"""

    def __init__(
        self,
        kv: KeyValueStore,
        poll_interval_s: float = STORE_REFRESH_INTERVAL_S,
        queue_maxsize: int = 100,
    ) -> None:
        self._kv = kv
        self._poll_interval_s = poll_interval_s
        self._queue_maxsize = queue_maxsize
        # key -> set of asyncio.Queue
        self._subscribers: dict[str, set[asyncio.Queue]] = defaultdict(set)
        self._last_revisions: dict[str, int] | None = None
        self._poll_task: asyncio.Task | None = None

    async def subscribe(self, key: str) -> asyncio.Queue:
        """订阅指定键的变更

        Returns:
            asyncio.Queue 实例，键发生变化时推送键名
        """
        queue: asyncio.Queue = asyncio.Queue(maxsize=self._queue_maxsize)
        self._subscribers[key].add(queue)
        return queue

    async def unsubscribe(self, key: str, queue: asyncio.Queue) -> None:
        """取消订阅"""
        self._subscribers[key].discard(queue)
        if not self._subscribers[key]:
            del self._subscribers[key]

    async def broadcast(self, key: str) -> None:
        """向指定键的所有订阅者推送失效通知"""
        dead_queues = []
        for queue in self._subscribers.get(key, set()):
            try:
                queue.put_nowait(key)
            except asyncio.QueueFull:
                dead_queues.append(queue)

        # 清理已满的队列
        for q in dead_queues:
            self._subscribers[key].discard(q)
        if key in self._subscribers and not self._subscribers[key]:
            del self._subscribers[key]

    async def poll_once(self) -> list[str]:
        """比较一次 revision 快照并广播变化的键

        首次调用只建立基线，不产生通知。

        Returns:
            本次检测到变化的键名
        """
        current = await self._kv.revisions()
        previous = self._last_revisions
        self._last_revisions = current
        if previous is None:
            return []

        changed = sorted(
            key for key, revision in current.items() if previous.get(key) != revision
        )
        for key in changed:
            await self.broadcast(key)
        if changed:
            log.debug("storage_keys_changed", keys=changed)
        return changed

    def start(self) -> None:
        """启动后台轮询任务"""
        if self._poll_task is None or self._poll_task.done():
            self._poll_task = asyncio.create_task(self._poll_loop())

    async def stop(self) -> None:
        """取消后台轮询任务（视图销毁时调用，不留悬挂回调）"""
        if self._poll_task is None:
            return
        self._poll_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._poll_task
        self._poll_task = None

    async def _poll_loop(self) -> None:
        while True:
            try:
                await self.poll_once()
            except Exception as e:
                log.warning("storage_poll_failed", error_type=type(e).__name__)
            await asyncio.sleep(self._poll_interval_s)
