"""OutboxQueue -- 待同步变更的 append-only 日志

条目永不单独删除：只会被标记 syncedAt，或在会话重置时整体清空。
mark_synced 按动作 ID 逐条确认，远端按 ID 去重即可保证重投幂等。
"""

import asyncio

import structlog
from ulid import ULID

from ..clock import Clock
from ..config import LS_OUTBOX
from ..models.enums import OutboxActionType
from ..models.outbox import OutboxAction
from ..models.payloads import OutboxPayload
from .codec import RecordList, dump_models, load_models
from .protocols import KeyValueStore

log = structlog.get_logger()


def build_action(
    task_id: str,
    action_type: OutboxActionType,
    payload: OutboxPayload,
    queued_at: int,
) -> OutboxAction:
    """构建待入队的 OutboxAction（分配 ID 与 queuedAt）"""
    return OutboxAction(
        id=f"a-{ULID()}",
        queued_at=queued_at,
        task_id=task_id,
        type=action_type,
        payload=payload,
    )


def append_change(outbox: list[OutboxAction], action: OutboxAction) -> dict[str, str | None]:
    """原地追加一条动作，返回待提交的 worker_outbox 写入项"""
    outbox.append(action)
    return {LS_OUTBOX: dump_models(outbox)}


def clear_change() -> dict[str, str | None]:
    """整体清空 Outbox 的写入项（墓碑值）"""
    return {LS_OUTBOX: None}


class OutboxQueue:
    """Outbox 队列

    Args:
        kv: 键值仓库
        clock: 毫秒时间源
        lock: 上下文写锁，与 TaskService 共享以串行化同一上下文内的整键写入
    """

    def __init__(self, kv: KeyValueStore, clock: Clock, lock: asyncio.Lock) -> None:
        self._kv = kv
        self._clock = clock
        self._lock = lock

    async def read(self) -> RecordList[OutboxAction]:
        """读取完整日志（追加顺序），无法校验的条目保留在 unreadable 中"""
        return load_models(await self._kv.get(LS_OUTBOX), OutboxAction, LS_OUTBOX)

    async def enqueue(
        self,
        task_id: str,
        action_type: OutboxActionType,
        payload: OutboxPayload,
    ) -> OutboxAction:
        """追加一条不伴随业务数据变更的动作（供语音助手等外部调用方使用）

        TaskService 的变更已持有同一把写锁，
        直接经由 append_change 原子提交，不调用此方法。
        """
        async with self._lock:
            outbox = await self.read()
            action = build_action(task_id, action_type, payload, self._clock())
            await self._kv.write_many(append_change(outbox, action))
        log.debug("outbox_enqueued", action_id=action.id, task_id=task_id, type=action_type)
        return action

    async def drain_unsynced(self) -> list[OutboxAction]:
        """返回所有未确认条目（追加顺序），不修改日志"""
        return [a for a in await self.read() if not a.is_synced]

    async def mark_synced(self, action_id: str) -> bool:
        """按动作 ID 确认单条条目

        Returns:
            True 如果本次调用确认了该条目；已确认或不存在返回 False
        """
        async with self._lock:
            outbox = await self.read()
            for index, action in enumerate(outbox):
                if action.id == action_id:
                    if action.is_synced:
                        return False
                    outbox[index] = action.model_copy(update={"synced_at": self._clock()})
                    await self._write(outbox)
                    return True
        return False

    async def mark_all_synced(self) -> int:
        """将所有未确认条目标记为已同步（幂等）

        Returns:
            本次标记的条目数
        """
        async with self._lock:
            outbox = await self.read()
            now = self._clock()
            marked = 0
            for index, action in enumerate(outbox):
                if not action.is_synced:
                    outbox[index] = action.model_copy(update={"synced_at": now})
                    marked += 1
            if marked:
                await self._write(outbox)
        return marked

    async def clear(self) -> None:
        """单独清空 Outbox

        会话重置还要重写任务列表，
        由 reset_tasks_and_clear_outbox 以同一 clear_change 原子提交。
        """
        async with self._lock:
            await self._kv.write_many(clear_change())
        log.info("outbox_cleared")

    async def _write(self, outbox: list[OutboxAction]) -> None:
        await self._kv.set(LS_OUTBOX, dump_models(outbox))
