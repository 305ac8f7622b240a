"""SyncEngine -- Outbox 至少一次投递引擎

每轮 sweep：
1. 按追加顺序取出所有未确认动作
2. 逐条投递（单次尝试带超时），成功即按动作 ID 单独确认
3. 失败按指数退避重试，耗尽后保留在队列中并通知观测协作方
4. 同一 task 的后续动作在本轮跳过，保证远端看到的因果顺序

触发方式：周期 tick（start/stop）或连接恢复事件（notify_online）。
投递中途被取消时动作保持未确认，下次 sweep 重新投递，由远端按 ID 去重。
"""

import asyncio
import contextlib
from collections.abc import Awaitable, Callable

import structlog
from pydantic import BaseModel, Field

from fieldsync.core.models import OutboxAction
from fieldsync.core.store import OutboxQueue
from fieldsync.exceptions import SyncFailure, TransportUnavailableError

from .config import SyncConfig, load_sync_config
from .observer import LoggingSyncObserver, SyncObserver
from .transport import SimulatedTransport, SyncTransport

log = structlog.get_logger()


class SyncReport(BaseModel):
    """单轮 sweep 结果"""

    synced: list[str] = Field(default_factory=list, description="本轮确认的动作 ID")
    failed: list[str] = Field(default_factory=list, description="耗尽重试仍失败的动作 ID")
    deferred: list[str] = Field(
        default_factory=list,
        description="因同一 task 的前序动作失败而跳过的动作 ID",
    )

    @property
    def pending(self) -> int:
        """本轮结束后仍未确认的动作数"""
        return len(self.failed) + len(self.deferred)


class SyncEngine:
    """Outbox 同步引擎

    Args:
        outbox: OutboxQueue 实例
        transport: 投递实现，默认 SimulatedTransport（总是确认）
        config: 同步配置，默认从环境变量加载
        observer: 观测协作方，默认写日志
        sleep: 退避等待函数（测试可替换）
    """

    def __init__(
        self,
        outbox: OutboxQueue,
        transport: SyncTransport | None = None,
        config: SyncConfig | None = None,
        observer: SyncObserver | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._outbox = outbox
        self._transport = transport if transport is not None else SimulatedTransport()
        self._config = config if config is not None else load_sync_config()
        self._observer = observer if observer is not None else LoggingSyncObserver()
        self._sleep = sleep
        self._sweep_lock = asyncio.Lock()
        self._wake = asyncio.Event()
        self._loop_task: asyncio.Task | None = None

    async def sweep(self) -> SyncReport:
        """执行一轮同步（并发调用串行执行）"""
        async with self._sweep_lock:
            report = SyncReport()
            pending = await self._outbox.drain_unsynced()
            blocked_tasks: set[str] = set()

            for action in pending:
                if action.task_id in blocked_tasks:
                    report.deferred.append(action.id)
                    continue

                if await self._deliver_with_retry(action):
                    await self._outbox.mark_synced(action.id)
                    report.synced.append(action.id)
                else:
                    blocked_tasks.add(action.task_id)
                    report.failed.append(action.id)

            if pending:
                log.info(
                    "outbox_sweep_completed",
                    synced=len(report.synced),
                    failed=len(report.failed),
                    deferred=len(report.deferred),
                )
            return report

    async def _deliver_with_retry(self, action: OutboxAction) -> bool:
        """投递单条动作，失败按指数退避重试

        Returns:
            True 如果远端确认
        """
        last_error: SyncFailure | None = None
        max_attempts = self._config.max_attempts

        for attempt in range(1, max_attempts + 1):
            try:
                await asyncio.wait_for(
                    self._transport.deliver(action),
                    timeout=self._config.timeout_s,
                )
                return True
            except TimeoutError as e:
                last_error = TransportUnavailableError(action.id, e)
            except SyncFailure as e:
                last_error = e
            except Exception as e:
                last_error = SyncFailure(action.id, f"{type(e).__name__}: {e}")

            if attempt < max_attempts:
                delay = self._config.backoff_delay(attempt)
                log.warning(
                    "outbox_delivery_retry",
                    action_id=action.id,
                    attempt=attempt,
                    max_attempts=max_attempts,
                    wait_s=delay,
                    reason=last_error.reason,
                )
                await self._sleep(delay)

        await self._observer.on_delivery_failed(action, last_error, max_attempts)
        return False

    def notify_online(self) -> None:
        """连接恢复事件：唤醒周期循环立即执行一轮 sweep"""
        self._wake.set()

    def start(self) -> None:
        """启动周期同步任务"""
        if self._loop_task is None or self._loop_task.done():
            self._loop_task = asyncio.create_task(self._run())
            log.info("sync_engine_started", interval_s=self._config.interval_s)

    async def stop(self) -> None:
        """取消周期同步任务，进行中的投递随之取消"""
        if self._loop_task is None:
            return
        self._loop_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._loop_task
        self._loop_task = None
        log.info("sync_engine_stopped")

    @property
    def running(self) -> bool:
        return self._loop_task is not None and not self._loop_task.done()

    async def _run(self) -> None:
        while True:
            self._wake.clear()
            try:
                await self.sweep()
            except Exception as e:
                log.error("outbox_sweep_failed", error_type=type(e).__name__)
            with contextlib.suppress(TimeoutError):
                await asyncio.wait_for(self._wake.wait(), timeout=self._config.interval_s)
