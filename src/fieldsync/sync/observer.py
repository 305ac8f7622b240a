"""SyncObserver -- 同步失败的观测协作方

持续失败不抛给 UI，而是交给观测协作方记录或告警。
"""

from typing import Protocol

import structlog

from fieldsync.core.models import OutboxAction
from fieldsync.exceptions import SyncFailure

log = structlog.get_logger()


class SyncObserver(Protocol):
    """同步观测接口"""

    async def on_delivery_failed(
        self,
        action: OutboxAction,
        error: SyncFailure,
        attempts: int,
    ) -> None:
        """单条动作在本轮耗尽重试后仍未确认"""
        ...


class LoggingSyncObserver:
    """默认观测实现：写结构化日志"""

    async def on_delivery_failed(
        self,
        action: OutboxAction,
        error: SyncFailure,
        attempts: int,
    ) -> None:
        log.error(
            "outbox_delivery_failed",
            action_id=action.id,
            task_id=action.task_id,
            type=action.type,
            attempts=attempts,
            reason=error.reason,
        )
