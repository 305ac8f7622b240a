"""SyncTransport -- 向远端权威投递 OutboxAction 的可插拔接口

deliver 正常返回即表示远端已确认该动作；抛出异常表示未确认。
远端必须按动作 ID 去重，保证至少一次投递下的幂等。
"""

from typing import Protocol

import structlog

from fieldsync.core.models import OutboxAction

log = structlog.get_logger()


class SyncTransport(Protocol):
    """投递接口"""

    async def deliver(self, action: OutboxAction) -> None:
        """投递单条动作，返回即视为已确认"""
        ...


class SimulatedTransport:
    """本地模拟传输：总是确认

    按动作 ID 记录已投递的动作，重复投递不会重复应用。
    """

    def __init__(self) -> None:
        self.delivered: dict[str, OutboxAction] = {}
        self.duplicate_count = 0

    async def deliver(self, action: OutboxAction) -> None:
        if action.id in self.delivered:
            self.duplicate_count += 1
            log.debug("duplicate_delivery_ignored", action_id=action.id)
            return
        self.delivered[action.id] = action
