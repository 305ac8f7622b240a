"""Worker 绩效统计 -- 基于 Outbox 日志计算"""

from collections.abc import Iterable
from datetime import datetime

from .models.enums import OutboxActionType, TaskStatus
from .models.outbox import OutboxAction
from .models.payloads import StatusUpdatePayload


def start_of_day_ms(now: int) -> int:
    """本地时区当天 0 点的 epoch 毫秒"""
    local = datetime.fromtimestamp(now / 1000).astimezone()
    midnight = local.replace(hour=0, minute=0, second=0, microsecond=0)
    return int(midnight.timestamp() * 1000)


def completed_since(actions: Iterable[OutboxAction], since: int) -> int:
    """统计 since 之后入队的完成动作数量"""
    return sum(
        1
        for a in actions
        if a.type == OutboxActionType.STATUS_UPDATE
        and isinstance(a.payload, StatusUpdatePayload)
        and a.payload.status == TaskStatus.COMPLETED
        and a.queued_at >= since
    )


def performance_badge(completed_count: int) -> str:
    """按完成数量评定徽章"""
    if completed_count >= 15:
        return "Gold Worker"
    if completed_count >= 7:
        return "Silver Worker"
    return "Bronze Worker"


def completed_today(actions: Iterable[OutboxAction], now: int) -> int:
    """统计本地时区当天的完成数（worker 个人页）"""
    return completed_since(actions, start_of_day_ms(now))
