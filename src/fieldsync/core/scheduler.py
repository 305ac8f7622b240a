"""PriorityScheduler -- 任务排序视图（纯函数，无副作用）

两种消费视图的排序规则不同，作为两个独立命名的函数保留：
- worker_inbox_view：按来源分区，system 任务按优先级/SLA 排序在前，
  user 求助任务按创建时间先到先得排在后面（不看优先级）
- admin_dashboard_view：整个集合只按优先级/SLA 排序，不分区
"""

from collections.abc import Iterable
from functools import cmp_to_key

from .config import SLA_URGENT_WINDOW_MS
from .models.enums import PRIORITY_WEIGHTS, Priority
from .models.task import TaskItem


def priority_weight(priority: Priority | str) -> int:
    """优先级权重：high=3，medium=2，其余（含未知取值）=1"""
    return PRIORITY_WEIGHTS.get(priority, 1)


def compare_tasks(a: TaskItem, b: TaskItem) -> int:
    """比较两个任务：权重降序，权重相同时 SLA 截止时间升序

    Returns:
        负数表示 a 排在 b 之前，正数表示之后，0 表示相同
    """
    weight_diff = priority_weight(b.priority) - priority_weight(a.priority)
    if weight_diff != 0:
        return weight_diff
    return a.sla_due_at - b.sla_due_at


_urgency_key = cmp_to_key(compare_tasks)


def worker_inbox_view(tasks: Iterable[TaskItem]) -> list[TaskItem]:
    """Worker 收件箱视图：system 任务在前（按 compare_tasks），user 任务在后（按 created_at）"""
    tasks = list(tasks)
    system = sorted((t for t in tasks if not t.is_user_request), key=_urgency_key)
    user = sorted((t for t in tasks if t.is_user_request), key=lambda t: t.created_at)
    return [*system, *user]


def admin_dashboard_view(tasks: Iterable[TaskItem]) -> list[TaskItem]:
    """Admin 看板视图：整个集合只按 compare_tasks 排序"""
    return sorted(tasks, key=_urgency_key)


def help_request_view(tasks: Iterable[TaskItem]) -> list[TaskItem]:
    """Admin 求助面板：仅 user 来源任务，按 compare_tasks 排序"""
    return sorted((t for t in tasks if t.is_user_request), key=_urgency_key)


def sla_remaining_ms(task: TaskItem, now: int) -> int:
    """距 SLA 截止的剩余毫秒数，已过期为 0"""
    return max(0, task.sla_due_at - now)


def is_sla_urgent(task: TaskItem, now: int) -> bool:
    """收件箱的紧急标记：剩余不超过 5 分钟，或优先级为 high"""
    return sla_remaining_ms(task, now) <= SLA_URGENT_WINDOW_MS or task.priority == Priority.HIGH


def sla_alerts(tasks: Iterable[TaskItem], now: int) -> list[TaskItem]:
    """看板告警：按看板顺序列出距截止不足 5 分钟（含已过期）的任务"""
    return [
        t for t in admin_dashboard_view(tasks) if t.sla_due_at - now < SLA_URGENT_WINDOW_MS
    ]


def dispatch_recommendation(tasks: Iterable[TaskItem], now: int) -> str:
    """看板调度建议"""
    tasks = list(tasks)
    high = sum(1 for t in tasks if t.priority == Priority.HIGH)
    if high >= 2:
        return "Deploy 2 cleaners to high-priority locations immediately."
    if sla_alerts(tasks, now):
        return "Escalate pending tasks nearing SLA."
    return "All sectors normal."
