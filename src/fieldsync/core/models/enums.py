"""枚举定义 -- 任务优先级、状态机、来源、Outbox 动作类型

包含 TaskStatus 状态机、Priority 权重、TaskSource、OutboxActionType、ChatRole 枚举，
以及 VALID_TRANSITIONS 声明的流转映射和 TERMINAL_STATES 终态集合。
"""

from enum import StrEnum


class Priority(StrEnum):
    """任务优先级"""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


# 优先级权重：调度器主排序键（降序）
PRIORITY_WEIGHTS: dict[str, int] = {
    Priority.HIGH: 3,
    Priority.MEDIUM: 2,
    Priority.LOW: 1,
}


class TaskStatus(StrEnum):
    """Task 状态机"""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    BLOCKED = "blocked"

    # 终态：进入即从 store 中移除
    COMPLETED = "completed"


# 声明的流转（默认不强制执行，见 TaskService.enforce_transitions）
VALID_TRANSITIONS: dict[TaskStatus, set[TaskStatus]] = {
    TaskStatus.PENDING: {TaskStatus.IN_PROGRESS, TaskStatus.BLOCKED},
    TaskStatus.IN_PROGRESS: {TaskStatus.COMPLETED, TaskStatus.BLOCKED},
    # 阻塞后通过 in_progress 恢复
    TaskStatus.BLOCKED: {TaskStatus.IN_PROGRESS},
    TaskStatus.COMPLETED: set(),
}

TERMINAL_STATES: set[TaskStatus] = {
    TaskStatus.COMPLETED,
}


class TaskSource(StrEnum):
    """任务来源标签 -- 影响 worker 视图的分区"""

    SYSTEM = "system"
    USER = "user"


class OutboxActionType(StrEnum):
    """Outbox 动作类型 -- 决定 payload 形状"""

    STATUS_UPDATE = "status_update"
    MESSAGE = "message"


class ChatRole(StrEnum):
    """聊天消息发送方"""

    WORKER = "worker"
    ADMIN = "admin"


def validate_transition(from_status: TaskStatus, to_status: TaskStatus) -> bool:
    """验证状态流转是否在声明的流转表内

    Args:
        from_status: 当前状态
        to_status: 目标状态

    Returns:
        True 如果流转合法，否则 False
    """
    allowed = VALID_TRANSITIONS.get(from_status, set())
    return to_status in allowed
