"""FieldSync Core Domain Models -- 公共类型导出

所有公共模型类型从此入口导入。
"""

from .enums import (
    PRIORITY_WEIGHTS,
    TERMINAL_STATES,
    VALID_TRANSITIONS,
    ChatRole,
    OutboxActionType,
    Priority,
    TaskSource,
    TaskStatus,
    validate_transition,
)
from .message import ChatMessage
from .outbox import OutboxAction
from .payloads import (
    PAYLOAD_TYPES,
    OutboxPayload,
    StatusUpdatePayload,
    SystemNotePayload,
)
from .session import AdminAuth, WorkerAuth
from .task import Location, TaskCreateInput, TaskItem

__all__ = [
    # 枚举
    "Priority",
    "TaskStatus",
    "TaskSource",
    "OutboxActionType",
    "ChatRole",
    "PRIORITY_WEIGHTS",
    # 状态机
    "VALID_TRANSITIONS",
    "TERMINAL_STATES",
    "validate_transition",
    # Task
    "TaskItem",
    "TaskCreateInput",
    "Location",
    # Outbox
    "OutboxAction",
    "OutboxPayload",
    "PAYLOAD_TYPES",
    "StatusUpdatePayload",
    "SystemNotePayload",
    # Message
    "ChatMessage",
    # Session
    "WorkerAuth",
    "AdminAuth",
]
