"""OutboxAction Payload 子类型

每种动作类型对应固定的 payload 形状：
- status_update -> StatusUpdatePayload
- message       -> ChatMessage 或 SystemNotePayload
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict

from .enums import OutboxActionType, TaskStatus
from .message import ChatMessage


class StatusUpdatePayload(BaseModel):
    """status_update 动作 payload"""

    model_config = ConfigDict(extra="forbid")

    status: TaskStatus


class SystemNotePayload(BaseModel):
    """message 动作的系统备注 payload（如指派通知）"""

    model_config = ConfigDict(extra="forbid")

    system: Literal[True] = True
    text: str


OutboxPayload = StatusUpdatePayload | ChatMessage | SystemNotePayload

# 动作类型 -> 允许的 payload 类型
PAYLOAD_TYPES: dict[OutboxActionType, tuple[type[BaseModel], ...]] = {
    OutboxActionType.STATUS_UPDATE: (StatusUpdatePayload,),
    OutboxActionType.MESSAGE: (ChatMessage, SystemNotePayload),
}
