"""OutboxAction Domain Model -- 持久化键 worker_outbox 的元素结构

Outbox 是 append-only 的意图日志：条目只会被标记 synced_at，
或在会话重置时被整体清空。同一 task_id 内 queued_at 顺序即因果顺序。
"""

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .enums import OutboxActionType
from .payloads import PAYLOAD_TYPES, OutboxPayload


class OutboxAction(BaseModel):
    """OutboxAction 数据模型

    字段顺序即存储格式：id, queuedAt, taskId, type, payload, syncedAt。
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(description="动作 ID，a-<ULID>，时间有序")
    queued_at: int = Field(alias="queuedAt", description="入队时间（epoch ms）")
    task_id: str = Field(alias="taskId", description="关联的 Task ID，可能比 Task 存活更久")
    type: OutboxActionType = Field(description="动作类型")
    payload: OutboxPayload = Field(description="按 type 区分的结构化 payload")
    synced_at: int | None = Field(
        default=None,
        alias="syncedAt",
        description="确认同步时间，未确认时缺省",
    )

    @model_validator(mode="after")
    def _payload_matches_type(self) -> "OutboxAction":
        allowed = PAYLOAD_TYPES[self.type]
        if not isinstance(self.payload, allowed):
            raise ValueError(
                f"payload {type(self.payload).__name__} 与动作类型 {self.type} 不匹配"
            )
        return self

    @property
    def is_synced(self) -> bool:
        return self.synced_at is not None
