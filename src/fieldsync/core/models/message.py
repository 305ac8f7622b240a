"""ChatMessage Domain Model -- 持久化键 worker_chat_<taskId> 的元素结构"""

from pydantic import BaseModel, ConfigDict, Field

from .enums import ChatRole


class ChatMessage(BaseModel):
    """任务内的 worker / admin 聊天消息

    同时作为 message 类型 OutboxAction 的 payload。
    """

    model_config = ConfigDict(extra="forbid")

    id: str = Field(description="消息 ID，m-<ULID>")
    role: ChatRole = Field(description="发送方")
    text: str = Field(description="文本内容")
    at: int = Field(description="发送时间（epoch ms）")
