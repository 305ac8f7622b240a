"""任务聊天记录存储 -- worker_chat_<taskId> 键"""

from ..config import chat_key
from ..models.message import ChatMessage
from .codec import RecordList, load_models
from .protocols import KeyValueStore


class ChatStore:
    """聊天记录的键值实现"""

    def __init__(self, kv: KeyValueStore) -> None:
        self._kv = kv

    async def read_messages(self, task_id: str) -> RecordList[ChatMessage]:
        """读取任务聊天记录（发送顺序）"""
        key = chat_key(task_id)
        return load_models(await self._kv.get(key), ChatMessage, key)
