"""FieldSync Services -- 上下文级业务服务"""

from .change_hub import StorageChangeHub
from .task_service import TaskService

__all__ = [
    "TaskService",
    "StorageChangeHub",
]
