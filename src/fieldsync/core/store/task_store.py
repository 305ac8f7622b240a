"""TaskStore 键值实现

worker_tasks 键保存按插入顺序排列的 TaskItem 数组。
此处仅提供读写，变更语义（时间戳、Outbox 追加）由 TaskService 负责。
"""

from ..config import LS_TASKS
from ..models.task import TaskItem
from .codec import RecordList, dump_models, load_models
from .protocols import KeyValueStore


class KvTaskStore:
    """TaskStore 的键值实现"""

    def __init__(self, kv: KeyValueStore) -> None:
        self._kv = kv

    async def read_tasks(self) -> RecordList[TaskItem]:
        """读取全部任务（插入顺序），数据缺失或损坏时返回空列表

        无法校验的任务保留在 unreadable 中，原地修改后写回不会丢失。
        """
        raw = await self._kv.get(LS_TASKS)
        return load_models(raw, TaskItem, LS_TASKS)

    async def get_task(self, task_id: str) -> TaskItem | None:
        """根据 task_id 查询任务"""
        for task in await self.read_tasks():
            if task.id == task_id:
                return task
        return None

    async def write_tasks(self, tasks: list[TaskItem]) -> None:
        """整键覆盖写入任务列表"""
        await self._kv.set(LS_TASKS, self.encode(tasks))

    @staticmethod
    def encode(tasks: list[TaskItem]) -> str:
        """编码任务列表为存储值"""
        return dump_models(tasks)
