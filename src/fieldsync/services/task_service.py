"""TaskService -- 任务创建/指派/状态变更/完成业务逻辑

每个成功的变更调用都在一次原子键值写入内：
1. 更新 worker_tasks（或聊天记录）
2. 向 worker_outbox 追加恰好一条 OutboxAction

对未知 task_id 的变更是 no-op，返回 None 而不是抛出异常，
调用方自行决定是否向用户展示。
"""

import structlog
from ulid import ULID

from fieldsync.core.config import transitions_enforced
from fieldsync.core.defaults import generate_default_tasks
from fieldsync.core.models import (
    TERMINAL_STATES,
    ChatMessage,
    ChatRole,
    OutboxAction,
    OutboxActionType,
    OutboxPayload,
    StatusUpdatePayload,
    SystemNotePayload,
    TaskCreateInput,
    TaskItem,
    TaskStatus,
    validate_transition,
)
from fieldsync.core.store import (
    StoreGroup,
    build_action,
    reset_tasks_and_clear_outbox,
    write_chat_and_append_action,
    write_tasks_and_append_action,
)
from fieldsync.exceptions import InvalidTransitionError

log = structlog.get_logger()


class TaskService:
    """任务业务服务

    一个实例对应一个浏览上下文。同一上下文内的变更由 StoreGroup 的写锁串行化，
    不同上下文之间对同一个键整键后写者胜出。

    Args:
        store_group: Store 实例组
        enforce_transitions: 是否按 VALID_TRANSITIONS 校验状态流转；
            None 时读取 FIELDSYNC_ENFORCE_TRANSITIONS，默认宽松
    """

    def __init__(
        self,
        store_group: StoreGroup,
        enforce_transitions: bool | None = None,
    ) -> None:
        self._stores = store_group
        self._enforce_transitions = (
            transitions_enforced() if enforce_transitions is None else enforce_transitions
        )

    async def read(self) -> list[TaskItem]:
        """读取全部任务（插入顺序），存储损坏时返回空列表"""
        return await self._stores.task_store.read_tasks()

    async def get_task(self, task_id: str) -> TaskItem | None:
        """查询任务详情"""
        return await self._stores.task_store.get_task(task_id)

    async def seed_defaults(self, base_time: int | None = None) -> bool:
        """仅在 store 为空时写入默认任务

        Returns:
            True 如果本次写入了默认任务
        """
        base = self._stores.clock() if base_time is None else base_time
        async with self._stores.write_lock:
            tasks = await self._stores.task_store.read_tasks()
            if tasks:
                return False
            # 在读取结果上扩展，保留无法校验的原始条目
            tasks.extend(generate_default_tasks(base))
            await self._stores.task_store.write_tasks(tasks)
        log.info("default_tasks_seeded", base_time=base)
        return True

    async def reset_for_new_session(self, base_time: int | None = None) -> list[TaskItem]:
        """会话重置（如新登录）：无条件重写默认任务并清空 Outbox"""
        base = self._stores.clock() if base_time is None else base_time
        tasks = generate_default_tasks(base)
        async with self._stores.write_lock:
            await reset_tasks_and_clear_outbox(self._stores.kv, tasks)
        log.info("session_reset", base_time=base, task_count=len(tasks))
        return tasks

    async def create_task(self, data: TaskCreateInput) -> TaskItem:
        """创建任务（语音求助、风险上报等外部调用方的入口）

        Args:
            data: 创建入参；source 缺省为 user

        Returns:
            新创建的 TaskItem

        Raises:
            ValueError: 初始状态为 completed（完成的任务不保留在 store 中）
        """
        if data.status in TERMINAL_STATES:
            raise ValueError(f"Cannot create a task in terminal state: {data.status}")

        async with self._stores.write_lock:
            now = self._stores.clock()
            task = TaskItem(
                id=f"t-{ULID()}",
                title=data.title,
                description=data.description,
                priority=data.priority,
                sla_due_at=data.sla_due_at,
                location=data.location,
                status=data.status,
                created_at=now,
                updated_at=now,
                source=data.source,
                assigned_to=data.assigned_to,
            )
            tasks = await self._stores.task_store.read_tasks()
            tasks.append(task)
            action = await self._commit(
                tasks,
                task.id,
                OutboxActionType.STATUS_UPDATE,
                StatusUpdatePayload(status=task.status),
            )

        log.info(
            "task_created",
            task_id=task.id,
            priority=str(task.priority),
            source=task.source,
            action_id=action.id,
        )
        return task

    async def assign(self, task_id: str, worker_id: str) -> TaskItem | None:
        """指派任务给 worker

        Returns:
            更新后的 TaskItem；任务不存在返回 None（不写入、不入队）
        """
        async with self._stores.write_lock:
            tasks = await self._stores.task_store.read_tasks()
            index = self._find(tasks, task_id)
            if index is None:
                log.debug("assign_task_not_found", task_id=task_id)
                return None

            task = tasks[index]
            updated = task.model_copy(
                update={
                    "assigned_to": worker_id,
                    "updated_at": self._next_updated_at(task),
                }
            )
            tasks[index] = updated
            await self._commit(
                tasks,
                task_id,
                OutboxActionType.MESSAGE,
                SystemNotePayload(text=f"Assigned to {worker_id}"),
            )

        log.info("task_assigned", task_id=task_id, worker_id=worker_id)
        return updated

    async def update_status(self, task_id: str, status: TaskStatus) -> TaskItem | None:
        """变更任务状态

        目标状态为 completed 时转交 complete()，保证完成的任务从 store 中移除。

        Returns:
            更新后的 TaskItem；任务不存在返回 None

        Raises:
            InvalidTransitionError: 启用流转校验且流转不在声明表内
        """
        status = TaskStatus(status)
        if status == TaskStatus.COMPLETED:
            return await self.complete(task_id)

        async with self._stores.write_lock:
            tasks = await self._stores.task_store.read_tasks()
            index = self._find(tasks, task_id)
            if index is None:
                log.debug("update_status_task_not_found", task_id=task_id)
                return None

            task = tasks[index]
            self._check_transition(task, status)
            updated = task.model_copy(
                update={"status": status, "updated_at": self._next_updated_at(task)}
            )
            tasks[index] = updated
            await self._commit(
                tasks,
                task_id,
                OutboxActionType.STATUS_UPDATE,
                StatusUpdatePayload(status=status),
            )

        log.info(
            "task_status_updated",
            task_id=task_id,
            from_status=task.status,
            to_status=status,
        )
        return updated

    async def complete(self, task_id: str) -> TaskItem | None:
        """完成任务：从 store 中移除并追加终态 status_update

        Returns:
            被移除的 TaskItem（status=completed）；任务不存在返回 None

        Raises:
            InvalidTransitionError: 启用流转校验且当前状态不能直接完成
        """
        async with self._stores.write_lock:
            tasks = await self._stores.task_store.read_tasks()
            index = self._find(tasks, task_id)
            if index is None:
                log.debug("complete_task_not_found", task_id=task_id)
                return None

            task = tasks.pop(index)
            self._check_transition(task, TaskStatus.COMPLETED)
            removed = task.model_copy(
                update={
                    "status": TaskStatus.COMPLETED,
                    "updated_at": self._next_updated_at(task),
                }
            )
            await self._commit(
                tasks,
                task_id,
                OutboxActionType.STATUS_UPDATE,
                StatusUpdatePayload(status=TaskStatus.COMPLETED),
            )

        log.info("task_completed", task_id=task_id, from_status=task.status)
        return removed

    async def send_message(self, task_id: str, role: ChatRole, text: str) -> ChatMessage:
        """在任务聊天中发送消息，并将消息作为 message 动作入队"""
        async with self._stores.write_lock:
            message = ChatMessage(
                id=f"m-{ULID()}",
                role=role,
                text=text,
                at=self._stores.clock(),
            )
            messages = await self._stores.chat_store.read_messages(task_id)
            messages.append(message)
            outbox = await self._stores.outbox.read()
            action = build_action(task_id, OutboxActionType.MESSAGE, message, message.at)
            await write_chat_and_append_action(
                self._stores.kv, task_id, messages, outbox, action
            )

        log.info("chat_message_sent", task_id=task_id, role=role, message_id=message.id)
        return message

    async def read_messages(self, task_id: str) -> list[ChatMessage]:
        """读取任务聊天记录"""
        return await self._stores.chat_store.read_messages(task_id)

    async def _commit(
        self,
        tasks: list[TaskItem],
        task_id: str,
        action_type: OutboxActionType,
        payload: OutboxPayload,
    ) -> OutboxAction:
        """原子写入任务列表并追加一条动作（调用方须持有写锁）"""
        outbox = await self._stores.outbox.read()
        action = build_action(task_id, action_type, payload, self._stores.clock())
        await write_tasks_and_append_action(self._stores.kv, tasks, outbox, action)
        return action

    def _next_updated_at(self, task: TaskItem) -> int:
        # 时钟未前进（或回拨）时仍保证严格递增
        return max(self._stores.clock(), task.updated_at + 1)

    def _check_transition(self, task: TaskItem, to_status: TaskStatus) -> None:
        if self._enforce_transitions and not validate_transition(task.status, to_status):
            raise InvalidTransitionError(task.id, task.status, to_status)

    @staticmethod
    def _find(tasks: list[TaskItem], task_id: str) -> int | None:
        for index, task in enumerate(tasks):
            if task.id == task_id:
                return index
        return None
