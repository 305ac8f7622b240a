"""状态+Outbox 原子写入封装

在同一次键值写入内提交业务数据和新追加的 OutboxAction，
保证不会出现"状态已改但意图未入队"或反之的中间态。
Outbox 写入项与 OutboxQueue 共用 append_change / clear_change。
"""

from ..config import LS_TASKS, chat_key
from ..models.message import ChatMessage
from ..models.outbox import OutboxAction
from ..models.task import TaskItem
from .codec import dump_models
from .outbox_queue import append_change, clear_change
from .protocols import KeyValueStore


async def write_tasks_and_append_action(
    kv: KeyValueStore,
    tasks: list[TaskItem],
    outbox: list[OutboxAction],
    action: OutboxAction,
) -> None:
    """原子写入任务列表并追加一条 OutboxAction

    Args:
        kv: 键值仓库
        tasks: 变更后的完整任务列表
        outbox: 变更前的完整 Outbox（原地追加 action）
        action: 要追加的动作
    """
    await kv.write_many(
        {
            LS_TASKS: dump_models(tasks),
            **append_change(outbox, action),
        }
    )


async def write_chat_and_append_action(
    kv: KeyValueStore,
    task_id: str,
    messages: list[ChatMessage],
    outbox: list[OutboxAction],
    action: OutboxAction,
) -> None:
    """原子写入任务聊天记录并追加一条 OutboxAction"""
    await kv.write_many(
        {
            chat_key(task_id): dump_models(messages),
            **append_change(outbox, action),
        }
    )


async def reset_tasks_and_clear_outbox(
    kv: KeyValueStore,
    tasks: list[TaskItem],
) -> None:
    """会话重置：覆盖任务列表并整体清空 Outbox"""
    await kv.write_many(
        {
            LS_TASKS: dump_models(tasks),
            **clear_change(),
        }
    )
