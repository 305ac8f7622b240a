"""CLI 入口模块 -- python -m fieldsync <command>

支持的命令：
  seed       store 为空时写入默认任务
  reset      会话重置：重写默认任务并清空 Outbox
  inbox      按 worker 收件箱顺序列出任务
  dashboard  按 admin 看板顺序列出任务，附告警与调度建议
  outbox     列出 Outbox 条目及同步状态
  sync       执行一轮 Outbox 同步（本地模拟传输）
  profile    当前 worker 今日完成数与徽章
"""

import asyncio
import sys

from .core.clock import now_ms
from .core.config import get_db_path
from .core.scheduler import (
    admin_dashboard_view,
    dispatch_recommendation,
    is_sla_urgent,
    sla_alerts,
    sla_remaining_ms,
    worker_inbox_view,
)
from .core.stats import completed_today, performance_badge
from .core.store import StoreGroup, create_store_group
from .logging_config import setup_logging, store_context
from .services import TaskService
from .sync import SyncEngine

COMMANDS = {
    "seed": "store 为空时写入默认任务",
    "reset": "会话重置：重写默认任务并清空 Outbox",
    "inbox": "按 worker 收件箱顺序列出任务",
    "dashboard": "按 admin 看板顺序列出任务",
    "outbox": "列出 Outbox 条目及同步状态",
    "sync": "执行一轮 Outbox 同步",
    "profile": "当前 worker 今日完成数与徽章",
}


def main() -> None:
    """CLI 主入口"""
    if len(sys.argv) < 2 or sys.argv[1] not in COMMANDS:
        if len(sys.argv) >= 2:
            print(f"未知命令: {sys.argv[1]}")
        print("用法: python -m fieldsync <command>")
        print("命令:")
        for name, help_text in COMMANDS.items():
            print(f"  {name:<10} {help_text}")
        sys.exit(1)

    setup_logging()
    asyncio.run(run_command(sys.argv[1]))


async def run_command(command: str) -> None:
    """打开数据库并执行命令"""
    db_path = get_db_path()
    print(f"数据库路径: {db_path}")

    store_group = await create_store_group(db_path)
    try:
        with store_context(store_group.context_id):
            await _HANDLERS[command](store_group)
    finally:
        await store_group.close()


async def _seed(stores: StoreGroup) -> None:
    seeded = await TaskService(stores).seed_defaults()
    print("已写入默认任务" if seeded else "store 非空，跳过")


async def _reset(stores: StoreGroup) -> None:
    tasks = await TaskService(stores).reset_for_new_session()
    print(f"会话已重置，写入 {len(tasks)} 条默认任务")


async def _inbox(stores: StoreGroup) -> None:
    now = now_ms()
    for task in worker_inbox_view(await TaskService(stores).read()):
        remaining_s = sla_remaining_ms(task, now) // 1000
        flags = []
        if task.is_user_request:
            flags.append("HELP")
        if is_sla_urgent(task, now):
            flags.append("URGENT")
        print(
            f"{task.id:<32} {task.priority!s:<7} {remaining_s // 60:>4}m{remaining_s % 60:02d}s "
            f"{task.status!s:<12} {task.title} {' '.join(flags)}"
        )


async def _dashboard(stores: StoreGroup) -> None:
    now = now_ms()
    tasks = await TaskService(stores).read()
    for task in admin_dashboard_view(tasks):
        print(
            f"{task.id:<32} {task.priority!s:<7} "
            f"{sla_remaining_ms(task, now) // 60000:>4}m {task.status!s:<12} "
            f"{task.location_name:<20} {task.title}"
        )
    for task in sla_alerts(tasks, now):
        print(f"SLA breach risk: {task.title} @ {task.location_name}")
    print(dispatch_recommendation(tasks, now))


async def _outbox(stores: StoreGroup) -> None:
    for action in await stores.outbox.read():
        state = "synced" if action.is_synced else "pending"
        print(f"{action.id:<30} {action.task_id:<32} {action.type!s:<14} {state}")


async def _sync(stores: StoreGroup) -> None:
    report = await SyncEngine(stores.outbox).sweep()
    print(f"同步完成: synced={len(report.synced)} pending={report.pending}")


async def _profile(stores: StoreGroup) -> None:
    auth = await stores.session_store.get_worker_auth()
    count = completed_today(await stores.outbox.read(), now_ms())
    print(f"Worker: {auth.name if auth else '未登录'}")
    print(f"今日完成: {count}")
    print(f"徽章: {performance_badge(count)}")


_HANDLERS = {
    "seed": _seed,
    "reset": _reset,
    "inbox": _inbox,
    "dashboard": _dashboard,
    "outbox": _outbox,
    "sync": _sync,
    "profile": _profile,
}


if __name__ == "__main__":
    main()
