"""多上下文集成测试 -- 两个 StoreGroup 共享同一个 SQLite 文件

模拟 worker 与 admin 两个标签页：
1. 一方的变更对另一方可见
2. 两方的 Outbox 追加都保留
3. 整键覆盖时后写者胜出
"""

import pytest_asyncio
from fieldsync.core.config import LS_OUTBOX, LS_TASKS
from fieldsync.core.models import TaskStatus
from fieldsync.core.scheduler import worker_inbox_view
from fieldsync.core.store import create_store_group
from fieldsync.services import StorageChangeHub, TaskService


@pytest_asyncio.fixture
async def contexts(tmp_path, clock):
    """提供共享数据库的 worker / admin 两个上下文"""
    db_path = str(tmp_path / "shared.db")
    worker = await create_store_group(db_path, clock=clock)
    admin = await create_store_group(db_path, clock=clock)
    yield worker, admin
    await worker.close()
    await admin.close()


class TestMultiContext:
    """跨上下文一致性测试"""

    async def test_changes_visible_across_contexts(self, contexts):
        worker, admin = contexts
        worker_service = TaskService(worker)
        admin_service = TaskService(admin)

        await worker_service.seed_defaults()
        assert [t.id for t in await admin_service.read()] == ["t-1", "t-2", "t-3"]

        await admin_service.assign("t-2", "w-7")
        assert (await worker_service.get_task("t-2")).assigned_to == "w-7"

    async def test_outbox_appends_from_both_contexts(self, contexts):
        """顺序发生的变更各自追加，不会互相覆盖"""
        worker, admin = contexts
        worker_service = TaskService(worker)
        admin_service = TaskService(admin)
        await worker_service.seed_defaults()

        await worker_service.update_status("t-1", TaskStatus.IN_PROGRESS)
        await admin_service.assign("t-3", "w-2")
        await worker_service.complete("t-1")

        outbox = await admin.outbox.read()
        assert [a.task_id for a in outbox] == ["t-1", "t-3", "t-1"]

    async def test_help_request_reaches_worker_inbox(self, contexts, help_input):
        """admin 侧创建的求助出现在 worker 收件箱末尾"""
        worker, admin = contexts
        await TaskService(worker).seed_defaults()

        created = await TaskService(admin).create_task(help_input)

        inbox = worker_inbox_view(await TaskService(worker).read())
        assert [t.id for t in inbox] == ["t-1", "t-2", "t-3", created.id]

    async def test_last_writer_wins_on_whole_key(self, contexts):
        """基于旧快照的整键写入覆盖另一上下文的变更"""
        worker, admin = contexts
        await TaskService(worker).seed_defaults()

        stale = await admin.task_store.read_tasks()
        await TaskService(worker).complete("t-1")
        await admin.task_store.write_tasks(stale)

        assert [t.id for t in await TaskService(worker).read()] == ["t-1", "t-2", "t-3"]
        # Outbox 不受任务键覆盖影响，完成意图仍在
        assert len(await worker.outbox.read()) == 1

    async def test_change_hub_sees_other_connection(self, contexts):
        """变更通知能感知另一个连接的提交"""
        worker, admin = contexts
        hub = StorageChangeHub(worker.kv)
        await hub.poll_once()

        await TaskService(admin).seed_defaults()
        assert await hub.poll_once() == [LS_TASKS]

        await TaskService(admin).complete("t-3")
        assert await hub.poll_once() == sorted([LS_OUTBOX, LS_TASKS])
