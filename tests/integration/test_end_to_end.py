"""端到端集成测试 -- 工作流 + 同步 + CLI"""

from fieldsync.__main__ import run_command
from fieldsync.core.models import ChatRole, TaskStatus
from fieldsync.core.scheduler import admin_dashboard_view, worker_inbox_view
from fieldsync.core.stats import completed_since, performance_badge
from fieldsync.services import TaskService
from fieldsync.sync import SimulatedTransport, SyncConfig, SyncEngine


class TestWorkerShift:
    """一次完整的 worker 班次"""

    async def test_shift_then_sync(self, store_group, clock, help_input):
        service = TaskService(store_group)
        await service.seed_defaults()

        help_task = await service.create_task(help_input)
        clock.advance(1000)
        await service.assign(help_task.id, "w-1")
        await service.send_message(help_task.id, ChatRole.WORKER, "Arriving in 2 minutes")

        inbox = worker_inbox_view(await service.read())
        assert inbox[-1].id == help_task.id
        assert admin_dashboard_view(await service.read())[0].id == "t-1"

        clock.advance(1000)
        await service.update_status("t-1", TaskStatus.IN_PROGRESS)
        await service.complete("t-1")
        await service.complete(help_task.id)

        outbox = await store_group.outbox.read()
        assert len(outbox) == 6
        assert completed_since(outbox, 0) == 2
        assert performance_badge(completed_since(outbox, 0)) == "Bronze Worker"

        transport = SimulatedTransport()
        engine = SyncEngine(store_group.outbox, transport=transport, config=SyncConfig())
        report = await engine.sweep()

        assert report.synced == [a.id for a in outbox]
        assert list(transport.delivered) == [a.id for a in outbox]
        assert await store_group.outbox.drain_unsynced() == []
        assert [t.id for t in await service.read()] == ["t-2", "t-3"]


class TestCli:
    """CLI 命令测试"""

    async def test_commands(self, tmp_path, monkeypatch, capsys):
        monkeypatch.setenv("FIELDSYNC_DB_PATH", str(tmp_path / "cli" / "fieldsync.db"))

        await run_command("seed")
        assert "已写入默认任务" in capsys.readouterr().out

        await run_command("seed")
        assert "跳过" in capsys.readouterr().out

        await run_command("inbox")
        lines = capsys.readouterr().out.splitlines()[1:]
        assert [line.split()[0] for line in lines] == ["t-1", "t-2", "t-3"]

        await run_command("dashboard")
        assert "All sectors normal." in capsys.readouterr().out

        await run_command("profile")
        out = capsys.readouterr().out
        assert "今日完成: 0" in out
        assert "Bronze Worker" in out

        await run_command("reset")
        assert "写入 3 条默认任务" in capsys.readouterr().out

        await run_command("sync")
        assert "synced=0" in capsys.readouterr().out
