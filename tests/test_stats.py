"""Worker 绩效统计测试"""

from fieldsync.core.models import (
    OutboxAction,
    OutboxActionType,
    StatusUpdatePayload,
    SystemNotePayload,
    TaskStatus,
)
from fieldsync.core.stats import (
    completed_since,
    completed_today,
    performance_badge,
    start_of_day_ms,
)


def _status_action(action_id: str, status: TaskStatus, queued_at: int) -> OutboxAction:
    return OutboxAction(
        id=action_id,
        queued_at=queued_at,
        task_id="t-1",
        type=OutboxActionType.STATUS_UPDATE,
        payload=StatusUpdatePayload(status=status),
    )


class TestCompletedSince:
    """完成数统计测试"""

    def test_counts_completions_after_cutoff(self):
        actions = [
            _status_action("a-1", TaskStatus.COMPLETED, 100),
            _status_action("a-2", TaskStatus.COMPLETED, 500),
            _status_action("a-3", TaskStatus.IN_PROGRESS, 600),
            OutboxAction(
                id="a-4",
                queued_at=700,
                task_id="t-1",
                type=OutboxActionType.MESSAGE,
                payload=SystemNotePayload(text="Assigned to w-1"),
            ),
            _status_action("a-5", TaskStatus.COMPLETED, 800),
        ]
        assert completed_since(actions, 500) == 2
        assert completed_since(actions, 0) == 3
        assert completed_since([], 0) == 0


class TestCompletedToday:
    """个人页今日完成数测试"""

    def test_counts_only_today(self):
        now = 1_700_000_000_000
        midnight = start_of_day_ms(now)
        actions = [
            _status_action("a-1", TaskStatus.COMPLETED, midnight - 1),
            _status_action("a-2", TaskStatus.COMPLETED, midnight),
            _status_action("a-3", TaskStatus.COMPLETED, now),
            _status_action("a-4", TaskStatus.BLOCKED, now),
        ]
        assert completed_today(actions, now) == 2
        assert performance_badge(completed_today(actions, now)) == "Bronze Worker"


class TestStartOfDay:
    """本地零点测试"""

    def test_start_of_day(self):
        now = 1_700_000_000_000
        start = start_of_day_ms(now)
        assert start <= now
        assert now - start < 25 * 60 * 60 * 1000
        assert start_of_day_ms(start) == start


class TestPerformanceBadge:
    """徽章测试"""

    def test_thresholds(self):
        assert performance_badge(0) == "Bronze Worker"
        assert performance_badge(6) == "Bronze Worker"
        assert performance_badge(7) == "Silver Worker"
        assert performance_badge(14) == "Silver Worker"
        assert performance_badge(15) == "Gold Worker"
