"""默认任务集 -- 首次使用或会话重置时写入"""

from .models.enums import Priority, TaskSource, TaskStatus
from .models.task import Location, TaskItem

_MINUTE_MS = 60 * 1000


def generate_default_tasks(base_time: int) -> list[TaskItem]:
    """生成三条默认 system 任务（high/medium/low，SLA 分别为 15/35/60 分钟后）

    Args:
        base_time: 基准时间（epoch ms），同时作为 created_at/updated_at
    """
    seeds = [
        (
            "t-1",
            "Clean Toilet – Sector B",
            "Toilet block near Gate 2, Sector B. Mop, restock supplies, sanitize.",
            Priority.HIGH,
            15,
            Location(name="Sector B Gate 2", lat=23.1772, lng=75.7809),
        ),
        (
            "t-2",
            "Refill Water – Kshipra Bank",
            "Refill and check cleanliness around water point.",
            Priority.MEDIUM,
            35,
            Location(name="Kshipra River Bank", lat=23.1821, lng=75.7856),
        ),
        (
            "t-3",
            "Empty Bin – Ram Ghat",
            "Overflowing bin near main stairs. Replace liner and clean area.",
            Priority.LOW,
            60,
            Location(name="Ram Ghat", lat=23.1839, lng=75.7844),
        ),
    ]
    return [
        TaskItem(
            id=task_id,
            title=title,
            description=description,
            priority=priority,
            sla_due_at=base_time + offset_min * _MINUTE_MS,
            location=location,
            status=TaskStatus.PENDING,
            created_at=base_time,
            updated_at=base_time,
            source=TaskSource.SYSTEM,
        )
        for task_id, title, description, priority, offset_min, location in seeds
    ]
