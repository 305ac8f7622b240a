"""时间源 -- 所有时间戳均为 epoch 毫秒整数"""

import time
from collections.abc import Callable

Clock = Callable[[], int]


def now_ms() -> int:
    """当前 epoch 毫秒"""
    return time.time_ns() // 1_000_000
