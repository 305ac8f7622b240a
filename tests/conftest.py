"""全局 pytest 配置 -- 临时 SQLite Store 组 + 可控时钟 fixture"""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
import pytest_asyncio
from fieldsync.core.models import Location, TaskCreateInput
from fieldsync.core.store import (
    InMemoryKeyValueStore,
    StoreGroup,
    create_memory_store_group,
    create_store_group,
)
from fieldsync.services import TaskService

BASE_TIME = 1_700_000_000_000


class FakeClock:
    """可控毫秒时钟：默认不前进，需显式 advance"""

    def __init__(self, start: int = BASE_TIME) -> None:
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> int:
        self.now += ms
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    """提供可控时钟"""
    return FakeClock()


@pytest_asyncio.fixture
async def tmp_db_path(tmp_path: Path) -> Path:
    """提供临时 SQLite 数据库路径"""
    return tmp_path / "sqlite" / "test.db"


@pytest_asyncio.fixture
async def store_group(tmp_db_path: Path, clock: FakeClock) -> AsyncGenerator[StoreGroup, None]:
    """提供基于临时 SQLite 的 Store 实例组"""
    group = await create_store_group(str(tmp_db_path), clock=clock)
    yield group
    await group.close()


@pytest.fixture
def memory_kv() -> InMemoryKeyValueStore:
    """提供内存键值仓库"""
    return InMemoryKeyValueStore()


@pytest.fixture
def memory_group(memory_kv: InMemoryKeyValueStore, clock: FakeClock) -> StoreGroup:
    """提供基于内存仓库的 Store 实例组"""
    return create_memory_store_group(memory_kv, clock=clock)


@pytest.fixture
def service(store_group: StoreGroup) -> TaskService:
    """提供基于 SQLite 的 TaskService"""
    return TaskService(store_group, enforce_transitions=False)


@pytest.fixture
def help_input() -> TaskCreateInput:
    """语音助手求助流程的创建入参"""
    return TaskCreateInput(
        title="Lost child near Gate 3",
        description="Voice help request",
        priority="high",
        sla_due_at=BASE_TIME + 30 * 60 * 1000,
        location=Location(name="Gate 3", lat=23.18, lng=75.78),
    )
