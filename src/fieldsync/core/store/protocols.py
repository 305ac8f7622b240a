"""Store Protocol 接口定义

持久化被抽象为字符串键 -> JSON 字符串值的键值仓库，
使用 Python Protocol 实现结构化子类型（duck typing），
核心逻辑可以在内存替身上测试，也可以换成其他后端实现。
"""

from typing import Protocol


class KeyValueStore(Protocol):
    """键值仓库接口

    写入粒度为整个键：多个上下文并发写同一个键时后写者胜出（last-writer-wins），
    没有按字段合并，也没有写前版本校验。
    每个键带有 revision，任何写入（包括删除）都会使其递增，供变更通知轮询使用。
    """

    async def get(self, key: str) -> str | None:
        """读取键值，不存在返回 None"""
        ...

    async def set(self, key: str, value: str) -> None:
        """写入单个键"""
        ...

    async def remove(self, key: str) -> None:
        """删除单个键"""
        ...

    async def write_many(self, changes: dict[str, str | None]) -> None:
        """原子写入多个键，值为 None 表示删除该键"""
        ...

    async def revisions(self) -> dict[str, int]:
        """返回所有已知键的当前 revision"""
        ...
