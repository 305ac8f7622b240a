"""KeyValueStore 内存实现 -- 测试替身

多个 StoreGroup 共享同一个实例即可模拟多个标签页共享一份持久化存储。
"""


class InMemoryKeyValueStore:
    """KeyValueStore 的内存实现"""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        # key -> (value, revision)；value 为 None 表示已删除
        self._data: dict[str, tuple[str | None, int]] = {}
        for key, value in (initial or {}).items():
            self._data[key] = (value, 1)

    async def get(self, key: str) -> str | None:
        entry = self._data.get(key)
        return entry[0] if entry else None

    async def set(self, key: str, value: str) -> None:
        await self.write_many({key: value})

    async def remove(self, key: str) -> None:
        await self.write_many({key: None})

    async def write_many(self, changes: dict[str, str | None]) -> None:
        for key, value in changes.items():
            _, revision = self._data.get(key, (None, 0))
            self._data[key] = (value, revision + 1)

    async def revisions(self) -> dict[str, int]:
        return {key: revision for key, (_, revision) in self._data.items()}

    def snapshot(self) -> dict[str, str]:
        """返回当前所有未删除键的原始值（测试辅助）"""
        return {k: v for k, (v, _) in self._data.items() if v is not None}
