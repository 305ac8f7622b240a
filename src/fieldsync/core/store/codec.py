"""持久化 JSON 编解码

编码：紧凑分隔符、按 alias 输出、省略 None 字段，与已有存储数据逐字兼容。
解码：fail-soft -- 缺失或无法解析的值视为空集合。
单条校验失败的记录不参与业务逻辑，但保留在 RecordList.unreadable 中，
整键写回时按原位置原样写回，不会因为一次读-改-写而丢失。
"""

import json
from collections.abc import Sequence
from typing import Any, Generic, TypeVar

import structlog
from pydantic import BaseModel, ValidationError

log = structlog.get_logger()

M = TypeVar("M", bound=BaseModel)


class RecordList(list, Generic[M]):
    """解码后的记录列表

    Attributes:
        unreadable: (原始下标, 原始 JSON 值) 列表，校验失败但需要写回的条目
    """

    def __init__(
        self,
        items: Sequence[M] = (),
        unreadable: list[tuple[int, Any]] | None = None,
    ) -> None:
        super().__init__(items)
        self.unreadable: list[tuple[int, Any]] = unreadable or []


def dump_model(item: BaseModel) -> str:
    """编码单个模型"""
    return item.model_dump_json(by_alias=True, exclude_none=True)


def dump_models(items: Sequence[BaseModel]) -> str:
    """编码模型列表（保持顺序）

    items 为 RecordList 时，无法校验的原始条目按原下标插回。
    """
    encoded = [dump_model(item) for item in items]
    if isinstance(items, RecordList):
        for index, entry in items.unreadable:
            encoded.insert(
                min(index, len(encoded)),
                json.dumps(entry, ensure_ascii=False, separators=(",", ":")),
            )
    return "[" + ",".join(encoded) + "]"


def load_models(raw: str | None, model: type[M], key: str) -> RecordList[M]:
    """解码模型列表

    Args:
        raw: 存储中的原始字符串，可能为 None
        model: 元素模型类型
        key: 存储键（仅用于日志）

    Returns:
        解码后的 RecordList；数据缺失或整体损坏时为空
    """
    if raw is None:
        return RecordList()
    try:
        data = json.loads(raw)
    except ValueError:
        log.warning("persisted_data_malformed", key=key, reason="invalid_json")
        return RecordList()
    if not isinstance(data, list):
        log.warning("persisted_data_malformed", key=key, reason="not_a_list")
        return RecordList()

    items = RecordList()
    for index, entry in enumerate(data):
        try:
            items.append(model.model_validate(entry))
        except ValidationError as e:
            items.unreadable.append((index, entry))
            log.warning(
                "persisted_record_unreadable",
                key=key,
                index=index,
                error_count=e.error_count(),
            )
    return items


def load_model(raw: str | None, model: type[M], key: str) -> M | None:
    """解码单个模型，数据缺失或损坏时返回 None"""
    if raw is None:
        return None
    try:
        return model.model_validate_json(raw)
    except ValidationError:
        log.warning("persisted_data_malformed", key=key, reason="invalid_record")
        return None
