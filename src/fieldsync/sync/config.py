"""SyncConfig -- 同步引擎配置加载

从环境变量加载配置，非法取值记录警告并回退默认值，不阻塞启动。
"""

import os

import structlog
from pydantic import BaseModel, Field

log = structlog.get_logger()


class SyncConfig(BaseModel):
    """同步引擎配置 -- 从环境变量加载

    环境变量:
        FIELDSYNC_SYNC_INTERVAL_S: 周期同步间隔（秒，默认 30）
        FIELDSYNC_SYNC_TIMEOUT_S: 单次投递超时（秒，默认 10）
        FIELDSYNC_SYNC_MAX_ATTEMPTS: 单条动作每轮最大尝试次数（默认 3）
        FIELDSYNC_SYNC_BACKOFF_BASE_S: 指数退避基数（秒，默认 1）
        FIELDSYNC_SYNC_BACKOFF_MAX_S: 退避上限（秒，默认 30）
    """

    interval_s: float = Field(default=30.0, gt=0, description="周期同步间隔（秒）")
    timeout_s: float = Field(default=10.0, gt=0, description="单次投递超时（秒）")
    max_attempts: int = Field(default=3, ge=1, description="单条动作每轮最大尝试次数")
    backoff_base_s: float = Field(default=1.0, ge=0, description="指数退避基数（秒）")
    backoff_max_s: float = Field(default=30.0, ge=0, description="退避上限（秒）")

    def backoff_delay(self, attempt: int) -> float:
        """第 attempt 次失败后的等待时间：base * 2^(attempt-1)，不超过上限"""
        return min(self.backoff_base_s * (2 ** (attempt - 1)), self.backoff_max_s)


_ENV_FIELDS: dict[str, tuple[str, type]] = {
    "FIELDSYNC_SYNC_INTERVAL_S": ("interval_s", float),
    "FIELDSYNC_SYNC_TIMEOUT_S": ("timeout_s", float),
    "FIELDSYNC_SYNC_MAX_ATTEMPTS": ("max_attempts", int),
    "FIELDSYNC_SYNC_BACKOFF_BASE_S": ("backoff_base_s", float),
    "FIELDSYNC_SYNC_BACKOFF_MAX_S": ("backoff_max_s", float),
}


def load_sync_config() -> SyncConfig:
    """从环境变量加载同步配置

    Returns:
        SyncConfig 实例
    """
    defaults = SyncConfig()
    kwargs: dict = {}

    for env_var, (field_name, cast) in _ENV_FIELDS.items():
        if not (val := os.environ.get(env_var)):
            continue
        try:
            value = cast(val)
            # 逐字段校验，单个非法值不影响其他字段
            SyncConfig(**{field_name: value})
        except ValueError:
            log.warning(
                "invalid_sync_config",
                env_var=env_var,
                value=val,
                fallback=getattr(defaults, field_name),
            )
            continue
        kwargs[field_name] = value

    return SyncConfig(**kwargs)
