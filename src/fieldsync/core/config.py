"""配置常量模块 -- 可通过环境变量覆盖

包含数据库路径、存储键名、SLA 紧急窗口、刷新轮询间隔等可配置常量。
"""

import os
from pathlib import Path


def _get_base_dir() -> Path:
    """获取项目 data 基础目录"""
    return Path(os.environ.get("FIELDSYNC_DATA_DIR", "data"))


def get_db_path() -> str:
    """获取 SQLite 数据库路径"""
    return os.environ.get(
        "FIELDSYNC_DB_PATH",
        str(_get_base_dir() / "sqlite" / "fieldsync.db"),
    )


def transitions_enforced() -> bool:
    """是否启用状态流转表校验（默认关闭，保持宽松行为）"""
    return os.environ.get("FIELDSYNC_ENFORCE_TRANSITIONS", "false").lower() == "true"


# 持久化键名（已部署客户端共用，不可改名）
LS_TASKS = "worker_tasks"
LS_OUTBOX = "worker_outbox"
LS_WORKER_AUTH = "worker_auth"
LS_ADMIN_AUTH = "admin_auth"
LS_CHAT_PREFIX = "worker_chat_"

# SLA 剩余时间低于此值视为紧急（毫秒）
SLA_URGENT_WINDOW_MS: int = 5 * 60 * 1000

# 存储变更轮询间隔（秒）
STORE_REFRESH_INTERVAL_S: float = float(
    os.environ.get("FIELDSYNC_REFRESH_INTERVAL_S", "2")
)


def chat_key(task_id: str) -> str:
    """获取任务聊天记录的存储键"""
    return f"{LS_CHAT_PREFIX}{task_id}"
