"""structlog 配置模块

dev 模式：pretty print 可读输出
json 模式：结构化 JSON 输出

每个 StoreGroup 对应一个浏览上下文，通过 store_context 把 context_id
绑定到 structlog contextvars，多个上下文写同一数据库时日志可按上下文区分。
"""

import logging
import os
from contextlib import AbstractContextManager

import structlog

# 这些第三方 logger 只输出告警及以上
_QUIET_LOGGERS = ("aiosqlite",)


def setup_logging() -> None:
    """初始化 structlog 配置

    根据 FIELDSYNC_LOG_FORMAT 环境变量选择渲染模式：
    - "json": 结构化 JSON 输出（生产环境）
    - "dev" (默认): pretty print 可读输出
    """
    log_format = os.environ.get("FIELDSYNC_LOG_FORMAT", "dev")
    log_level = os.environ.get("FIELDSYNC_LOG_LEVEL", "INFO")

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=False),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if log_format == "json":
        renderer = structlog.processors.JSONRenderer(ensure_ascii=False)
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processor=renderer,
        foreign_pre_chain=shared_processors,
    )

    handler = logging.StreamHandler()
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def store_context(context_id: str) -> AbstractContextManager:
    """在 with 块内为所有日志绑定 context_id

    Args:
        context_id: StoreGroup.context_id
    """
    return structlog.contextvars.bound_contextvars(context_id=context_id)
