"""structlog 配置测试"""

import logging

import pytest
import structlog
from fieldsync.core.store import create_memory_store_group
from fieldsync.logging_config import setup_logging, store_context


@pytest.fixture(autouse=True)
def _restore_logging():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    structlog.reset_defaults()


class TestSetupLogging:
    """日志初始化测试"""

    @pytest.mark.parametrize(
        "log_format,renderer",
        [
            ("json", structlog.processors.JSONRenderer),
            ("dev", structlog.dev.ConsoleRenderer),
        ],
    )
    def test_renderer_by_format(self, monkeypatch, log_format, renderer):
        monkeypatch.setenv("FIELDSYNC_LOG_FORMAT", log_format)
        setup_logging()

        handlers = logging.getLogger().handlers
        assert len(handlers) == 1
        formatter = handlers[0].formatter
        assert isinstance(formatter, structlog.stdlib.ProcessorFormatter)
        assert isinstance(formatter.processors[-1], renderer)

    def test_level_from_env(self, monkeypatch):
        monkeypatch.setenv("FIELDSYNC_LOG_LEVEL", "warning")
        setup_logging()
        assert logging.getLogger().level == logging.WARNING

    def test_aiosqlite_quiet(self):
        setup_logging()
        assert logging.getLogger("aiosqlite").level == logging.WARNING


class TestStoreContext:
    """上下文绑定测试"""

    def test_binds_context_id(self):
        """with 块内日志携带 context_id，退出后解绑"""
        with store_context("ctx-1"):
            assert structlog.contextvars.get_contextvars()["context_id"] == "ctx-1"
        assert "context_id" not in structlog.contextvars.get_contextvars()

    def test_context_id_per_group(self):
        """每个 StoreGroup 拥有独立的 context_id"""
        first = create_memory_store_group()
        second = create_memory_store_group()
        assert first.context_id.startswith("ctx-")
        assert first.context_id != second.context_id
