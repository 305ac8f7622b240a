"""SyncConfig 环境变量加载测试"""

from fieldsync.sync import SyncConfig, load_sync_config


class TestLoadSyncConfig:
    """配置加载测试"""

    def test_defaults(self, monkeypatch):
        for var in (
            "FIELDSYNC_SYNC_INTERVAL_S",
            "FIELDSYNC_SYNC_TIMEOUT_S",
            "FIELDSYNC_SYNC_MAX_ATTEMPTS",
            "FIELDSYNC_SYNC_BACKOFF_BASE_S",
            "FIELDSYNC_SYNC_BACKOFF_MAX_S",
        ):
            monkeypatch.delenv(var, raising=False)
        assert load_sync_config() == SyncConfig()

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("FIELDSYNC_SYNC_INTERVAL_S", "5")
        monkeypatch.setenv("FIELDSYNC_SYNC_MAX_ATTEMPTS", "7")
        config = load_sync_config()
        assert config.interval_s == 5.0
        assert config.max_attempts == 7

    def test_invalid_values_fall_back(self, monkeypatch):
        """非法取值回退默认值，不影响其他字段"""
        monkeypatch.setenv("FIELDSYNC_SYNC_INTERVAL_S", "abc")
        monkeypatch.setenv("FIELDSYNC_SYNC_MAX_ATTEMPTS", "0")
        monkeypatch.setenv("FIELDSYNC_SYNC_TIMEOUT_S", "2.5")
        config = load_sync_config()
        assert config.interval_s == 30.0
        assert config.max_attempts == 3
        assert config.timeout_s == 2.5
