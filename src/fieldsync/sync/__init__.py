"""FieldSync Sync -- Outbox 同步层

sync 包的公开接口导出。
"""

from .config import SyncConfig, load_sync_config
from .engine import SyncEngine, SyncReport
from .observer import LoggingSyncObserver, SyncObserver
from .transport import SimulatedTransport, SyncTransport

__all__ = [
    "SyncEngine",
    "SyncReport",
    "SyncConfig",
    "load_sync_config",
    "SyncTransport",
    "SimulatedTransport",
    "SyncObserver",
    "LoggingSyncObserver",
]
