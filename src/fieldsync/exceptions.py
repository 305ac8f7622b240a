"""FieldSync 异常体系

NotFound 不是异常：变更操作对未知 task_id 返回 None。
持久化数据损坏在读取时就地恢复为空集合，不向上抛出。
"""


class FieldSyncError(Exception):
    """FieldSync 基础异常"""

    def __init__(self, message: str, recoverable: bool = True) -> None:
        """
        Args:
            message: 错误描述
            recoverable: 是否可通过重试恢复
        """
        super().__init__(message)
        self.recoverable = recoverable


class InvalidTransitionError(FieldSyncError):
    """状态流转不在声明的流转表内

    仅在启用 enforce_transitions 时抛出。
    """

    def __init__(self, task_id: str, from_status: str, to_status: str) -> None:
        super().__init__(
            f"任务 {task_id} 不能从 {from_status} 流转到 {to_status}",
            recoverable=False,
        )
        self.task_id = task_id
        self.from_status = from_status
        self.to_status = to_status


class SyncFailure(FieldSyncError):
    """单条 OutboxAction 投递未被远端确认

    由 SyncEngine 重试，最终失败交给观测协作方，不抛给 UI。
    """

    def __init__(self, action_id: str, reason: str) -> None:
        super().__init__(f"动作 {action_id} 同步失败: {reason}", recoverable=True)
        self.action_id = action_id
        self.reason = reason


class TransportUnavailableError(SyncFailure):
    """传输层不可达（连接失败、超时等）"""

    def __init__(self, action_id: str, original_error: Exception) -> None:
        super().__init__(action_id, f"传输不可达 -- {original_error}")
        self.original_error = original_error
