"""会话身份模型 -- 由外部认证协作方写入，核心只读"""

from pydantic import BaseModel, ConfigDict, Field


class WorkerAuth(BaseModel):
    """当前 worker 身份（worker_auth 键）"""

    model_config = ConfigDict(populate_by_name=True)

    worker_id: str = Field(alias="workerId")
    name: str


class AdminAuth(BaseModel):
    """当前 admin 身份（admin_auth 键）"""

    model_config = ConfigDict(populate_by_name=True)

    admin_id: str = Field(alias="adminId")
    name: str
