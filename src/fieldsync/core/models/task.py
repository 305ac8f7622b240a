"""Task Domain Model -- 持久化键 worker_tasks 的元素结构

Python 属性使用 snake_case，JSON 字段名通过 alias 保持 camelCase，
字段声明顺序即序列化顺序，缺省的可选字段序列化时省略。
"""

from typing import Annotated, Union

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    JsonValue,
    ValidationError,
    field_validator,
)

from .enums import Priority, TaskSource, TaskStatus


class Location(BaseModel):
    """任务地点"""

    name: str = Field(description="地点名称")
    lat: float = Field(description="纬度")
    lng: float = Field(description="经度")


def _keep_unknown_location(value):
    if isinstance(value, Location):
        return value
    try:
        return Location.model_validate(value)
    except ValidationError:
        return value


# 合法地点解析为 Location，其余取值原样保留
TaskLocation = Annotated[Union[Location, JsonValue], BeforeValidator(_keep_unknown_location)]


class TaskItem(BaseModel):
    """TaskItem 数据模型

    id、priority、sla_due_at、location 创建后不可变；
    updated_at 单调不减，成功的变更必定严格递增。
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(description="全局唯一标识，创建时分配")
    title: str = Field(description="任务标题")
    description: str = Field(default="", description="任务描述")
    priority: Priority | str = Field(description="优先级；未知取值原样保留")
    sla_due_at: int = Field(alias="slaDueAt", description="SLA 截止时间（epoch ms）")
    location: TaskLocation = Field(
        default=None,
        description="任务地点；无法解析的取值原样保留",
    )
    status: TaskStatus = Field(default=TaskStatus.PENDING, description="当前状态")
    created_at: int = Field(alias="createdAt", description="创建时间（epoch ms）")
    updated_at: int = Field(alias="updatedAt", description="更新时间（epoch ms）")
    source: TaskSource | None = Field(default=None, description="来源标签，缺省视为 system")
    assigned_to: str | None = Field(
        default=None,
        alias="assignedTo",
        description="被指派的 worker ID",
    )

    @field_validator("priority", mode="before")
    @classmethod
    def _keep_unknown_priority(cls, value):
        # 已知取值转为枚举，未知取值原样保留
        try:
            return Priority(value)
        except (TypeError, ValueError):
            return value

    @property
    def is_user_request(self) -> bool:
        """是否为用户发起的求助任务"""
        return self.source == TaskSource.USER

    @property
    def location_name(self) -> str:
        """地点名称；地点无法解析时尽量取原始值中的 name"""
        if isinstance(self.location, Location):
            return self.location.name
        if isinstance(self.location, dict) and isinstance(self.location.get("name"), str):
            return self.location["name"]
        return ""


class TaskCreateInput(BaseModel):
    """创建任务的入参 -- 语音助手求助和风险上报等外部调用方使用"""

    model_config = ConfigDict(populate_by_name=True)

    title: str
    description: str = ""
    priority: Priority | str
    sla_due_at: int = Field(alias="slaDueAt")
    location: TaskLocation
    status: TaskStatus = TaskStatus.PENDING
    source: TaskSource = TaskSource.USER
    assigned_to: str | None = Field(default=None, alias="assignedTo")

    @field_validator("priority", mode="before")
    @classmethod
    def _keep_unknown_priority(cls, value):
        try:
            return Priority(value)
        except (TypeError, ValueError):
            return value
