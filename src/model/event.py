from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ExitEvent(BaseModel):
    """退出通知载荷，在查找转换函数之前发布，描述的是一次转换尝试"""
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    action: str = Field(description="Requested action name")
    current: str = Field(description="State held when the request started")
    meta: Any = Field(default=None, description="Caller supplied metadata")


class EnterEvent(BaseModel):
    """进入通知载荷，在状态提交之后发布，描述的是转换结果"""
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    action: str = Field(description="Action that produced the transition")
    current: str = Field(description="Newly committed state")
    last: str = Field(description="State held immediately before the commit")
    meta: Any = Field(default=None, description="Caller supplied metadata")
