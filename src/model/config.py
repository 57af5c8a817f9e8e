from typing import Any, Callable, Mapping

from pydantic import BaseModel, ConfigDict, Field

from flowstate.core.emitter.interface import IEmitter


class MachineConfig(BaseModel):
    """状态机配置：状态名到该状态动作表的映射，动作表为动作名到转换函数的映射。

    空动作表的状态为终止状态，可以进入，但在该状态下的任何动作都是空操作。
    """
    model_config = ConfigDict(frozen=True)

    states: dict[str, dict[str, Callable[..., Any]]] = Field(
        description="Mapping of state name to its action table"
    )

    @classmethod
    def from_mapping(cls, mapping: "Mapping[str, Mapping[str, Callable[..., Any]]] | MachineConfig") -> "MachineConfig":
        """从普通映射构建配置实例，已是配置实例时原样返回

        Args:
            mapping: 状态名到动作表的映射

        Returns:
            MachineConfig: 配置实例
        """
        if isinstance(mapping, MachineConfig):
            return mapping
        # 交给 pydantic 校验并复制，嵌套映射形状错误时抛出 ValidationError
        return cls(states=mapping)


class MachineOptions(BaseModel):
    """状态机构建选项，值为 None 的字段在构建时回退到全局 Settings"""
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    initial_state: str = Field(
        description="Initial state, must be a key of the machine config"
    )

    emitter: IEmitter | None = Field(
        default=None,
        description="Notification capability for the machine-wide onEnter/onExit channels"
    )

    state_emitter: IEmitter | None = Field(
        default=None,
        description="Notification capability for the per-state channels"
    )

    serialized: bool | None = Field(
        default=None,
        description="Run at most one transition at a time, in request order"
    )

    notify_exit_on_noop: bool | None = Field(
        default=None,
        description="Publish the exit notification even when the action is not legal"
    )
