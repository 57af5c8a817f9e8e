from typing import Any, Callable, Mapping

from loguru import logger
from pydantic import ValidationError

from flowstate.core.emitter import IEmitter, Handler, Unsubscribe
from flowstate.model import MachineConfig, MachineOptions, get_settings
from .base import BaseStateMachine
from .builder import build_actions, build_handlers
from .const import StateName, ActionName, ActionFn, TransitionFn
from .errors import ConfigurationError


class Machine(BaseStateMachine):
    """状态机句柄：在基础状态机之上提供动作分发表和状态订阅表

    两张表在构建时生成一次。除 `actions` / `handlers` 外，表中的入口也可以作为属性访问，
    例如 `machine.switchOn()`、`machine.onIdle(handler)`，与句柄已有属性同名的入口只能通过表访问。
    """
    _actions: Mapping[ActionName, ActionFn]
    _handlers: Mapping[str, Callable[[Handler], Unsubscribe]]

    def __init__(
        self,
        config: MachineConfig,
        initial_state: StateName,
        emitter: IEmitter | None = None,
        state_emitter: IEmitter | None = None,
        serialized: bool = False,
        notify_exit_on_noop: bool = True,
        **kwargs: Any
    ) -> None:
        super().__init__(
            config,
            initial_state,
            emitter=emitter,
            state_emitter=state_emitter,
            serialized=serialized,
            notify_exit_on_noop=notify_exit_on_noop,
            **kwargs
        )
        self._actions = build_actions(self.get_config(), self.transition)
        self._handlers = build_handlers(self.get_config(), self.subscribe_state)

        shadowed = [name for name in [*self._actions, *self._handlers] if hasattr(type(self), name)]
        if shadowed:
            logger.warning(f"状态机 {self.get_id()} 的入口与句柄属性同名，只能通过表访问：{shadowed}")

    @property
    def state(self) -> StateName:
        """当前状态"""
        return self.get_state()

    @property
    def actions(self) -> Mapping[ActionName, ActionFn]:
        """动作名到动作入口的只读映射"""
        return self._actions

    @property
    def handlers(self) -> Mapping[str, Callable[[Handler], Unsubscribe]]:
        """订阅入口名称（如 onIdle）到订阅入口的只读映射"""
        return self._handlers

    def __getattr__(self, name: str) -> Any:
        # 仅在常规属性查找失败时调用，构建完成前两张表尚不存在
        for table in ("_actions", "_handlers"):
            entries = self.__dict__.get(table)
            if entries is not None and name in entries:
                return entries[name]
        raise AttributeError(f"{type(self).__name__!r} object has no attribute {name!r}")

    def __dir__(self) -> list[str]:
        return sorted({*super().__dir__(), *self._actions, *self._handlers})

    def __repr__(self) -> str:
        return f"Machine(id={self.get_id()!r}, state={self.get_state()!r})"


def create_machine(
    config: MachineConfig | Mapping[StateName, Mapping[ActionName, TransitionFn]],
    options: MachineOptions | Mapping[str, Any] | None = None,
    **kwargs: Any
) -> Machine:
    """构建状态机句柄

    Args:
        config: 状态机配置，可以是 MachineConfig 或普通映射
        options: 构建选项，可以是 MachineOptions 或普通映射，也可以直接使用关键字参数，
            关键字参数覆盖 options 中的同名字段。未指定的 serialized / notify_exit_on_noop
            取全局 Settings 的值
        **kwargs: 构建选项字段

    Returns:
        Machine: 状态机句柄

    Raises:
        ConfigurationError: 配置或选项不合法
    """
    if not isinstance(config, (MachineConfig, Mapping)):
        raise ConfigurationError(f"Machine config must be a mapping, got {type(config).__name__}")

    try:
        machine_config = MachineConfig.from_mapping(config)
        fields: dict[str, Any] = dict(options) if options is not None else {}
        fields.update(kwargs)
        machine_options = MachineOptions(**fields)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid machine definition: {e}") from e

    settings = get_settings()
    serialized = machine_options.serialized
    if serialized is None:
        serialized = settings.serialized
    notify_exit_on_noop = machine_options.notify_exit_on_noop
    if notify_exit_on_noop is None:
        notify_exit_on_noop = settings.notify_exit_on_noop

    return Machine(
        machine_config,
        machine_options.initial_state,
        emitter=machine_options.emitter,
        state_emitter=machine_options.state_emitter,
        serialized=serialized,
        notify_exit_on_noop=notify_exit_on_noop,
    )
