from types import MappingProxyType
from typing import Any, Awaitable, Callable, Mapping

from flowstate.core.emitter import Handler, Unsubscribe
from .const import StateName, ActionName, ActionFn, TransitionFn, handler_name


def build_actions(
    config: Mapping[StateName, Mapping[ActionName, TransitionFn]],
    transition: Callable[[ActionName, Any], Awaitable[StateName | None]],
) -> Mapping[ActionName, ActionFn]:
    """构建动作分发表：配置中每个不同的动作名对应一个入口，未声明该动作的状态下调用为空操作

    Args:
        config: 状态名到动作表的映射
        transition: 转换入口，签名为 (action, meta) -> 新的当前状态或 None

    Returns:
        动作名到动作入口的只读映射，按首次出现的顺序排列
    """
    actions: dict[ActionName, ActionFn] = {}
    for state_actions in config.values():
        for action in state_actions:
            if action not in actions:
                actions[action] = _bind_action(action, transition)
    return MappingProxyType(actions)


def _bind_action(
    action: ActionName,
    transition: Callable[[ActionName, Any], Awaitable[StateName | None]],
) -> ActionFn:
    async def dispatch(meta: Any = None) -> StateName | None:
        return await transition(action, meta)

    dispatch.__name__ = action
    dispatch.__qualname__ = action
    dispatch.__doc__ = f"Dispatch action {action!r} with optional metadata"
    return dispatch


def build_handlers(
    config: Mapping[StateName, Mapping[ActionName, TransitionFn]],
    subscribe_state: Callable[[StateName, Handler], Unsubscribe],
) -> Mapping[str, Callable[[Handler], Unsubscribe]]:
    """构建状态订阅表：每个声明的状态对应一个订阅入口，名称见 handler_name

    Args:
        config: 状态名到动作表的映射
        subscribe_state: 状态订阅入口，签名为 (state, handler) -> 取消订阅函数

    Returns:
        订阅入口名称到订阅入口的只读映射
    """
    handlers: dict[str, Callable[[Handler], Unsubscribe]] = {}
    for state in config:
        handlers[handler_name(state)] = _bind_handler(state, subscribe_state)
    return MappingProxyType(handlers)


def _bind_handler(
    state: StateName,
    subscribe_state: Callable[[StateName, Handler], Unsubscribe],
) -> Callable[[Handler], Unsubscribe]:
    def subscribe(handler: Handler) -> Unsubscribe:
        return subscribe_state(state, handler)

    subscribe.__name__ = handler_name(state)
    subscribe.__qualname__ = handler_name(state)
    return subscribe
