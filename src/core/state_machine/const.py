import inspect
from enum import Enum
from typing import Any, Awaitable, Callable


StateName = str
ActionName = str

# 转换函数：接收可选的元数据，同步或异步地返回后继状态
TransitionFn = Callable[..., Awaitable[StateName | None] | StateName | None]
# 动作入口：接收可选的元数据，返回新的当前状态，动作不合法时返回 None
ActionFn = Callable[..., Awaitable[StateName | None]]


class EventTypes(str, Enum):
    """状态机全局通知频道"""
    ON_ENTER = "onEnter"    # 进入新状态
    ON_EXIT = "onExit"      # 尝试离开当前状态


def handler_name(state: StateName) -> str:
    """按约定生成状态订阅入口的名称：首字母大写并加上 on 前缀，例如 idle -> onIdle

    Args:
        state: 状态名称

    Returns:
        订阅入口名称
    """
    return f"on{state[:1].upper()}{state[1:]}"


def accepts_meta(fn: Callable[..., Any]) -> bool:
    """检查转换函数是否能接收一个位置参数作为元数据

    Args:
        fn: 转换函数

    Returns:
        可以接收元数据时返回True，否则返回False
    """
    try:
        signature = inspect.signature(fn)
    except (TypeError, ValueError):
        # 无法获取签名的内置可调用对象，按接收元数据处理
        return True

    for param in signature.parameters.values():
        if param.kind in (
            inspect.Parameter.POSITIONAL_ONLY,
            inspect.Parameter.POSITIONAL_OR_KEYWORD,
            inspect.Parameter.VAR_POSITIONAL,
        ):
            return True
    return False
