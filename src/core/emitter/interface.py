from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable


Handler = Callable[[Any], Awaitable[None] | None]
Unsubscribe = Callable[[], None]


class IEmitter(ABC):
    """发布/订阅通知能力接口，状态机只依赖该接口，可以替换为任何满足约定的实现

    约定：
    1. subscribe 返回取消订阅函数，调用后仅移除本次注册的处理器
    2. publish 在该频道所有已注册的处理器按注册顺序依次执行完毕后才返回
    3. 处理器抛出的异常原样传播给 publish 的调用者，并中断后续处理器的执行
    """

    @abstractmethod
    def subscribe(self, channel: str, handler: Handler) -> Unsubscribe:
        """在指定频道上注册处理器

        Args:
            channel: 频道名称
            handler: 处理器，同步函数或协程函数均可，接收一个载荷参数

        Returns:
            取消订阅函数，重复调用是安全的
        """
        pass

    @abstractmethod
    def unsubscribe(self, channel: str, handler: Handler) -> None:
        """移除指定频道上该处理器最早的一次注册，未注册时什么也不做

        Args:
            channel: 频道名称
            handler: 处理器
        """
        pass

    @abstractmethod
    async def publish(self, channel: str, payload: Any) -> None:
        """向频道发布载荷，并等待发布时已注册的所有处理器依次执行完毕

        Args:
            channel: 频道名称
            payload: 通知载荷

        Raises:
            Exception: 处理器抛出的任何异常都会原样传播
        """
        pass
