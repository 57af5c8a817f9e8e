import inspect
from collections import defaultdict
from typing import Any

from loguru import logger

from .interface import IEmitter, Handler, Unsubscribe


class _Registration:
    """一次处理器注册，同一个处理器多次注册会得到多个互相独立的注册"""
    __slots__ = ("handler", "active")

    def __init__(self, handler: Handler) -> None:
        self.handler = handler
        self.active = True


class AsyncEmitter(IEmitter):
    """基于 asyncio 协作式调度的默认通知实现，处理器按注册顺序串行执行"""
    _channels: defaultdict[str, list[_Registration]]

    def __init__(self) -> None:
        self._channels = defaultdict(list)

    def subscribe(self, channel: str, handler: Handler) -> Unsubscribe:
        if not callable(handler):
            raise TypeError(f"Handler for channel {channel!r} must be callable, got {type(handler).__name__}")

        registration = _Registration(handler)
        self._channels[channel].append(registration)
        logger.debug(f"频道 {channel} 新增处理器，当前数量：{len(self._channels[channel])}")

        def unsubscribe() -> None:
            self._remove(channel, registration)

        return unsubscribe

    def unsubscribe(self, channel: str, handler: Handler) -> None:
        for registration in self._channels.get(channel, []):
            if registration.handler is handler:
                self._remove(channel, registration)
                return

    def _remove(self, channel: str, registration: _Registration) -> None:
        if not registration.active:
            return
        registration.active = False
        registrations = self._channels.get(channel)
        if registrations is None:
            return
        registrations.remove(registration)
        if not registrations:
            del self._channels[channel]
        logger.debug(f"频道 {channel} 移除处理器")

    async def publish(self, channel: str, payload: Any) -> None:
        # 发布时的处理器快照，期间新注册的处理器不会收到本次通知
        snapshot = list(self._channels.get(channel, []))
        for registration in snapshot:
            # 执行过程中被取消订阅的处理器不再接收通知
            if not registration.active:
                continue
            result = registration.handler(payload)
            if inspect.isawaitable(result):
                await result

    def listener_count(self, channel: str) -> int:
        """获取频道上已注册的处理器数量

        Args:
            channel: 频道名称

        Returns:
            处理器数量
        """
        return len(self._channels.get(channel, []))

    def clear(self, channel: str | None = None) -> None:
        """清除处理器，被清除的注册对应的取消订阅函数随后调用是安全的

        Args:
            channel: 频道名称，为 None 时清除所有频道
        """
        if channel is None:
            channels = list(self._channels.keys())
        else:
            channels = [channel]

        for name in channels:
            for registration in self._channels.pop(name, []):
                registration.active = False
