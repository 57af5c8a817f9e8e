"""
Unit tests for the notification capability.
"""

import asyncio
from typing import Any
from unittest.mock import AsyncMock, Mock

import pytest

from flowstate.core.emitter import IEmitter, AsyncEmitter


class TestIEmitter:
    """Test IEmitter interface compliance."""

    def test_iemitter_is_abstract(self) -> None:
        """Test that IEmitter cannot be instantiated directly."""
        with pytest.raises(TypeError):
            IEmitter()  # type: ignore[abstract]

    def test_iemitter_method_signatures(self) -> None:
        """Test that IEmitter defines required methods."""
        assert IEmitter.__abstractmethods__ == {"subscribe", "unsubscribe", "publish"}


class TestAsyncEmitter:
    """Test AsyncEmitter implementation."""

    @pytest.mark.asyncio
    async def test_publish_in_registration_order(self) -> None:
        """Test handlers run one after another in registration order."""
        emitter = AsyncEmitter()
        order: list[str] = []

        async def first(payload: Any) -> None:
            await asyncio.sleep(0.01)
            order.append(f"first:{payload}")

        def second(payload: Any) -> None:
            order.append(f"second:{payload}")

        emitter.subscribe("ch", first)
        emitter.subscribe("ch", second)
        await emitter.publish("ch", 1)

        assert order == ["first:1", "second:1"]

    @pytest.mark.asyncio
    async def test_publish_isolated_by_channel(self) -> None:
        """Test payloads only reach handlers of the published channel."""
        emitter = AsyncEmitter()
        a, b = Mock(), Mock()
        emitter.subscribe("a", a)
        emitter.subscribe("b", b)

        await emitter.publish("a", "payload")

        a.assert_called_once_with("payload")
        b.assert_not_called()

    @pytest.mark.asyncio
    async def test_publish_without_handlers(self) -> None:
        """Test publishing to an empty channel is a no-op."""
        emitter = AsyncEmitter()
        await emitter.publish("nobody", None)
        assert emitter.listener_count("nobody") == 0

    @pytest.mark.asyncio
    async def test_async_mock_handler_awaited(self) -> None:
        """Test awaitable results of handlers are awaited."""
        emitter = AsyncEmitter()
        handler = AsyncMock()
        emitter.subscribe("ch", handler)

        await emitter.publish("ch", {"k": "v"})

        handler.assert_awaited_once_with({"k": "v"})

    @pytest.mark.asyncio
    async def test_unsubscribe_removes_only_that_registration(self) -> None:
        """Test the returned unsubscribe removes exactly one registration."""
        emitter = AsyncEmitter()
        handler = Mock()
        first = emitter.subscribe("ch", handler)
        emitter.subscribe("ch", handler)
        assert emitter.listener_count("ch") == 2

        first()
        first()
        assert emitter.listener_count("ch") == 1

        await emitter.publish("ch", 1)
        assert handler.call_count == 1

    @pytest.mark.asyncio
    async def test_unsubscribe_by_handler(self) -> None:
        """Test unsubscribe by handler reference."""
        emitter = AsyncEmitter()
        handler = Mock()
        emitter.subscribe("ch", handler)

        emitter.unsubscribe("ch", handler)
        emitter.unsubscribe("ch", handler)
        await emitter.publish("ch", 1)

        handler.assert_not_called()
        assert emitter.listener_count("ch") == 0

    @pytest.mark.asyncio
    async def test_unsubscribe_during_publish(self) -> None:
        """Test a handler removed by an earlier handler is skipped."""
        emitter = AsyncEmitter()
        late = Mock()
        unsubscribe_late: list[Any] = []

        def remover(payload: Any) -> None:
            unsubscribe_late[0]()

        emitter.subscribe("ch", remover)
        unsubscribe_late.append(emitter.subscribe("ch", late))

        await emitter.publish("ch", 1)

        late.assert_not_called()

    @pytest.mark.asyncio
    async def test_subscribe_during_publish(self) -> None:
        """Test handlers added during a publish only see later publishes."""
        emitter = AsyncEmitter()
        late = Mock()

        def adder(payload: Any) -> None:
            emitter.subscribe("ch", late)

        emitter.subscribe("ch", adder)
        await emitter.publish("ch", 1)
        late.assert_not_called()

        await emitter.publish("ch", 2)
        late.assert_called_once_with(2)

    @pytest.mark.asyncio
    async def test_handler_failure_propagates(self) -> None:
        """Test a failing handler aborts the remaining handlers."""
        emitter = AsyncEmitter()
        after = Mock()

        def failing(payload: Any) -> None:
            raise RuntimeError("handler failed")

        emitter.subscribe("ch", failing)
        emitter.subscribe("ch", after)

        with pytest.raises(RuntimeError, match="handler failed"):
            await emitter.publish("ch", 1)
        after.assert_not_called()

    def test_subscribe_requires_callable(self) -> None:
        """Test non-callable handlers are rejected."""
        emitter = AsyncEmitter()
        with pytest.raises(TypeError):
            emitter.subscribe("ch", "not callable")  # type: ignore[arg-type]

    def test_clear(self) -> None:
        """Test clearing one channel or all channels."""
        emitter = AsyncEmitter()
        unsubscribe = emitter.subscribe("a", Mock())
        emitter.subscribe("b", Mock())

        emitter.clear("a")
        assert emitter.listener_count("a") == 0
        assert emitter.listener_count("b") == 1
        # 清除后取消订阅是安全的
        unsubscribe()

        emitter.clear()
        assert emitter.listener_count("b") == 0
