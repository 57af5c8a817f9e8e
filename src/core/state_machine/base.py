import asyncio
import inspect
from types import MappingProxyType
from typing import Any, Mapping
from uuid import uuid4

from loguru import logger

from flowstate.core.emitter import IEmitter, AsyncEmitter, Handler, Unsubscribe
from flowstate.model import MachineConfig, EnterEvent, ExitEvent
from .const import StateName, ActionName, TransitionFn, EventTypes, handler_name, accepts_meta
from .errors import ConfigurationError, InvalidTargetStateError
from .interface import IStateMachine


class BaseStateMachine(IStateMachine):
    """基础状态机实现，提供配置校验、状态查询、通知订阅以及完整的转换协议

    转换协议的挂起点只有三处：退出通知、转换函数、进入通知（含状态通知）。默认不对并发的
    转换请求排队，两次重叠的转换各自在调用转换函数前读取当前状态、在其完成后写入当前状态，
    结果取决于完成顺序。启用串行模式后同一实例同时只执行一次转换，
    持有锁的转换在其处理器中再次发起的转换直接嵌套执行。
    """
    _id: str
    # ========== 编译状态 ==========
    _is_compiled: bool

    # ========== 状态管理 ==========
    _raw_config: MachineConfig
    _config: Mapping[StateName, Mapping[ActionName, TransitionFn]]
    _action_names: list[ActionName]
    _initial_state: StateName
    _current_state: StateName

    # ========== 通知 ==========
    _emitter: IEmitter
    _state_emitter: IEmitter

    # ========== 转换策略 ==========
    _lock: asyncio.Lock | None
    _lock_owner: "asyncio.Task[Any] | None"
    _notify_exit_on_noop: bool

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
        """初始化基础状态机

        Args:
            config: 状态机配置
            initial_state: 初始状态，必须是配置中的状态
            emitter: 全局进入/退出通知使用的通知实现，未提供时内部创建
            state_emitter: 状态通知使用的通知实现，未提供时内部创建
            serialized: 是否启用串行模式
            notify_exit_on_noop: 动作不合法时是否仍然发布退出通知
            kwargs: 其他参数（保留以备扩展）

        Raises:
            ConfigurationError: 配置校验失败
        """
        # 状态机唯一标识
        self._id = str(uuid4())
        # 编译标志，初始化为未编译
        self._is_compiled = False

        self._raw_config = config
        self._config = MappingProxyType({})
        self._action_names = []
        self._initial_state = initial_state
        self._current_state = initial_state

        self._emitter = emitter if emitter is not None else AsyncEmitter()
        self._state_emitter = state_emitter if state_emitter is not None else AsyncEmitter()

        self._lock = asyncio.Lock() if serialized else None
        self._lock_owner = None
        self._notify_exit_on_noop = notify_exit_on_noop

        # 编译状态机
        self.compile()

    # ********** 状态机初始化 **********

    def get_id(self) -> str:
        return self._id

    def get_valid_states(self) -> set[StateName]:
        return set(self._config.keys())

    def get_action_names(self) -> list[ActionName]:
        return self._action_names.copy()

    def get_config(self) -> Mapping[StateName, Mapping[ActionName, TransitionFn]]:
        return self._config

    def compile(self) -> None:
        if self._is_compiled:
            raise RuntimeError("State machine has already been compiled")

        states = self._raw_config.states
        problems: list[str] = []

        if not states:
            raise ConfigurationError("Machine config must declare at least one state")

        # 收集动作名称，保持首次出现的顺序
        action_names: list[ActionName] = []
        seen: set[ActionName] = set()
        for state, actions in states.items():
            if not isinstance(state, str) or not state:
                problems.append(f"State name must be a non-empty string, got {state!r}")
            for action in actions:
                if not isinstance(action, str) or not action:
                    problems.append(f"Action name in state {state!r} must be a non-empty string, got {action!r}")
                    continue
                if action not in seen:
                    seen.add(action)
                    action_names.append(action)

        if self._initial_state not in states:
            problems.append(
                f"Initial state {self._initial_state!r} is not declared, valid states: {sorted(states)}"
            )

        # 动作名与状态名、状态订阅入口名称不能冲突
        subscriber_names: dict[str, StateName] = {}
        for state in states:
            name = handler_name(state)
            if name in subscriber_names:
                problems.append(
                    f"States {subscriber_names[name]!r} and {state!r} share the subscriber name {name!r}"
                )
            subscriber_names.setdefault(name, state)
        for action in action_names:
            if action in states:
                problems.append(f"Action name {action!r} collides with a state name")
            if action in subscriber_names:
                problems.append(
                    f"Action name {action!r} collides with the subscriber of state {subscriber_names[action]!r}"
                )

        if problems:
            raise ConfigurationError(
                f"Invalid machine config: {'; '.join(problems)}",
                problems,
            )

        # 所有校验通过，冻结配置并标记为已编译
        self._config = MappingProxyType({
            state: MappingProxyType(dict(actions)) for state, actions in states.items()
        })
        self._action_names = action_names
        self._is_compiled = True
        self._current_state = self._initial_state
        logger.debug(
            f"状态机 {self._id} 编译完成，状态数：{len(self._config)}，动作数：{len(action_names)}，"
            f"初始状态：{self._initial_state}"
        )

    def is_compiled(self) -> bool:
        return self._is_compiled

    def is_serialized(self) -> bool:
        """检查是否启用了串行模式

        Returns:
            启用时返回True，否则返回False
        """
        return self._lock is not None

    # ********** 状态查询 **********

    def get_state(self) -> StateName:
        return self._current_state

    def get_available_actions(self) -> list[ActionName]:
        return list(self._config[self._current_state].keys())

    def can(self, action: ActionName) -> bool:
        return action in self._config[self._current_state]

    def is_terminal(self) -> bool:
        return not self._config[self._current_state]

    # ********** 通知订阅 **********

    def on_enter(self, handler: Handler) -> Unsubscribe:
        return self._emitter.subscribe(EventTypes.ON_ENTER.value, handler)

    def on_exit(self, handler: Handler) -> Unsubscribe:
        return self._emitter.subscribe(EventTypes.ON_EXIT.value, handler)

    def subscribe_state(self, state: StateName, handler: Handler) -> Unsubscribe:
        if state not in self._config:
            raise ValueError(f"State {state!r} is not declared in the machine config")
        return self._state_emitter.subscribe(state, handler)

    # ********** 事件处理 **********

    async def transition(self, action: ActionName, meta: Any = None) -> StateName | None:
        if self._lock is None:
            return await self._transition(action, meta)

        # 持有锁的转换在处理器中再次发起转换时直接执行，否则会等待自身持有的锁
        task = asyncio.current_task()
        if task is not None and task is self._lock_owner:
            return await self._transition(action, meta)

        async with self._lock:
            self._lock_owner = task
            try:
                return await self._transition(action, meta)
            finally:
                self._lock_owner = None

    async def _transition(self, action: ActionName, meta: Any) -> StateName | None:
        """转换协议本体，各步骤严格按顺序执行"""
        # 1. 退出通知
        current = self._current_state
        if self._notify_exit_on_noop or action in self._config[current]:
            logger.debug(f"状态机 {self._id} 发布退出通知：{current}（动作 {action}）")
            await self._emitter.publish(
                EventTypes.ON_EXIT.value,
                ExitEvent(action=action, current=current, meta=meta),
            )

        # 2. 查找转换函数，退出通知期间当前状态可能已被其他转换修改
        fn = self._config[self._current_state].get(action)
        if fn is None:
            logger.debug(f"状态机 {self._id} 在状态 {self._current_state} 下不支持动作 {action}，跳过")
            return None

        # 3. 计算后继状态
        last = self._current_state
        try:
            target = await self._call_transition_fn(fn, meta)
        except Exception as e:
            logger.warning(f"状态机 {self._id} 转换函数执行失败：{last} --{action}--> ?，错误：{e!r}")
            raise

        if not isinstance(target, str) or target not in self._config:
            logger.warning(f"状态机 {self._id} 转换函数返回了未声明的状态：{target!r}（动作 {action}）")
            raise InvalidTargetStateError(action, last, target)

        # 4. 提交
        self._current_state = target
        logger.info(f"状态机 {self._id} 状态提交：{last} --{action}--> {target}")

        # 5. 全局进入通知，6. 状态进入通知
        event = EnterEvent(action=action, current=target, last=last, meta=meta)
        try:
            await self._emitter.publish(EventTypes.ON_ENTER.value, event)
            await self._state_emitter.publish(target, event)
        except Exception as e:
            logger.warning(f"状态机 {self._id} 进入通知处理失败：{target}，错误：{e!r}")
            raise

        # 7. 返回当前状态
        return self._current_state

    async def _call_transition_fn(self, fn: TransitionFn, meta: Any) -> Any:
        """调用转换函数包装器，支持同步和异步转换函数

        Args:
            fn: 转换函数
            meta: 元数据，转换函数不接收位置参数时不传递

        Returns:
            转换函数的结果
        """
        args = (meta,) if accepts_meta(fn) else ()

        # 同步函数在事件循环线程中直接调用，也可能返回可等待对象
        result = fn(*args)
        if inspect.isawaitable(result):
            result = await result
        return result
