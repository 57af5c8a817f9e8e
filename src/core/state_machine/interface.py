from abc import ABC, abstractmethod
from typing import Any, Mapping

from flowstate.core.emitter import Handler, Unsubscribe
from .const import StateName, ActionName, TransitionFn


class IStateMachine(ABC):
    """状态机接口：持有唯一的当前状态，并按 退出通知 -> 计算后继状态 -> 进入通知 的顺序执行转换"""

    # ********** 状态机初始化 **********

    @abstractmethod
    def get_id(self) -> str:
        """获取状态机唯一标识

        Returns:
            状态机ID字符串
        """
        pass

    @abstractmethod
    def get_valid_states(self) -> set[StateName]:
        """获取所有有效状态

        Returns:
            有效状态集合的副本
        """
        pass

    @abstractmethod
    def get_action_names(self) -> list[ActionName]:
        """获取配置中出现过的所有动作名称，按首次出现的顺序排列

        Returns:
            动作名称列表的副本
        """
        pass

    @abstractmethod
    def get_config(self) -> Mapping[StateName, Mapping[ActionName, TransitionFn]]:
        """获取编译后的只读配置

        Returns:
            状态名到只读动作表的映射
        """
        pass

    # ********** 编译状态 **********

    @abstractmethod
    def compile(self) -> None:
        """编译状态机，完成配置校验

        编译时必须满足以下所有条件：
        1. 配置非空，状态名与动作名均为非空字符串
        2. 初始状态在配置中
        3. 动作名不与任何状态名相同
        4. 动作名不与任何状态订阅入口名称相同，不同状态的订阅入口名称互不相同

        Raises:
            ConfigurationError: 若上述条件不满足则抛出对应异常
        """
        pass

    @abstractmethod
    def is_compiled(self) -> bool:
        """检查状态机是否已编译完毕

        Returns:
            如果已编译则返回True，否则返回False
        """
        pass

    # ********** 状态查询 **********

    @abstractmethod
    def get_state(self) -> StateName:
        """获取当前状态，总是反映最近一次提交的值

        Returns:
            当前状态
        """
        pass

    @abstractmethod
    def get_available_actions(self) -> list[ActionName]:
        """获取当前状态下合法的动作

        Returns:
            动作名称列表
        """
        pass

    @abstractmethod
    def can(self, action: ActionName) -> bool:
        """检查动作在当前状态下是否合法

        Args:
            action: 动作名称

        Returns:
            合法时返回True，否则返回False
        """
        pass

    @abstractmethod
    def is_terminal(self) -> bool:
        """检查当前状态是否为终止状态（没有任何动作）

        Returns:
            终止状态返回True，否则返回False
        """
        pass

    # ********** 通知订阅 **********

    @abstractmethod
    def on_enter(self, handler: Handler) -> Unsubscribe:
        """订阅全局进入通知

        Args:
            handler: 处理器，接收 EnterEvent

        Returns:
            取消订阅函数
        """
        pass

    @abstractmethod
    def on_exit(self, handler: Handler) -> Unsubscribe:
        """订阅全局退出通知

        Args:
            handler: 处理器，接收 ExitEvent

        Returns:
            取消订阅函数
        """
        pass

    @abstractmethod
    def subscribe_state(self, state: StateName, handler: Handler) -> Unsubscribe:
        """订阅指定状态的进入通知，在全局进入通知之后触发

        Args:
            state: 状态名称
            handler: 处理器，接收 EnterEvent

        Returns:
            取消订阅函数

        Raises:
            ValueError: 状态未在配置中声明
        """
        pass

    # ********** 事件处理 **********

    @abstractmethod
    async def transition(self, action: ActionName, meta: Any = None) -> StateName | None:
        """执行一次状态转换

        Args:
            action: 动作名称
            meta: 传递给转换函数和通知处理器的元数据

        Returns:
            新的当前状态，动作在当前状态下不合法时返回 None

        Raises:
            InvalidTargetStateError: 转换函数返回了未声明的状态
            Exception: 转换函数或通知处理器抛出的异常原样传播
        """
        pass
