class MachineError(Exception):
    """状态机错误基类"""


class ConfigurationError(MachineError, ValueError):
    """状态机配置错误，在构建时抛出，状态机实例不会被创建"""

    def __init__(self, message: str, problems: list[str] | None = None) -> None:
        self.problems = problems if problems is not None else [message]
        super().__init__(message)


class TransitionError(MachineError, RuntimeError):
    """转换失败，当前状态保持不变"""

    def __init__(self, message: str, action: str, state: str) -> None:
        self.action = action
        self.state = state
        super().__init__(message)


class InvalidTargetStateError(TransitionError):
    """转换函数返回了未声明的状态（包括 None）"""

    def __init__(self, action: str, state: str, target: object) -> None:
        self.target = target
        super().__init__(
            f"Action {action!r} from state {state!r} resolved to {target!r}, which is not a declared state",
            action,
            state,
        )
