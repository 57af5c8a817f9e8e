"""flowstate: declarative asynchronous finite-state machines with lifecycle notifications"""
from .core.emitter import IEmitter, AsyncEmitter
from .core.state_machine import (
    IStateMachine,
    BaseStateMachine,
    Machine,
    create_machine,
    EventTypes,
    handler_name,
    MachineError,
    ConfigurationError,
    TransitionError,
    InvalidTargetStateError,
)
from .model import MachineConfig, MachineOptions, EnterEvent, ExitEvent, Settings, get_settings, reload_settings
from .utils import configure_logging

__version__ = "0.1.0"

__all__ = [
    # Factory
    "create_machine",
    # State machine
    "IStateMachine", "BaseStateMachine", "Machine", "EventTypes", "handler_name",
    # Notification
    "IEmitter", "AsyncEmitter", "EnterEvent", "ExitEvent",
    # Config
    "MachineConfig", "MachineOptions", "Settings", "get_settings", "reload_settings",
    "configure_logging",
    # Errors
    "MachineError", "ConfigurationError", "TransitionError", "InvalidTargetStateError",
]
