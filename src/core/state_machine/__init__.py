"""State machine implementation for flowstate"""
from .base import BaseStateMachine
from .builder import build_actions, build_handlers
from .const import StateName, ActionName, TransitionFn, ActionFn, EventTypes, handler_name
from .errors import MachineError, ConfigurationError, TransitionError, InvalidTargetStateError
from .interface import IStateMachine
from .machine import Machine, create_machine


__all__ = [
    # Types
    "StateName", "ActionName", "TransitionFn", "ActionFn", "EventTypes", "handler_name",
    # Errors
    "MachineError", "ConfigurationError", "TransitionError", "InvalidTargetStateError",
    # Interfaces
    "IStateMachine",
    # Implementations
    "BaseStateMachine", "Machine",
    # Builders
    "build_actions", "build_handlers", "create_machine",
]
