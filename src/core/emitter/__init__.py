"""Publish/subscribe notification capability used by the state machine"""
from .interface import IEmitter, Handler, Unsubscribe
from .base import AsyncEmitter


__all__ = [
    "IEmitter",
    "AsyncEmitter",
    "Handler",
    "Unsubscribe",
]
