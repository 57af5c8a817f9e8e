from .config import MachineConfig, MachineOptions
from .event import EnterEvent, ExitEvent
from .setting import Settings, get_settings, reload_settings

__all__ = [
    # Config related
    "MachineConfig", "MachineOptions",
    # Notification payloads
    "EnterEvent", "ExitEvent",
    # Settings
    "Settings", "get_settings", "reload_settings",
]
