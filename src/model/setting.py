"""
Global settings management using Pydantic.

This module provides a singleton Settings class that loads configuration
from environment variables (prefixed with ``FLOWSTATE_``) and .env files.
"""
import os
from pathlib import Path
from typing import Literal, Any

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _find_env_file() -> str | None:
    """
    Find the .env file by searching multiple possible locations.

    Search order:
    1. Path specified by FLOWSTATE_ENV_FILE environment variable
    2. Current working directory (.env)
    3. Project root directory (where setup.py/pyproject.toml exists) (.env)
    4. User config directory (~/.flowstate/.env)

    Returns:
        str | None: Path to .env file if found, None otherwise
    """
    # 1. Check custom path from environment variable
    custom_path = os.getenv('FLOWSTATE_ENV_FILE')
    if custom_path and Path(custom_path).exists():
        return custom_path

    # 2. Current working directory
    cwd = Path.cwd()
    env_file = cwd / '.env'
    if env_file.exists():
        return str(env_file)

    # 3. Project root directory (where setup.py or pyproject.toml exists)
    current = cwd
    for _ in range(5):  # Search up to 5 levels
        if (current / 'setup.py').exists() or (current / 'pyproject.toml').exists():
            env_file = current / '.env'
            if env_file.exists():
                return str(env_file)
            break
        if current.parent == current:
            break
        current = current.parent

    # 4. User config directory
    env_file = Path.home() / '.flowstate' / '.env'
    if env_file.exists():
        return str(env_file)

    return None


def _load_env_file(env_file_path: str) -> None:
    """
    Manually load a .env file by reading and setting environment variables.

    Args:
        env_file_path: Path to the .env file to load
    """
    with open(env_file_path, 'r', encoding='utf-8') as f:
        for line in f:
            line = line.strip()
            # Skip empty lines and comments
            if not line or line.startswith('#'):
                continue

            # Split on first '=' only
            if '=' in line:
                key, value = line.split('=', 1)
                key = key.strip()
                value = value.strip()

                # Remove surrounding quotes if present
                if value.startswith('"') and value.endswith('"'):
                    value = value[1:-1]
                elif value.startswith("'") and value.endswith("'"):
                    value = value[1:-1]

                # Set in environment if not already set
                if key and key not in os.environ:
                    os.environ[key] = value


class Settings(BaseSettings):
    """Global state machine settings."""

    model_config = SettingsConfigDict(
        env_prefix="FLOWSTATE_",
        env_file=None,  # We'll handle .env file loading manually
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        validate_assignment=True,
        frozen=False,
    )

    def __init__(self, **kwargs: Any):
        """Initialize Settings with automatic .env file loading."""
        env_file_path = _find_env_file()
        if env_file_path:
            _load_env_file(env_file_path)

        super().__init__(**kwargs)

    # Logging configuration
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level"
    )

    log_file: str | None = Field(
        default=None,
        description="Optional log file path, stderr only when unset"
    )

    # Machine defaults
    serialized: bool = Field(
        default=False,
        description="Run at most one transition at a time per machine instance"
    )
    """默认是否启用串行模式。启用后同一状态机实例的转换请求按调用顺序依次执行，
    未启用时并发的转换请求互不等待，结果取决于完成顺序。
    """

    notify_exit_on_noop: bool = Field(
        default=True,
        description="Publish the exit notification even when the action is not legal"
    )
    """当前状态不支持请求的动作时，是否仍然发布退出通知。默认保留该行为，
    使观察者对每一次转换尝试都能收到一次退出通知。
    """


# Global singleton instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """
    Get the global singleton Settings instance.

    Creates the instance on first call, subsequent calls return the same instance.

    Returns:
        Settings: The global settings instance
    """
    global _settings

    if _settings is None:
        _settings = Settings()

    return _settings


def reload_settings() -> Settings:
    """
    Reload settings from environment variables.

    This is useful for testing or when environment variables change at runtime.

    Returns:
        Settings: The new settings instance
    """
    global _settings
    _settings = Settings()
    return _settings
