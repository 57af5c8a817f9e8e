"""
Unit tests for settings and machine defaults derived from them.
"""

import os
from pathlib import Path

import pytest

from flowstate import create_machine, configure_logging
from flowstate.model import Settings, get_settings, reload_settings


_KEYS = ("FLOWSTATE_SERIALIZED", "FLOWSTATE_NOTIFY_EXIT_ON_NOOP", "FLOWSTATE_LOG_LEVEL", "FLOWSTATE_LOG_FILE")


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    """Run each test from an empty directory with no FLOWSTATE_ variables."""
    saved = {key: os.environ.pop(key) for key in _KEYS if key in os.environ}
    monkeypatch.setenv("FLOWSTATE_ENV_FILE", str(tmp_path / "missing.env"))
    monkeypatch.chdir(tmp_path)
    reload_settings()
    yield
    monkeypatch.undo()
    # .env 文件中的值直接写入了环境变量
    for key in _KEYS:
        os.environ.pop(key, None)
    os.environ.update(saved)
    reload_settings()


def test_defaults() -> None:
    """Test default settings values."""
    settings = Settings()

    assert settings.log_level == "INFO"
    assert settings.log_file is None
    assert settings.serialized is False
    assert settings.notify_exit_on_noop is True


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    """Test settings are read from FLOWSTATE_ prefixed variables."""
    monkeypatch.setenv("FLOWSTATE_SERIALIZED", "true")
    monkeypatch.setenv("FLOWSTATE_LOG_LEVEL", "DEBUG")

    settings = reload_settings()

    assert settings.serialized is True
    assert settings.log_level == "DEBUG"
    assert get_settings() is settings


def test_env_file_loaded(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Test values from a .env file are picked up."""
    env_file = tmp_path / "custom.env"
    env_file.write_text("# machine defaults\nFLOWSTATE_NOTIFY_EXIT_ON_NOOP='false'\n", encoding="utf-8")
    monkeypatch.setenv("FLOWSTATE_ENV_FILE", str(env_file))

    settings = reload_settings()

    assert settings.notify_exit_on_noop is False


def test_invalid_log_level(monkeypatch: pytest.MonkeyPatch) -> None:
    """Test unknown log levels are rejected."""
    monkeypatch.setenv("FLOWSTATE_LOG_LEVEL", "LOUD")

    with pytest.raises(ValueError):
        reload_settings()


def test_machine_defaults_follow_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    """Test machines fall back to settings for unspecified options."""
    monkeypatch.setenv("FLOWSTATE_SERIALIZED", "1")
    reload_settings()
    config = {"off": {"switchOn": lambda: "on"}, "on": {}}

    assert create_machine(config, initial_state="off").is_serialized() is True
    assert create_machine(config, initial_state="off", serialized=False).is_serialized() is False


def test_configure_logging_with_file(tmp_path: Path) -> None:
    """Test configure_logging writes to the configured file."""
    log_file = tmp_path / "flowstate.log"
    settings = Settings(log_level="DEBUG", log_file=str(log_file))

    configure_logging(settings)
    create_machine({"off": {"switchOn": lambda: "on"}, "on": {}}, initial_state="off")

    # 重新配置会移除并关闭文件输出
    configure_logging(Settings())

    assert log_file.exists()
    assert "编译完成" in log_file.read_text(encoding="utf-8")
