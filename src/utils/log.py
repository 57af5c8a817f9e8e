import sys

from loguru import logger

from flowstate.model import Settings, get_settings


def configure_logging(settings: Settings | None = None) -> None:
    """按配置重设 loguru 的输出：替换默认的 stderr 输出，并在配置了日志文件时追加文件输出

    库本身不会调用该函数，由应用在启动时按需调用。

    Args:
        settings: 配置实例，未提供时使用全局配置
    """
    settings = settings if settings is not None else get_settings()

    logger.remove()
    logger.add(sys.stderr, level=settings.log_level)
    if settings.log_file:
        logger.add(settings.log_file, level=settings.log_level, rotation="10 MB", encoding="utf-8")
    logger.debug(f"日志已配置，级别：{settings.log_level}，文件：{settings.log_file}")
