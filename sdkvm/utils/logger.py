"""
日志模块。

提供 sdkvm 日志的配置和管理功能。
"""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

_logger: Optional[logging.Logger] = None

LOGGER_NAME = "sdkvm"
LOG_FILE_NAME = "sdkvm.log"
LOG_FORMAT = "%(asctime)s - %(levelname)s - %(module)s - %(message)s"
CONSOLE_FORMAT = "%(levelname)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
MAX_BYTES = 5 * 1024 * 1024
BACKUP_COUNT = 5


def setup_logger(
    level: int = logging.WARNING,
    log_dir: Optional[Path] = None,
    log_to_console: bool = True,
    max_bytes: int = MAX_BYTES,
    backup_count: int = BACKUP_COUNT,
) -> logging.Logger:
    """
    配置日志记录器。

    可重复调用，每次调用都会替换已有的处理器。

    参数:
        level: 日志级别，默认为 WARNING
        log_dir: 日志文件目录，为 None 时不写文件
        log_to_console: 是否输出到控制台（stderr），默认为 True
        max_bytes: 单个日志文件最大字节数，默认为 5MB
        backup_count: 保留的备份文件数量，默认为 5

    返回:
        配置好的 Logger 实例
    """
    global _logger

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    if log_dir is not None:
        try:
            log_dir.mkdir(parents=True, exist_ok=True)
            file_handler = RotatingFileHandler(
                log_dir / LOG_FILE_NAME,
                maxBytes=max_bytes,
                backupCount=backup_count,
                encoding="utf-8",
            )
        except OSError as e:
            logger.warning(f"无法创建日志文件 {log_dir / LOG_FILE_NAME}: {e}")
        else:
            file_handler.setLevel(level)
            file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
            logger.addHandler(file_handler)

    if log_to_console:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
        logger.addHandler(console_handler)

    _logger = logger
    return logger


def get_logger() -> logging.Logger:
    """
    获取日志记录器实例。

    如果尚未初始化，则使用默认配置（仅控制台）初始化。

    返回:
        Logger 实例
    """
    if _logger is None:
        return setup_logger()
    return _logger


def set_log_level(level: int) -> None:
    """
    设置日志级别。

    参数:
        level: 日志级别（如 logging.DEBUG、logging.INFO 等）
    """
    logger = get_logger()
    logger.setLevel(level)
    for handler in logger.handlers:
        handler.setLevel(level)
