"""
日志配置

日志只挂在 page_estimate 包的 logger 上，不改动根 logger，
嵌入到其他程序中使用时不会影响宿主的日志输出。
"""

import logging
import logging.handlers
import os
import sys
from typing import Optional

from ..config.settings import LOG_LEVELS, Settings, get_settings

PACKAGE_LOGGER = "page_estimate"


def setup_logging(settings: Optional[Settings] = None, log_level: Optional[str] = None) -> logging.Logger:
    """
    按设置配置包日志

    重复调用会替换之前安装的处理器。

    Args:
        settings: 日志设置，默认使用全局设置
        log_level: 覆盖设置中的日志级别

    Returns:
        配置好的包 logger
    """
    settings = settings or get_settings()
    level = (log_level or settings.log_level).upper()
    if level not in LOG_LEVELS:
        raise ValueError(f"Unknown log level: {level}")

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(settings.log_format)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    package_logger.addHandler(console_handler)

    if settings.log_file:
        log_dir = os.path.dirname(settings.log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            settings.log_file,
            maxBytes=settings.log_file_max_bytes,
            backupCount=settings.log_file_backup_count,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        package_logger.addHandler(file_handler)

    package_logger.setLevel(level)
    package_logger.propagate = False
    return package_logger
