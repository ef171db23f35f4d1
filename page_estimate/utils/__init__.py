"""
工具模块

输出格式化与日志配置。
"""

from .formatters import format_results
from .logging import setup_logging

__all__ = ["format_results", "setup_logging"]
