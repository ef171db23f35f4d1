"""
指标模块

定义指标策略接口、内置指标以及指标注册表。
"""

from .base import MetricCoefficients, MetricResult, MetricStrategy, get_script_urls
from .first_contentful_paint import FirstContentfulPaint
from .first_meaningful_paint import FirstMeaningfulPaint
from .interactive import Interactive
from .speed_index import SpeedIndex
from .registry import MetricRegistry, metric_registry

__all__ = [
    "MetricCoefficients",
    "MetricResult",
    "MetricStrategy",
    "get_script_urls",
    "FirstContentfulPaint",
    "FirstMeaningfulPaint",
    "Interactive",
    "SpeedIndex",
    "MetricRegistry",
    "metric_registry",
]
