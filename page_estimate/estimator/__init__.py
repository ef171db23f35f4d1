"""
估算引擎模块

提供基于模拟的指标估算算法，以及按注册名估算指标的估算器。
"""

from .metric_estimator import MetricEstimator, blend, ensure_navigation, intercept_multiplier
from .base import PageMetricEstimator

__all__ = [
    "MetricEstimator",
    "PageMetricEstimator",
    "blend",
    "ensure_navigation",
    "intercept_multiplier",
]
