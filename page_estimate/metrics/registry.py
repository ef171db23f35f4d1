"""
指标注册表

统一管理所有支持的指标策略，提供指标查询、注册和创建功能。
"""

import logging
from typing import Any, Dict, List, Type

from .base import MetricStrategy
from .first_contentful_paint import FirstContentfulPaint
from .first_meaningful_paint import FirstMeaningfulPaint
from .interactive import Interactive
from .speed_index import SpeedIndex

logger = logging.getLogger(__name__)


class MetricRegistry:
    """指标注册表类"""

    def __init__(self):
        self._metrics: Dict[str, Type[MetricStrategy]] = {}
        self._register_built_in_metrics()

    def _register_built_in_metrics(self) -> None:
        """注册内置指标"""
        self.register("first-contentful-paint", FirstContentfulPaint)
        self.register("first-meaningful-paint", FirstMeaningfulPaint)
        self.register("interactive", Interactive)
        self.register("speed-index", SpeedIndex)

    def register(self, metric_name: str, strategy_class: Type[MetricStrategy]) -> None:
        """
        注册指标策略

        Args:
            metric_name: 指标注册名
            strategy_class: 指标策略类
        """
        if not issubclass(strategy_class, MetricStrategy):
            raise TypeError(f"{strategy_class!r} is not a MetricStrategy")
        self._metrics[metric_name] = strategy_class
        logger.debug("Registered metric %s -> %s", metric_name, strategy_class.__name__)

    def create_metric(self, metric_name: str) -> MetricStrategy:
        """
        创建指标策略实例

        Args:
            metric_name: 指标注册名

        Returns:
            指标策略实例
        """
        if metric_name not in self._metrics:
            raise ValueError(f"Unsupported metric: {metric_name}")
        return self._metrics[metric_name]()

    def list_metrics(self) -> List[str]:
        """获取所有支持的指标列表"""
        return list(self._metrics.keys())

    def get_metric_info(self, metric_name: str, rtt_ms: float = 150.0) -> Dict[str, Any]:
        """
        获取指标信息

        Args:
            metric_name: 指标注册名
            rtt_ms: 计算系数使用的往返时延

        Returns:
            指标信息字典
        """
        strategy = self.create_metric(metric_name)
        coefficients = strategy.coefficients(rtt_ms)
        return {
            "name": metric_name,
            "label": strategy.name,
            "intercept": coefficients.intercept,
            "optimistic": coefficients.optimistic,
            "pessimistic": coefficients.pessimistic,
            "depends_on": sorted(strategy.DEPENDENCIES.values()),
            "requires_speedline": strategy.REQUIRES_SPEEDLINE,
        }

    def search_metrics(self, query: str) -> List[str]:
        """搜索指标"""
        query = query.lower()
        return [name for name in self._metrics if query in name.lower()]


# 全局指标注册表实例
metric_registry = MetricRegistry()
