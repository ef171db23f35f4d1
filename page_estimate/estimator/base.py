"""
页面指标估算器

按注册名估算指标：先计算其依赖的兄弟指标，再执行基于模拟的估算流程。
同一上下文中每个 (指标, 输入) 只计算一次。
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from ..computed.context import ComputedContext, MetricComputationData
from ..errors import MetricContractError
from ..metrics.base import MetricResult
from ..metrics.registry import MetricRegistry, metric_registry
from .metric_estimator import MetricEstimator, ensure_navigation

logger = logging.getLogger(__name__)


class PageMetricEstimator:
    """页面指标估算器主类"""

    def __init__(self, registry: Optional[MetricRegistry] = None):
        self.metric_registry = registry or metric_registry

    async def estimate(self, metric_name: str, data: MetricComputationData,
                       context: ComputedContext) -> MetricResult:
        """
        估算单个指标

        Args:
            metric_name: 指标注册名
            data: 页面加载输入数据
            context: 计算上下文

        Returns:
            指标估算结果
        """
        ensure_navigation(data)
        return await self._estimate(metric_name, data, context, ())

    async def estimate_all(self, data: MetricComputationData, context: ComputedContext,
                           metric_names: Optional[List[str]] = None) -> Dict[str, MetricResult]:
        """
        估算多个指标

        Args:
            data: 页面加载输入数据
            context: 计算上下文
            metric_names: 指标注册名列表，默认为所有已注册指标

        Returns:
            注册名到估算结果的映射
        """
        ensure_navigation(data)
        names = self.metric_registry.list_metrics() if metric_names is None else metric_names
        results = {}
        for name in names:
            results[name] = await self._estimate(name, data, context, ())
        return results

    async def _estimate(self, metric_name: str, data: MetricComputationData,
                        context: ComputedContext, chain: Tuple[str, ...]) -> MetricResult:
        if metric_name in chain:
            raise MetricContractError(
                f"Circular metric dependency: {' -> '.join(chain + (metric_name,))}")

        async def compute() -> MetricResult:
            return await self._compute(metric_name, data, context, chain + (metric_name,))

        return await context.cache.memoize(("metric", metric_name), data, compute)

    async def _compute(self, metric_name: str, data: MetricComputationData,
                       context: ComputedContext, chain: Tuple[str, ...]) -> MetricResult:
        strategy = self.metric_registry.create_metric(metric_name)

        extras: Dict[str, Any] = {}
        for extras_key, dependency in strategy.DEPENDENCIES.items():
            extras[extras_key] = await self._estimate(dependency, data, context, chain)
        if strategy.REQUIRES_SPEEDLINE:
            extras["speedline"] = await context.provider.request_speedline(data.trace, context)

        result = await MetricEstimator(strategy).compute_metric_with_graphs(data, context, extras)
        result = strategy.adjust_result(result, extras)

        logger.info("Estimated %s: %.1f ms", metric_name, result.timing)
        return result
