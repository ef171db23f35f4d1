"""
基于模拟的指标估算器

对任意指标策略执行同一套流程：构建乐观/悲观依赖图，运行三次模拟，
再用指标的回归系数把乐观、悲观估算值混合成最终结果。
"""

import logging
from typing import Any, Dict, Optional

from ..computed.context import NAVIGATION_MODE, ComputedContext, MetricComputationData
from ..errors import UnsupportedModeError
from ..metrics.base import MetricCoefficients, MetricResult, MetricStrategy
from ..simulator.base import SimulationOptions, SimulationResult

logger = logging.getLogger(__name__)


def ensure_navigation(data: MetricComputationData) -> None:
    """只支持导航模式；未提供采集上下文时按导航处理"""
    gather_mode = data.gather_context.gather_mode if data.gather_context else NAVIGATION_MODE
    if gather_mode != NAVIGATION_MODE:
        raise UnsupportedModeError(
            f"Metrics can only be estimated for navigations, got gather mode '{gather_mode}'"
        )


def intercept_multiplier(coefficients: MetricCoefficients, optimistic_ms: float) -> float:
    """
    截距衰减系数

    回归拟合针对 1 秒以上的加载，1 秒以下时按乐观估算值线性缩小正截距。
    """
    if coefficients.intercept > 0:
        return min(1.0, optimistic_ms / 1000)
    return 1.0


def blend(coefficients: MetricCoefficients, optimistic_ms: float, pessimistic_ms: float) -> float:
    """按回归系数混合乐观和悲观估算值"""
    timing = (
        coefficients.intercept * intercept_multiplier(coefficients, optimistic_ms)
        + coefficients.optimistic * optimistic_ms
        + coefficients.pessimistic * pessimistic_ms
    )
    return max(0.0, timing)


class MetricEstimator:
    """单个指标的估算器"""

    def __init__(self, strategy: MetricStrategy):
        self.strategy = strategy

    @property
    def metric_name(self) -> str:
        return self.strategy.name or type(self.strategy).__name__

    async def compute_metric_with_graphs(self, data: MetricComputationData, context: ComputedContext,
                                         extras: Optional[Dict[str, Any]] = None) -> MetricResult:
        """
        估算指标

        Args:
            data: 页面加载输入数据
            context: 计算上下文（协作者与缓存）
            extras: 透传给 extract_estimate 的附加数据

        Returns:
            指标估算结果

        Raises:
            UnsupportedModeError: 非导航模式
        """
        ensure_navigation(data)
        extras = extras or {}
        provider = context.provider
        metric_name = self.metric_name

        graph = await provider.request_graph(data, context)
        processed_trace = await provider.request_processed_trace(data.trace, context)
        processed_navigation = await provider.request_processed_navigation(processed_trace, context)
        simulator = data.simulator
        if simulator is None:
            simulator = await provider.request_simulator(data, context)

        optimistic_graph = self.strategy.build_optimistic_graph(graph, processed_navigation)
        pessimistic_graph = self.strategy.build_pessimistic_graph(graph, processed_navigation)

        optimistic_simulation = simulator.simulate(
            optimistic_graph, SimulationOptions(label=f"optimistic{metric_name}"))
        optimistic_flex_simulation = simulator.simulate(
            optimistic_graph, SimulationOptions(label=f"optimisticFlex{metric_name}", flexible_ordering=True))
        pessimistic_simulation = simulator.simulate(
            pessimistic_graph, SimulationOptions(label=f"pessimistic{metric_name}"))

        # 放宽顺序只在严格更快时采用
        optimistic_pick = self._select_optimistic(optimistic_simulation, optimistic_flex_simulation)

        optimistic_estimate = self.strategy.extract_estimate(optimistic_pick, {**extras, "optimistic": True})
        pessimistic_estimate = self.strategy.extract_estimate(
            pessimistic_simulation, {**extras, "optimistic": False})

        coefficients = self.strategy.coefficients(simulator.rtt)
        timing = blend(coefficients, optimistic_estimate.time_in_ms, pessimistic_estimate.time_in_ms)

        logger.debug(
            "%s: optimistic=%.1fms (%s) pessimistic=%.1fms coefficients=%s timing=%.1fms",
            metric_name, optimistic_estimate.time_in_ms, optimistic_pick.label,
            pessimistic_estimate.time_in_ms, coefficients, timing,
        )

        return MetricResult(
            timing=timing,
            optimistic_estimate=optimistic_estimate,
            pessimistic_estimate=pessimistic_estimate,
            optimistic_graph=optimistic_graph,
            pessimistic_graph=pessimistic_graph,
        )

    async def compute(self, data: MetricComputationData, context: ComputedContext) -> MetricResult:
        return await self.compute_metric_with_graphs(data, context)

    @staticmethod
    def _select_optimistic(strict: SimulationResult, flexible: SimulationResult) -> SimulationResult:
        return flexible if flexible.time_in_ms < strict.time_in_ms else strict
