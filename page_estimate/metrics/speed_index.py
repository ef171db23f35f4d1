"""
速度指数 (Speed Index)

乐观估算直接使用截图计算出的速度指数，悲观估算基于模拟出的布局任务时间。
由于混入了非模拟数据，回归系数需要随目标往返时延缩放。
"""

import math
from dataclasses import replace
from typing import Any, Dict

from ..computed.trace import ProcessedNavigation
from ..graph.base import BaseNode, NodeType
from ..simulator.base import SimulationResult
from .base import MetricCoefficients, MetricResult, MetricStrategy

# 系数拟合时使用的往返时延 (ms)，以及不受节流影响的基础时延
FITTED_RTT_MS = 150
BASELINE_RTT_MS = 30


def compute_layout_based_speed_index(simulation: SimulationResult, fcp_time_in_ms: float) -> float:
    """
    基于布局任务估算速度指数

    每个执行了布局的主线程任务按其耗时的对数加权，
    任务结束时间不早于 FCP。没有布局任务时返回 FCP。
    """
    total_weighted_time = 0.0
    total_weight = 0.0
    for node, timing in simulation.node_timings.items():
        if node.type is not NodeType.CPU or not node.did_perform_layout():
            continue
        duration = timing.duration
        weight = max(math.log2(duration), 0.0) if duration > 0 else 0.0
        total_weighted_time += weight * max(timing.end_time, fcp_time_in_ms)
        total_weight += weight

    if not total_weight:
        return fcp_time_in_ms
    return total_weighted_time / total_weight


class SpeedIndex(MetricStrategy):
    """速度指数，结果不早于首次内容绘制"""

    name = "SpeedIndex"
    COEFFICIENTS = MetricCoefficients(intercept=-250, optimistic=1.4, pessimistic=0.65)
    DEPENDENCIES = {"fcp_result": "first-contentful-paint"}
    REQUIRES_SPEEDLINE = True

    def coefficients(self, rtt_ms: float) -> MetricCoefficients:
        """
        按往返时延缩放系数

        往返时延越接近基础时延，截图数据越接近真实情况，
        系数向 0.5/0.5 的平均值收敛，截距趋近于 0。
        """
        default = self.COEFFICIENTS
        multiplier = max((rtt_ms - BASELINE_RTT_MS) / (FITTED_RTT_MS - BASELINE_RTT_MS), 0)
        return MetricCoefficients(
            intercept=default.intercept * multiplier,
            optimistic=0.5 + (default.optimistic - 0.5) * multiplier,
            pessimistic=0.5 + (default.pessimistic - 0.5) * multiplier,
        )

    def build_optimistic_graph(self, graph: BaseNode, navigation: ProcessedNavigation) -> BaseNode:
        return graph.clone_with_relationships()

    def build_pessimistic_graph(self, graph: BaseNode, navigation: ProcessedNavigation) -> BaseNode:
        return graph.clone_with_relationships()

    def extract_estimate(self, simulation: SimulationResult, extras: Dict[str, Any]) -> SimulationResult:
        fcp_result = extras.get("fcp_result")
        speedline = extras.get("speedline")
        if fcp_result is None or speedline is None:
            raise ValueError("SpeedIndex requires fcp_result and speedline in extras")

        if extras["optimistic"]:
            estimate = speedline.speed_index
        else:
            estimate = compute_layout_based_speed_index(
                simulation, fcp_result.pessimistic_estimate.time_in_ms)
        return replace(simulation, time_in_ms=estimate)

    def adjust_result(self, result: MetricResult, extras: Dict[str, Any]) -> MetricResult:
        fcp_result = extras.get("fcp_result")
        if fcp_result is None:
            return result
        return replace(result, timing=max(result.timing, fcp_result.timing))
