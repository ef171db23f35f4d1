"""
可交互时间 (Time to Interactive)
"""

from dataclasses import replace
from typing import Any, Dict

from ..computed.trace import ProcessedNavigation
from ..graph.base import BaseNode, NodeType
from ..graph.nodes import ResourceType
from ..simulator.base import SimulationResult
from .base import MetricCoefficients, MetricResult, MetricStrategy

# 乐观图只保留可能成为长任务的 CPU 任务 (ms)
MINIMUM_CPU_TASK_DURATION_MS = 20
# 长任务阈值 (ms)
LONG_TASK_DURATION_MS = 50


def get_last_long_task_end_time(simulation: SimulationResult,
                                duration: float = LONG_TASK_DURATION_MS) -> float:
    """模拟结果中最后一个长任务的结束时间，没有长任务时为 0"""
    return max(
        (timing.end_time for node, timing in simulation.node_timings.items()
         if node.type is NodeType.CPU and timing.duration > duration),
        default=0.0,
    )


class Interactive(MetricStrategy):
    """可交互时间，结果不早于首次有效绘制"""

    name = "Interactive"
    COEFFICIENTS = MetricCoefficients(intercept=0, optimistic=0.45, pessimistic=0.55)
    DEPENDENCIES = {"fmp_result": "first-meaningful-paint"}

    def build_optimistic_graph(self, graph: BaseNode, navigation: ProcessedNavigation) -> BaseNode:
        def keep(node: BaseNode) -> bool:
            if node.type is NodeType.CPU:
                return node.event.dur > MINIMUM_CPU_TASK_DURATION_MS
            record = node.record
            if record.resource_type is ResourceType.IMAGE:
                return False
            return (record.resource_type is ResourceType.SCRIPT
                    or record.priority in ("High", "VeryHigh"))

        return graph.clone_with_relationships(keep)

    def build_pessimistic_graph(self, graph: BaseNode, navigation: ProcessedNavigation) -> BaseNode:
        return graph.clone_with_relationships()

    def extract_estimate(self, simulation: SimulationResult, extras: Dict[str, Any]) -> SimulationResult:
        fmp_result = extras.get("fmp_result")
        if fmp_result is None:
            raise ValueError("Interactive requires fmp_result in extras")

        last_task_at = get_last_long_task_end_time(simulation)
        if extras["optimistic"]:
            minimum_time = fmp_result.optimistic_estimate.time_in_ms
        else:
            minimum_time = fmp_result.pessimistic_estimate.time_in_ms
        return replace(simulation, time_in_ms=max(minimum_time, last_task_at))

    def adjust_result(self, result: MetricResult, extras: Dict[str, Any]) -> MetricResult:
        fmp_result = extras.get("fmp_result")
        if fmp_result is None:
            return result
        return replace(result, timing=max(result.timing, fmp_result.timing))
