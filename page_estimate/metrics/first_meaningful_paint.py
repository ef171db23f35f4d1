"""
首次有效绘制 (First Meaningful Paint)
"""

from dataclasses import replace
from typing import Any, Dict

from ..computed.trace import ProcessedNavigation
from ..errors import MissingTimingError
from ..graph.base import BaseNode
from ..graph.nodes import CPUNode
from .base import MetricCoefficients, MetricResult, MetricStrategy
from .first_contentful_paint import get_first_paint_based_graph


class FirstMeaningfulPaint(MetricStrategy):
    """首次有效绘制，结果不早于首次内容绘制"""

    name = "FirstMeaningfulPaint"
    COEFFICIENTS = MetricCoefficients(intercept=0, optimistic=0.5, pessimistic=0.5)
    DEPENDENCIES = {"fcp_result": "first-contentful-paint"}

    @staticmethod
    def _paint_timestamp(navigation: ProcessedNavigation) -> float:
        fmp = navigation.timestamps.first_meaningful_paint
        if fmp is None:
            raise MissingTimingError("No first meaningful paint in navigation")
        return fmp

    def build_optimistic_graph(self, graph: BaseNode, navigation: ProcessedNavigation) -> BaseNode:
        return get_first_paint_based_graph(
            graph,
            self._paint_timestamp(navigation),
            lambda node: node.has_render_blocking_priority() and node.initiator_type != "script",
        )

    def build_pessimistic_graph(self, graph: BaseNode, navigation: ProcessedNavigation) -> BaseNode:
        # 截断点前的布局任务都可能影响有效绘制
        return get_first_paint_based_graph(
            graph,
            self._paint_timestamp(navigation),
            lambda node: node.has_render_blocking_priority(),
            CPUNode.did_perform_layout,
        )

    def adjust_result(self, result: MetricResult, extras: Dict[str, Any]) -> MetricResult:
        fcp_result = extras.get("fcp_result")
        if fcp_result is None:
            return result
        return replace(result, timing=max(result.timing, fcp_result.timing))
