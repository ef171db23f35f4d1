"""
指标策略基础定义

每个指标提供一个策略：回归系数、乐观/悲观依赖图的构建方式，
以及如何把模拟结果转换为该指标的估算值。
通用的模拟与混合算法见 estimator.metric_estimator。
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, ClassVar, Dict, Optional, Set

from ..computed.trace import ProcessedNavigation
from ..errors import MetricContractError
from ..graph.base import BaseNode, NodeType
from ..graph.nodes import NetworkNode, ResourceType
from ..simulator.base import SimulationResult


@dataclass(frozen=True)
class MetricCoefficients:
    """线性混合系数"""
    intercept: float
    optimistic: float
    pessimistic: float


@dataclass(frozen=True)
class MetricResult:
    """单个指标的估算结果"""
    timing: float                              # 最终估算值 (ms)
    optimistic_estimate: SimulationResult
    pessimistic_estimate: SimulationResult
    optimistic_graph: BaseNode
    pessimistic_graph: BaseNode

    def to_dict(self) -> Dict[str, Any]:
        """转换为便于输出的字典"""
        return {
            "timing_ms": self.timing,
            "optimistic_ms": self.optimistic_estimate.time_in_ms,
            "pessimistic_ms": self.pessimistic_estimate.time_in_ms,
            "optimistic_graph_nodes": sum(1 for _ in self.optimistic_graph.traverse_generator()),
            "pessimistic_graph_nodes": sum(1 for _ in self.pessimistic_graph.traverse_generator()),
        }


def get_script_urls(graph: BaseNode,
                    condition: Optional[Callable[[NetworkNode], bool]] = None) -> Set[str]:
    """
    收集依赖图中所有脚本请求的URL

    Args:
        graph: 依赖图（从该节点开始遍历）
        condition: 可选的节点筛选条件

    Returns:
        去重后的脚本URL集合
    """
    script_urls: Set[str] = set()

    for node in graph.traverse_generator():
        if node.type is NodeType.CPU:
            continue
        if node.record.resource_type is not ResourceType.SCRIPT:
            continue
        if condition is not None and not condition(node):
            continue
        script_urls.add(node.record.url)

    return script_urls


class MetricStrategy(ABC):
    """
    所有指标策略的基础类

    子类必须实现两个依赖图构建方法；回归系数通过 COEFFICIENTS 提供，
    需要随网络条件调整时覆盖 coefficients()。
    """

    # 用于模拟标签的指标名，如 "FirstContentfulPaint"
    name: ClassVar[str] = ""
    COEFFICIENTS: ClassVar[Optional[MetricCoefficients]] = None

    # extras 键 -> 需要先计算的兄弟指标注册名
    DEPENDENCIES: ClassVar[Dict[str, str]] = {}
    REQUIRES_SPEEDLINE: ClassVar[bool] = False

    def coefficients(self, rtt_ms: float) -> MetricCoefficients:
        """
        获取回归系数

        默认返回固定系数表。部分指标的估算混入了非模拟数据，
        需要根据目标网络往返时延缩放系数。

        Args:
            rtt_ms: 模拟器的往返时延

        Returns:
            回归系数
        """
        if self.COEFFICIENTS is None:
            raise MetricContractError(f"{type(self).__name__} does not define COEFFICIENTS")
        return self.COEFFICIENTS

    @abstractmethod
    def build_optimistic_graph(self, graph: BaseNode, navigation: ProcessedNavigation) -> BaseNode:
        """构建最好情况下的依赖图，不得修改原图"""
        raise MetricContractError(f"{type(self).__name__} does not build an optimistic graph")

    @abstractmethod
    def build_pessimistic_graph(self, graph: BaseNode, navigation: ProcessedNavigation) -> BaseNode:
        """构建最坏情况下的依赖图，不得修改原图"""
        raise MetricContractError(f"{type(self).__name__} does not build a pessimistic graph")

    def extract_estimate(self, simulation: SimulationResult, extras: Dict[str, Any]) -> SimulationResult:
        """
        把模拟结果转换为指标估算值

        Args:
            simulation: 模拟结果
            extras: 附加数据，包含 optimistic 标志以及调用方传入的其他数据

        Returns:
            估算值，默认直接返回模拟结果
        """
        return simulation

    def adjust_result(self, result: MetricResult, extras: Dict[str, Any]) -> MetricResult:
        """混合完成后的修正，默认不做修改"""
        return result
