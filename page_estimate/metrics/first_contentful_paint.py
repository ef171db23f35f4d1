"""
首次内容绘制 (First Contentful Paint)

两张依赖图都按 FCP 时间点截断，只保留可能阻塞首次绘制的请求和主线程任务。
"""

from typing import Callable, List, Optional, Set, Tuple

from ..computed.trace import ProcessedNavigation
from ..errors import MissingTimingError
from ..graph.base import BaseNode, NodeType
from ..graph.nodes import CPUNode, NetworkNode
from .base import MetricCoefficients, MetricStrategy, get_script_urls


def get_render_blocking_node_data(graph: BaseNode, cutoff_timestamp: float,
                                  treat_node_as_render_blocking: Callable[[NetworkNode], bool],
                                  additional_cpu_nodes_to_treat_as_render_blocking:
                                  Optional[Callable[[CPUNode], bool]] = None
                                  ) -> Tuple[Set[str], Set[str]]:
    """
    找出截断时间点之前阻塞渲染的主线程任务

    Args:
        graph: 依赖图
        cutoff_timestamp: 截断时间点 (ms)
        treat_node_as_render_blocking: 判断网络节点是否视为阻塞渲染
        additional_cpu_nodes_to_treat_as_render_blocking: 额外视为阻塞的 CPU 任务

    Returns:
        (阻塞渲染的 CPU 节点ID集合, 确定不阻塞渲染的脚本URL集合)
    """
    script_url_to_cpu_node = {}
    cpu_nodes: List[CPUNode] = []
    for node in graph.traverse_generator():
        if node.type is not NodeType.CPU:
            continue
        if node.start_time <= cutoff_timestamp:
            cpu_nodes.append(node)
        for url in node.get_evaluate_script_urls():
            # 同一脚本多次执行时以最早的一次为准
            existing = script_url_to_cpu_node.get(url)
            if existing is None or node.start_time < existing.start_time:
                script_url_to_cpu_node[url] = node

    cpu_nodes.sort(key=lambda n: n.start_time)
    early_cpu_node_ids = {node.id for node in cpu_nodes}

    possibly_render_blocking_script_urls = get_script_urls(graph, treat_node_as_render_blocking)

    blocking_cpu_node_ids: Set[str] = set()
    definitely_not_render_blocking_script_urls: Set[str] = set()
    for url in possibly_render_blocking_script_urls:
        cpu_node = script_url_to_cpu_node.get(url)
        # 脚本在截断点之前执行过，视为阻塞渲染
        if cpu_node is not None and cpu_node.id in early_cpu_node_ids:
            blocking_cpu_node_ids.add(cpu_node.id)
            continue
        definitely_not_render_blocking_script_urls.add(url)

    # 首次布局、首次绘制和首次 HTML 解析一定在关键路径上
    for predicate in (CPUNode.did_perform_layout, CPUNode.did_paint, CPUNode.did_parse_html):
        first = next((node for node in cpu_nodes if predicate(node)), None)
        if first is not None:
            blocking_cpu_node_ids.add(first.id)

    if additional_cpu_nodes_to_treat_as_render_blocking is not None:
        for node in cpu_nodes:
            if additional_cpu_nodes_to_treat_as_render_blocking(node):
                blocking_cpu_node_ids.add(node.id)

    return blocking_cpu_node_ids, definitely_not_render_blocking_script_urls


def get_first_paint_based_graph(graph: BaseNode, cutoff_timestamp: float,
                                treat_node_as_render_blocking: Callable[[NetworkNode], bool],
                                additional_cpu_nodes_to_treat_as_render_blocking:
                                Optional[Callable[[CPUNode], bool]] = None) -> BaseNode:
    """按绘制时间点截断依赖图，只保留阻塞渲染的节点"""
    blocking_cpu_node_ids, not_blocking_script_urls = get_render_blocking_node_data(
        graph, cutoff_timestamp, treat_node_as_render_blocking,
        additional_cpu_nodes_to_treat_as_render_blocking,
    )

    def keep(node: BaseNode) -> bool:
        if node.type is NodeType.NETWORK:
            ended_after_paint = node.end_time > cutoff_timestamp or node.start_time > cutoff_timestamp
            if ended_after_paint and not node.is_main_document():
                return False
            if node.record.url in not_blocking_script_urls:
                return False
            return treat_node_as_render_blocking(node)
        return node.id in blocking_cpu_node_ids

    return graph.clone_with_relationships(keep)


class FirstContentfulPaint(MetricStrategy):
    """首次内容绘制"""

    name = "FirstContentfulPaint"
    COEFFICIENTS = MetricCoefficients(intercept=0, optimistic=0.5, pessimistic=0.5)

    @staticmethod
    def _paint_timestamp(navigation: ProcessedNavigation) -> float:
        fcp = navigation.timestamps.first_contentful_paint
        if fcp is None:
            raise MissingTimingError("No first contentful paint in navigation")
        return fcp

    def build_optimistic_graph(self, graph: BaseNode, navigation: ProcessedNavigation) -> BaseNode:
        # 由脚本发起的请求在乐观情况下不阻塞绘制
        return get_first_paint_based_graph(
            graph,
            self._paint_timestamp(navigation),
            lambda node: node.has_render_blocking_priority() and node.initiator_type != "script",
        )

    def build_pessimistic_graph(self, graph: BaseNode, navigation: ProcessedNavigation) -> BaseNode:
        return get_first_paint_based_graph(
            graph,
            self._paint_timestamp(navigation),
            lambda node: node.has_render_blocking_priority(),
        )
