"""
关键路径模拟器

一个简化的参考实现：按拓扑顺序为每个节点计算最早开始时间，
总耗时为最晚结束的节点时间。不模拟连接复用、带宽争用等细节。
"""

import heapq
import itertools
import logging
from typing import Dict, List, Optional

from ..config.settings import Settings
from ..graph.base import BaseNode, NodeType
from ..graph.nodes import CPUNode, NetworkNode
from .base import NodeTiming, SimulationOptions, SimulationResult, Simulator

logger = logging.getLogger(__name__)


class CriticalPathSimulator(Simulator):
    """基于关键路径的确定性模拟器"""

    def __init__(self, rtt_ms: float = 150.0, throughput_kbps: float = 1638.4,
                 cpu_slowdown_multiplier: float = 4.0):
        if rtt_ms < 0:
            raise ValueError(f"rtt_ms must be non-negative, got {rtt_ms}")
        if throughput_kbps <= 0:
            raise ValueError(f"throughput_kbps must be positive, got {throughput_kbps}")
        if cpu_slowdown_multiplier <= 0:
            raise ValueError(f"cpu_slowdown_multiplier must be positive, got {cpu_slowdown_multiplier}")

        self._rtt_ms = rtt_ms
        self.throughput_kbps = throughput_kbps
        self.cpu_slowdown_multiplier = cpu_slowdown_multiplier

    @classmethod
    def from_settings(cls, settings: Settings) -> "CriticalPathSimulator":
        return cls(
            rtt_ms=settings.rtt_ms,
            throughput_kbps=settings.throughput_kbps,
            cpu_slowdown_multiplier=settings.cpu_slowdown_multiplier,
        )

    @property
    def rtt(self) -> float:
        return self._rtt_ms

    def simulate(self, graph: BaseNode, options: Optional[SimulationOptions] = None) -> SimulationResult:
        options = options or SimulationOptions()

        timings: Dict[BaseNode, NodeTiming] = {}
        previous_request_start = 0.0

        for node in self._topological_order(graph.get_root()):
            start = max((timings[dep].end_time for dep in node.get_dependencies() if dep in timings),
                        default=0.0)

            # 严格顺序下，请求不能早于上一个已调度请求开始
            if node.type is NodeType.NETWORK and not options.flexible_ordering:
                start = max(start, previous_request_start)
                previous_request_start = start

            timings[node] = NodeTiming(start_time=start, end_time=start + self._estimate_duration(node))

        time_in_ms = max((timing.end_time for timing in timings.values()), default=0.0)
        logger.debug("Simulated %s: %d nodes, %.1f ms", options.label or "graph", len(timings), time_in_ms)
        return SimulationResult(time_in_ms=time_in_ms, node_timings=timings, label=options.label)

    def _estimate_duration(self, node: BaseNode) -> float:
        if isinstance(node, CPUNode):
            return node.event.dur * self.cpu_slowdown_multiplier

        if isinstance(node, NetworkNode):
            record = node.record
            if record.from_disk_cache:
                return 0.0
            # 主文档需要额外一次往返建立连接
            round_trips = 2 if record.is_main_document else 1
            transfer_ms = record.transfer_size * 8 / self.throughput_kbps
            return self._rtt_ms * round_trips + transfer_ms

        raise TypeError(f"Unsupported node type: {type(node).__name__}")

    @staticmethod
    def _topological_order(root: BaseNode) -> List[BaseNode]:
        """拓扑排序，可同时开始的节点按记录中的开始时间排序"""
        reachable = list(root.traverse_generator())
        reachable_ids = {node.id for node in reachable}
        pending = {
            node.id: sum(1 for dep in node.get_dependencies() if dep.id in reachable_ids)
            for node in reachable
        }

        counter = itertools.count()
        ready = [(root.start_time, next(counter), root)]
        order: List[BaseNode] = []
        while ready:
            _, _, node = heapq.heappop(ready)
            order.append(node)
            for dependent in node.get_dependents():
                if dependent.id not in pending:
                    continue
                pending[dependent.id] -= 1
                if pending[dependent.id] == 0:
                    heapq.heappush(ready, (dependent.start_time, next(counter), dependent))
        return order
