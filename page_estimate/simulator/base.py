"""
模拟器接口

模拟器根据依赖图和模拟选项给出确定性的加载耗时。
同一张图、同一组选项和同一份模拟器配置必须得到相同结果。
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, Optional

from ..graph.base import BaseNode


@dataclass(frozen=True)
class SimulationOptions:
    """单次模拟的选项"""
    label: str = ""
    flexible_ordering: bool = False  # 放宽请求的开始顺序约束


@dataclass(frozen=True)
class NodeTiming:
    """单个节点的模拟时间"""
    start_time: float
    end_time: float

    @property
    def duration(self) -> float:
        return self.end_time - self.start_time


@dataclass(frozen=True)
class SimulationResult:
    """模拟结果"""
    time_in_ms: float
    node_timings: Dict[BaseNode, NodeTiming] = field(default_factory=dict)
    label: str = ""


class Simulator(ABC):
    """模拟器基础类"""

    @property
    @abstractmethod
    def rtt(self) -> float:
        """模拟使用的往返时延 (ms)"""
        pass

    @abstractmethod
    def simulate(self, graph: BaseNode, options: Optional[SimulationOptions] = None) -> SimulationResult:
        """
        模拟依赖图的加载过程

        Args:
            graph: 依赖图中的任一节点，模拟从其根节点开始
            options: 模拟选项

        Returns:
            模拟结果
        """
        pass
