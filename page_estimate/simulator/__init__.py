"""
模拟器模块

定义模拟器接口，并提供一个简化的关键路径参考实现。
"""

from .base import NodeTiming, SimulationOptions, SimulationResult, Simulator
from .critical_path import CriticalPathSimulator

__all__ = [
    "NodeTiming",
    "SimulationOptions",
    "SimulationResult",
    "Simulator",
    "CriticalPathSimulator",
]
