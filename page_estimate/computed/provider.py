"""
上游协作者接口

估算核心通过 ArtifactProvider 获取依赖图、处理后的 trace、导航数据和模拟器。
记忆化由提供者借助上下文中的缓存完成，估算核心本身不缓存。
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from ..config.settings import Settings, get_settings
from ..errors import MissingTimingError
from ..graph.base import BaseNode
from ..graph.loader import load_graph
from ..simulator.base import Simulator
from ..simulator.critical_path import CriticalPathSimulator
from .context import ComputedContext, MetricComputationData
from .trace import ProcessedNavigation, ProcessedTrace, SpeedlineSummary


class ArtifactProvider(ABC):
    """上游协作者的统一接口"""

    @abstractmethod
    async def request_graph(self, data: MetricComputationData, context: ComputedContext) -> BaseNode:
        pass

    @abstractmethod
    async def request_processed_trace(self, trace: Dict[str, Any],
                                      context: ComputedContext) -> ProcessedTrace:
        pass

    @abstractmethod
    async def request_processed_navigation(self, processed_trace: ProcessedTrace,
                                           context: ComputedContext) -> ProcessedNavigation:
        pass

    @abstractmethod
    async def request_simulator(self, data: MetricComputationData, context: ComputedContext) -> Simulator:
        pass

    async def request_speedline(self, trace: Dict[str, Any], context: ComputedContext) -> SpeedlineSummary:
        """视觉进度数据，只有依赖截图的指标需要"""
        raise MissingTimingError(f"{type(self).__name__} does not provide speedline data")


class PageArtifactProvider(ArtifactProvider):
    """
    基于 JSON 页面文档的协作者实现

    devtools_log 为依赖图文档，trace 为处理后的 trace 文档。
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings

    async def request_graph(self, data: MetricComputationData, context: ComputedContext) -> BaseNode:
        async def build() -> BaseNode:
            return load_graph(data.devtools_log)
        return await context.cache.memoize("graph", data.devtools_log, build)

    async def request_processed_trace(self, trace: Dict[str, Any],
                                      context: ComputedContext) -> ProcessedTrace:
        async def build() -> ProcessedTrace:
            return ProcessedTrace.model_validate(trace)
        return await context.cache.memoize("processed_trace", trace, build)

    async def request_processed_navigation(self, processed_trace: ProcessedTrace,
                                           context: ComputedContext) -> ProcessedNavigation:
        async def build() -> ProcessedNavigation:
            if processed_trace.timestamps.first_contentful_paint is None:
                raise MissingTimingError("No first contentful paint in trace")
            return ProcessedNavigation(timestamps=processed_trace.timestamps)
        return await context.cache.memoize("processed_navigation", processed_trace, build)

    async def request_simulator(self, data: MetricComputationData, context: ComputedContext) -> Simulator:
        async def build() -> Simulator:
            settings = data.settings or self.settings or get_settings()
            return CriticalPathSimulator.from_settings(settings)
        return await context.cache.memoize("simulator", data, build)

    async def request_speedline(self, trace: Dict[str, Any], context: ComputedContext) -> SpeedlineSummary:
        processed_trace = await self.request_processed_trace(trace, context)
        if processed_trace.speedline is None:
            raise MissingTimingError("No speedline data in trace")
        return processed_trace.speedline
