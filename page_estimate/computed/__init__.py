"""
上游数据模块

定义估算所需的输入数据、计算上下文与缓存，以及上游协作者接口。
"""

from .context import (
    NAVIGATION_MODE,
    ComputationCache,
    ComputedContext,
    GatherContext,
    MetricComputationData,
)
from .trace import NavigationTimestamps, ProcessedNavigation, ProcessedTrace, SpeedlineSummary
from .provider import ArtifactProvider, PageArtifactProvider

__all__ = [
    "NAVIGATION_MODE",
    "ComputationCache",
    "ComputedContext",
    "GatherContext",
    "MetricComputationData",
    "NavigationTimestamps",
    "ProcessedNavigation",
    "ProcessedTrace",
    "SpeedlineSummary",
    "ArtifactProvider",
    "PageArtifactProvider",
]
