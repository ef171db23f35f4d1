"""
Page-Estimate: 页面加载性能指标估算工具

基于页面加载依赖图，分别在乐观和悲观假设下模拟加载过程，
再通过各指标的回归系数把两次模拟结果混合为最终估算值。
"""

__version__ = "0.1.0"

from .errors import (
    MetricEstimateError,
    MetricContractError,
    UnsupportedModeError,
    MissingTimingError,
    GraphLoadError,
)
from .computed import (
    ArtifactProvider,
    ComputationCache,
    ComputedContext,
    GatherContext,
    MetricComputationData,
    PageArtifactProvider,
)
from .estimator import MetricEstimator, PageMetricEstimator
from .metrics import (
    MetricCoefficients,
    MetricResult,
    MetricStrategy,
    MetricRegistry,
    get_script_urls,
    metric_registry,
)
from .simulator import CriticalPathSimulator, SimulationOptions, SimulationResult, Simulator

__all__ = [
    "MetricEstimateError",
    "MetricContractError",
    "UnsupportedModeError",
    "MissingTimingError",
    "GraphLoadError",
    "ArtifactProvider",
    "ComputationCache",
    "ComputedContext",
    "GatherContext",
    "MetricComputationData",
    "PageArtifactProvider",
    "MetricEstimator",
    "PageMetricEstimator",
    "MetricCoefficients",
    "MetricResult",
    "MetricStrategy",
    "MetricRegistry",
    "get_script_urls",
    "metric_registry",
    "CriticalPathSimulator",
    "SimulationOptions",
    "SimulationResult",
    "Simulator",
]
