"""
异常定义

估算过程中可能抛出的异常类型。
上游协作者（图构建、模拟器等）的异常不做包装，原样抛给调用方。
"""


class MetricEstimateError(Exception):
    """指标估算相关错误的基类"""

    pass


class MetricContractError(MetricEstimateError, NotImplementedError):
    """指标策略缺少必须实现的扩展点"""

    pass


class UnsupportedModeError(MetricEstimateError):
    """在非导航模式下请求估算"""

    pass


class MissingTimingError(MetricEstimateError):
    """缺少估算所需的导航时间点或视觉进度数据"""

    pass


class GraphLoadError(MetricEstimateError, ValueError):
    """依赖图文档无法构建为有效的依赖图"""

    pass
