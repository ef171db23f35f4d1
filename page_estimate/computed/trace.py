"""
处理后的 trace 与导航数据

这些结构由 trace 处理环节提供，估算核心只读取其中的时间点。
时间单位为毫秒，相对于导航开始。
"""

from typing import Optional
from pydantic import BaseModel, Field


class NavigationTimestamps(BaseModel):
    """导航关键时间点"""
    time_origin: float = Field(default=0.0, description="导航开始时间(ms)")
    first_paint: Optional[float] = Field(default=None, description="首次绘制")
    first_contentful_paint: Optional[float] = Field(default=None, description="首次内容绘制")
    first_meaningful_paint: Optional[float] = Field(default=None, description="首次有效绘制")
    largest_contentful_paint: Optional[float] = Field(default=None, description="最大内容绘制")
    dom_content_loaded: Optional[float] = Field(default=None, description="DOMContentLoaded")
    load: Optional[float] = Field(default=None, description="load 事件")


class SpeedlineSummary(BaseModel):
    """基于截图的视觉进度摘要"""
    speed_index: float = Field(ge=0, description="速度指数(ms)")
    first_visual_change: Optional[float] = None
    last_visual_change: Optional[float] = None


class ProcessedTrace(BaseModel):
    """处理后的 trace"""
    timestamps: NavigationTimestamps = Field(default_factory=NavigationTimestamps)
    speedline: Optional[SpeedlineSummary] = None


class ProcessedNavigation(BaseModel):
    """处理后的导航数据"""
    timestamps: NavigationTimestamps
