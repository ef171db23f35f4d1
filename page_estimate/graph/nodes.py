"""
依赖图节点实现

网络请求节点包装一条网络记录，CPU 节点包装一个主线程任务事件。
时间单位统一为毫秒，相对于导航开始时刻。
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from .base import BaseNode, NodeType


class ResourceType(Enum):
    """网络资源类型枚举"""
    DOCUMENT = "Document"
    STYLESHEET = "Stylesheet"
    IMAGE = "Image"
    MEDIA = "Media"
    FONT = "Font"
    SCRIPT = "Script"
    XHR = "XHR"
    FETCH = "Fetch"
    OTHER = "Other"


# 资源加载优先级，与浏览器网络面板一致
PRIORITIES = ("VeryLow", "Low", "Medium", "High", "VeryHigh")


@dataclass(frozen=True)
class NetworkRecord:
    """网络请求记录"""
    request_id: str
    url: str
    resource_type: ResourceType = ResourceType.OTHER
    priority: str = "Low"
    start_time: float = 0.0          # 请求开始时间 (ms)
    end_time: float = 0.0            # 请求结束时间 (ms)
    transfer_size: int = 0           # 传输字节数
    initiator_type: str = "other"    # parser / script / preload / other
    is_main_document: bool = False
    from_disk_cache: bool = False


@dataclass(frozen=True)
class TraceEvent:
    """主线程 trace 事件"""
    name: str
    ts: float                        # 开始时间 (ms)
    dur: float = 0.0                 # 持续时间 (ms)
    url: Optional[str] = None        # EvaluateScript 事件对应的脚本URL


class NetworkNode(BaseNode):
    """网络请求节点"""

    def __init__(self, record: NetworkRecord, node_id: Optional[str] = None):
        super().__init__(node_id or record.request_id)
        self._record = record

    @property
    def type(self) -> NodeType:
        return NodeType.NETWORK

    @property
    def record(self) -> NetworkRecord:
        return self._record

    @property
    def start_time(self) -> float:
        return self._record.start_time

    @property
    def end_time(self) -> float:
        return self._record.end_time

    @property
    def initiator_type(self) -> str:
        return self._record.initiator_type

    def is_main_document(self) -> bool:
        return self._record.is_main_document

    def has_render_blocking_priority(self) -> bool:
        """
        是否具有阻塞渲染的加载优先级

        VeryHigh 一律视为阻塞；High 优先级只有脚本和文档视为阻塞。
        """
        priority = self._record.priority
        resource_type = self._record.resource_type
        if priority == "VeryHigh":
            return True
        if priority == "High":
            return resource_type in (ResourceType.SCRIPT, ResourceType.DOCUMENT)
        return False

    def clone(self) -> "NetworkNode":
        return NetworkNode(self._record, self.id)


class CPUNode(BaseNode):
    """CPU 任务节点"""

    def __init__(self, event: TraceEvent, child_events: Optional[List[TraceEvent]] = None,
                 node_id: Optional[str] = None):
        super().__init__(node_id or f"{event.name}@{event.ts}")
        self._event = event
        self._child_events = list(child_events or [])

    @property
    def type(self) -> NodeType:
        return NodeType.CPU

    @property
    def event(self) -> TraceEvent:
        return self._event

    @property
    def child_events(self) -> List[TraceEvent]:
        return list(self._child_events)

    @property
    def start_time(self) -> float:
        return self._event.ts

    @property
    def end_time(self) -> float:
        return self._event.ts + self._event.dur

    def get_evaluate_script_urls(self) -> List[str]:
        """该任务执行过的脚本URL"""
        return [evt.url for evt in self._child_events
                if evt.name == "EvaluateScript" and evt.url]

    def did_perform_layout(self) -> bool:
        return any(evt.name == "Layout" for evt in self._child_events)

    def did_paint(self) -> bool:
        return any(evt.name == "Paint" for evt in self._child_events)

    def did_parse_html(self) -> bool:
        return any(evt.name == "ParseHTML" for evt in self._child_events)

    def clone(self) -> "CPUNode":
        return CPUNode(self._event, self._child_events, self.id)
