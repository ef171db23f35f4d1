"""
依赖图模块

提供页面加载依赖图的节点类型、遍历与裁剪复制，以及从 JSON 文档加载依赖图。
"""

from .base import BaseNode, NodeType
from .nodes import CPUNode, NetworkNode, NetworkRecord, ResourceType, TraceEvent, PRIORITIES
from .loader import GraphDocument, NodeDocument, load_graph

__all__ = [
    "BaseNode",
    "NodeType",
    "CPUNode",
    "NetworkNode",
    "NetworkRecord",
    "ResourceType",
    "TraceEvent",
    "PRIORITIES",
    "GraphDocument",
    "NodeDocument",
    "load_graph",
]
