"""
依赖图加载

从 JSON 文档构建依赖图。文档是已经处理好的节点列表，
不负责从原始 trace 推导依赖关系。

文档格式::

    {"nodes": [
        {"id": "1", "type": "network", "url": "https://a.com/",
         "resource_type": "Document", "priority": "VeryHigh",
         "start_time": 0, "end_time": 120, "is_main_document": true},
        {"id": "2", "type": "cpu", "name": "RunTask", "start_time": 130,
         "duration": 40, "dependencies": ["1"],
         "child_events": [{"name": "ParseHTML", "ts": 130, "dur": 30}]}
    ]}
"""

from typing import Any, Dict, List, Literal, Optional
from pydantic import BaseModel as PydanticModel, Field, ValidationError

from ..errors import GraphLoadError
from .base import BaseNode
from .nodes import CPUNode, NetworkNode, NetworkRecord, ResourceType, TraceEvent


class ChildEventDocument(PydanticModel):
    """CPU 任务的子事件"""
    name: str
    ts: float = 0.0
    dur: float = 0.0
    url: Optional[str] = None


class NodeDocument(PydanticModel):
    """单个节点的文档结构"""
    id: str
    type: Literal["network", "cpu"]
    dependencies: List[str] = Field(default_factory=list, description="被依赖节点ID列表")
    start_time: float = Field(default=0.0, description="开始时间(ms)")

    # 网络节点字段
    url: str = ""
    resource_type: ResourceType = ResourceType.OTHER
    priority: str = "Low"
    end_time: Optional[float] = Field(default=None, description="结束时间(ms)")
    transfer_size: int = Field(default=0, ge=0, description="传输字节数")
    initiator_type: str = "other"
    is_main_document: bool = False
    from_disk_cache: bool = False

    # CPU 节点字段
    name: str = "RunTask"
    duration: float = Field(default=0.0, ge=0, description="任务时长(ms)")
    child_events: List[ChildEventDocument] = Field(default_factory=list)


class GraphDocument(PydanticModel):
    """依赖图文档"""
    nodes: List[NodeDocument]


def _create_node(doc: NodeDocument) -> BaseNode:
    if doc.type == "network":
        end_time = doc.end_time if doc.end_time is not None else doc.start_time
        record = NetworkRecord(
            request_id=doc.id,
            url=doc.url,
            resource_type=doc.resource_type,
            priority=doc.priority,
            start_time=doc.start_time,
            end_time=end_time,
            transfer_size=doc.transfer_size,
            initiator_type=doc.initiator_type,
            is_main_document=doc.is_main_document,
            from_disk_cache=doc.from_disk_cache,
        )
        return NetworkNode(record)

    event = TraceEvent(name=doc.name, ts=doc.start_time, dur=doc.duration)
    child_events = [TraceEvent(name=c.name, ts=c.ts, dur=c.dur, url=c.url) for c in doc.child_events]
    return CPUNode(event, child_events, node_id=doc.id)


def load_graph(document: Dict[str, Any]) -> BaseNode:
    """
    从文档构建依赖图

    Args:
        document: 依赖图文档（见模块说明）

    Returns:
        依赖图的根节点

    Raises:
        GraphLoadError: 文档格式错误、ID重复、依赖不存在、存在环或根节点数量不为1
    """
    try:
        graph_doc = GraphDocument.model_validate(document)
    except ValidationError as e:
        raise GraphLoadError(f"Invalid graph document: {e}") from e

    if not graph_doc.nodes:
        raise GraphLoadError("Graph document has no nodes")

    nodes: Dict[str, BaseNode] = {}
    for node_doc in graph_doc.nodes:
        if node_doc.id in nodes:
            raise GraphLoadError(f"Duplicate node id: {node_doc.id}")
        nodes[node_doc.id] = _create_node(node_doc)

    for node_doc in graph_doc.nodes:
        node = nodes[node_doc.id]
        for dependency_id in node_doc.dependencies:
            if dependency_id not in nodes:
                raise GraphLoadError(f"Node {node_doc.id} depends on unknown node {dependency_id}")
            try:
                node.add_dependency(nodes[dependency_id])
            except ValueError as e:
                raise GraphLoadError(str(e)) from e

    roots = [node for node in nodes.values() if node.get_number_of_dependencies() == 0]
    if len(roots) != 1:
        raise GraphLoadError(f"Graph must have exactly one root node, found {len(roots)}")

    # 从根出发必须能访问到所有节点，且不存在环
    _check_acyclic(nodes)
    root = roots[0]
    reachable = sum(1 for _ in root.traverse_generator())
    if reachable != len(nodes):
        raise GraphLoadError("Graph contains nodes unreachable from the root")

    return root


def _check_acyclic(nodes: Dict[str, BaseNode]) -> None:
    in_degree = {node_id: node.get_number_of_dependencies() for node_id, node in nodes.items()}
    ready = [node_id for node_id, degree in in_degree.items() if degree == 0]
    visited = 0
    while ready:
        node_id = ready.pop()
        visited += 1
        for dependent in nodes[node_id].get_dependents():
            in_degree[dependent.id] -= 1
            if in_degree[dependent.id] == 0:
                ready.append(dependent.id)
    if visited != len(nodes):
        raise GraphLoadError("Graph contains a dependency cycle")
