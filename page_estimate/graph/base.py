"""
依赖图基础节点

页面加载依赖图由 CPU 任务节点和网络请求节点组成。
每条边表示“依赖方必须在被依赖方完成后才能开始”。
"""

from abc import ABC, abstractmethod
from collections import deque
from enum import Enum
from typing import Callable, Dict, Iterator, List, Optional, Set


class NodeType(Enum):
    """节点类型枚举"""
    CPU = "cpu"
    NETWORK = "network"


class BaseNode(ABC):
    """依赖图节点的基础类"""

    def __init__(self, node_id: str):
        self._id = node_id
        self._dependents: List["BaseNode"] = []
        self._dependencies: List["BaseNode"] = []

    @property
    def id(self) -> str:
        """节点ID"""
        return self._id

    @property
    @abstractmethod
    def type(self) -> NodeType:
        """节点类型"""
        pass

    @property
    @abstractmethod
    def start_time(self) -> float:
        """记录中的开始时间 (ms)"""
        pass

    @property
    @abstractmethod
    def end_time(self) -> float:
        """记录中的结束时间 (ms)"""
        pass

    @abstractmethod
    def clone(self) -> "BaseNode":
        """复制节点本身，不复制任何边"""
        pass

    def get_dependents(self) -> List["BaseNode"]:
        return list(self._dependents)

    def get_dependencies(self) -> List["BaseNode"]:
        return list(self._dependencies)

    def get_number_of_dependencies(self) -> int:
        return len(self._dependencies)

    def add_dependent(self, node: "BaseNode") -> None:
        node.add_dependency(self)

    def add_dependency(self, node: "BaseNode") -> None:
        if node is self:
            raise ValueError("Cannot add dependency on itself")
        if node in self._dependencies:
            return
        node._dependents.append(self)
        self._dependencies.append(node)

    def get_root(self) -> "BaseNode":
        """沿依赖方向回溯，返回没有依赖的根节点"""
        root = self
        while root._dependencies:
            root = root._dependencies[0]
        return root

    def traverse_generator(self, get_next: Optional[Callable[["BaseNode"], List["BaseNode"]]] = None
                           ) -> Iterator["BaseNode"]:
        """
        广度优先遍历，每个节点在一次调用中只访问一次

        Args:
            get_next: 返回下一批节点的函数，默认沿依赖方向向下（dependents）
        """
        if get_next is None:
            get_next = lambda node: node.get_dependents()

        visited: Set[str] = {self.id}
        queue = deque([self])
        while queue:
            node = queue.popleft()
            yield node
            for next_node in get_next(node):
                if next_node.id in visited:
                    continue
                visited.add(next_node.id)
                queue.append(next_node)

    def traverse(self, callback: Callable[["BaseNode"], None],
                 get_next: Optional[Callable[["BaseNode"], List["BaseNode"]]] = None) -> None:
        for node in self.traverse_generator(get_next):
            callback(node)

    def is_dependent_on(self, node: "BaseNode") -> bool:
        for ancestor in self.traverse_generator(lambda n: n.get_dependencies()):
            if ancestor is node:
                return True
        return False

    def clone_with_relationships(self, predicate: Optional[Callable[["BaseNode"], bool]] = None
                                 ) -> "BaseNode":
        """
        复制整张图，只保留满足条件的节点

        被保留节点的所有上游依赖也会被保留，保证新图仍然连通。
        原图不会被修改。

        Args:
            predicate: 节点筛选条件，None 表示保留全部节点

        Returns:
            新图中对应当前节点的克隆
        """
        root = self.get_root()

        included: Set[str] = set()
        for node in root.traverse_generator():
            if node.id in included:
                continue
            if predicate is None or predicate(node):
                for ancestor in node.traverse_generator(lambda n: n.get_dependencies()):
                    included.add(ancestor.id)

        if root.id not in included:
            raise ValueError("Cannot create graph without root node")

        clones: Dict[str, BaseNode] = {}
        originals: List[BaseNode] = []
        for node in root.traverse_generator():
            if node.id in included:
                clones[node.id] = node.clone()
                originals.append(node)

        for node in originals:
            clone = clones[node.id]
            for dependent in node.get_dependents():
                if dependent.id in clones:
                    clone.add_dependent(clones[dependent.id])

        if self.id not in clones:
            raise ValueError(f"Node {self.id} was filtered out of its own graph")
        return clones[self.id]

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.id!r})"
