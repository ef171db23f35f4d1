"""
计算上下文

MetricComputationData 描述一次页面加载的输入；
ComputedContext 携带协作者和显式的计算缓存，由调用方创建并传入。
"""

import asyncio
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Dict, Hashable, Optional, Tuple

from ..config.settings import Settings

# 避免循环导入
if TYPE_CHECKING:
    from ..simulator.base import Simulator
    from .provider import ArtifactProvider


NAVIGATION_MODE = "navigation"


@dataclass(frozen=True)
class GatherContext:
    """采集上下文"""
    gather_mode: str = NAVIGATION_MODE


@dataclass
class MetricComputationData:
    """指标计算的输入数据"""
    trace: Dict[str, Any]
    devtools_log: Dict[str, Any]
    gather_context: Optional[GatherContext] = None
    settings: Optional[Settings] = None
    simulator: Optional["Simulator"] = None

    @classmethod
    def from_document(cls, document: Dict[str, Any],
                      settings: Optional[Settings] = None) -> "MetricComputationData":
        """
        从页面文档创建输入数据

        Args:
            document: 包含 graph、trace 和可选 gather_mode 的页面文档
            settings: 模拟使用的设置

        Returns:
            输入数据
        """
        if "graph" not in document:
            raise ValueError("Page document has no 'graph' section")
        gather_mode = document.get("gather_mode")
        return cls(
            trace=document.get("trace", {}),
            devtools_log=document["graph"],
            gather_context=GatherContext(gather_mode) if gather_mode else None,
            settings=settings,
        )


class ComputationCache:
    """
    按 (阶段, 输入对象) 记忆化的异步计算缓存

    输入按对象身份区分。缓存保存的是 asyncio 任务，
    并发的相同请求共享同一次计算，失败结果同样会被缓存。
    """

    def __init__(self):
        self._entries: Dict[Tuple[Hashable, int], Tuple[Any, "asyncio.Future[Any]"]] = {}

    async def memoize(self, stage: Hashable, key: Any, factory: Callable[[], Awaitable[Any]]) -> Any:
        cache_key = (stage, id(key))
        entry = self._entries.get(cache_key)
        if entry is None:
            # 保留 key 的引用，防止对象被回收后 id 被复用
            entry = (key, asyncio.ensure_future(factory()))
            self._entries[cache_key] = entry
        return await entry[1]

    def __contains__(self, item: Tuple[Hashable, Any]) -> bool:
        stage, key = item
        return (stage, id(key)) in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def clear(self) -> None:
        self._entries.clear()


@dataclass
class ComputedContext:
    """计算上下文：协作者 + 缓存"""
    provider: "ArtifactProvider"
    cache: ComputationCache = field(default_factory=ComputationCache)
