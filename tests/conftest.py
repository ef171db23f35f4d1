"""
pytest配置文件

定义测试的全局配置和fixture。
"""

import copy
from typing import Any, Dict, List, Optional

import pytest

from page_estimate.computed.context import ComputedContext, GatherContext, MetricComputationData
from page_estimate.computed.provider import ArtifactProvider
from page_estimate.computed.trace import NavigationTimestamps, ProcessedNavigation, ProcessedTrace
from page_estimate.graph.loader import load_graph
from page_estimate.graph.nodes import NetworkNode, NetworkRecord, ResourceType
from page_estimate.metrics.base import MetricCoefficients, MetricStrategy
from page_estimate.simulator.base import SimulationOptions, SimulationResult, Simulator


PAGE_GRAPH = {
    "nodes": [
        {"id": "doc", "type": "network", "url": "https://example.com/", "resource_type": "Document",
         "priority": "VeryHigh", "start_time": 0, "end_time": 300, "transfer_size": 14000,
         "initiator_type": "other", "is_main_document": True},
        {"id": "parse", "type": "cpu", "name": "RunTask", "start_time": 310, "duration": 20,
         "dependencies": ["doc"],
         "child_events": [{"name": "ParseHTML", "ts": 310, "dur": 20}]},
        {"id": "style", "type": "network", "url": "https://example.com/style.css",
         "resource_type": "Stylesheet", "priority": "VeryHigh", "start_time": 320, "end_time": 500,
         "transfer_size": 20000, "initiator_type": "parser", "dependencies": ["parse"]},
        {"id": "app", "type": "network", "url": "https://example.com/app.js", "resource_type": "Script",
         "priority": "High", "start_time": 320, "end_time": 600, "transfer_size": 60000,
         "initiator_type": "parser", "dependencies": ["parse"]},
        {"id": "hero", "type": "network", "url": "https://example.com/hero.png", "resource_type": "Image",
         "priority": "Low", "start_time": 350, "end_time": 1200, "transfer_size": 120000,
         "initiator_type": "parser", "dependencies": ["parse"]},
        {"id": "eval-app", "type": "cpu", "name": "RunTask", "start_time": 610, "duration": 80,
         "dependencies": ["app"],
         "child_events": [{"name": "EvaluateScript", "ts": 610, "dur": 80,
                           "url": "https://example.com/app.js"}]},
        {"id": "first-layout", "type": "cpu", "name": "RunTask", "start_time": 700, "duration": 30,
         "dependencies": ["style", "eval-app"],
         "child_events": [{"name": "Layout", "ts": 700, "dur": 20}, {"name": "Paint", "ts": 720, "dur": 10}]},
        {"id": "analytics", "type": "network", "url": "https://cdn.example.com/analytics.js",
         "resource_type": "Script", "priority": "Low", "start_time": 700, "end_time": 900,
         "transfer_size": 30000, "initiator_type": "script", "dependencies": ["eval-app"]},
        {"id": "eval-analytics", "type": "cpu", "name": "RunTask", "start_time": 950, "duration": 120,
         "dependencies": ["analytics"],
         "child_events": [{"name": "EvaluateScript", "ts": 950, "dur": 100,
                           "url": "https://cdn.example.com/analytics.js"},
                          {"name": "Layout", "ts": 1050, "dur": 20}]},
    ]
}

PAGE_TRACE = {
    "timestamps": {
        "first_paint": 740,
        "first_contentful_paint": 750,
        "first_meaningful_paint": 800,
        "dom_content_loaded": 700,
        "load": 1300,
    },
    "speedline": {"speed_index": 1500, "first_visual_change": 750, "last_visual_change": 2100},
}


class FakeSimulator(Simulator):
    """按标签返回预设耗时的模拟器，并记录调用"""

    def __init__(self, times: Dict[str, float], rtt_ms: float = 150.0):
        self.times = times
        self._rtt_ms = rtt_ms
        self.calls: List[SimulationOptions] = []

    @property
    def rtt(self) -> float:
        return self._rtt_ms

    def simulate(self, graph, options: Optional[SimulationOptions] = None) -> SimulationResult:
        options = options or SimulationOptions()
        self.calls.append(options)
        return SimulationResult(time_in_ms=self.times[options.label], label=options.label)


class RecordingProvider(ArtifactProvider):
    """返回固定数据并记录请求顺序的协作者"""

    def __init__(self, graph, simulator: Optional[Simulator] = None,
                 timestamps: Optional[NavigationTimestamps] = None, fail_stage: Optional[str] = None):
        self.graph = graph
        self.simulator = simulator
        self.timestamps = timestamps or NavigationTimestamps(first_contentful_paint=500)
        self.fail_stage = fail_stage
        self.calls: List[str] = []

    def _record(self, stage: str) -> None:
        self.calls.append(stage)
        if stage == self.fail_stage:
            raise RuntimeError(f"{stage} failed")

    async def request_graph(self, data, context):
        self._record("graph")
        return self.graph

    async def request_processed_trace(self, trace, context):
        self._record("processed_trace")
        return ProcessedTrace(timestamps=self.timestamps)

    async def request_processed_navigation(self, processed_trace, context):
        self._record("processed_navigation")
        return ProcessedNavigation(timestamps=processed_trace.timestamps)

    async def request_simulator(self, data, context):
        self._record("simulator")
        return self.simulator


class StubMetric(MetricStrategy):
    """系数可配置、依赖图为完整复制的测试指标"""

    name = "Stub"

    def __init__(self, coefficients: MetricCoefficients):
        self._coefficients = coefficients
        self.extras_seen: List[Dict[str, Any]] = []

    def coefficients(self, rtt_ms: float) -> MetricCoefficients:
        return self._coefficients

    def build_optimistic_graph(self, graph, navigation):
        return graph.clone_with_relationships()

    def build_pessimistic_graph(self, graph, navigation):
        return graph.clone_with_relationships()

    def extract_estimate(self, simulation, extras):
        self.extras_seen.append(extras)
        return simulation


@pytest.fixture
def page_document():
    """示例页面文档"""
    return {
        "gather_mode": "navigation",
        "graph": copy.deepcopy(PAGE_GRAPH),
        "trace": copy.deepcopy(PAGE_TRACE),
    }


@pytest.fixture
def page_graph():
    """示例页面依赖图"""
    return load_graph(copy.deepcopy(PAGE_GRAPH))


@pytest.fixture
def page_data(page_document):
    """示例页面输入数据"""
    return MetricComputationData.from_document(page_document)


@pytest.fixture
def tiny_graph():
    """文档 + 一个脚本的两节点依赖图"""
    root = NetworkNode(NetworkRecord(request_id="1", url="https://a.com/",
                                     resource_type=ResourceType.DOCUMENT, is_main_document=True))
    script = NetworkNode(NetworkRecord(request_id="2", url="https://a.com/a.js",
                                       resource_type=ResourceType.SCRIPT))
    root.add_dependent(script)
    return root


@pytest.fixture
def navigation_data():
    """导航模式的输入数据"""
    return MetricComputationData(trace={}, devtools_log={}, gather_context=GatherContext("navigation"))


@pytest.fixture
def fake_simulator_class():
    return FakeSimulator


@pytest.fixture
def recording_provider_class():
    return RecordingProvider


@pytest.fixture
def stub_metric_class():
    return StubMetric


@pytest.fixture
def make_context():
    """创建带指定协作者的计算上下文"""
    def factory(provider):
        return ComputedContext(provider=provider)
    return factory
