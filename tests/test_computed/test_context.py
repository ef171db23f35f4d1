"""
测试计算上下文、缓存和参考协作者
"""

import asyncio

import pytest

from page_estimate.computed.context import (
    ComputationCache,
    ComputedContext,
    GatherContext,
    MetricComputationData,
)
from page_estimate.computed.provider import ArtifactProvider, PageArtifactProvider
from page_estimate.config.settings import Settings
from page_estimate.errors import GraphLoadError, MissingTimingError


class TestComputationCache:
    """测试异步记忆化缓存"""

    @pytest.mark.asyncio
    async def test_same_key_computed_once(self):
        cache = ComputationCache()
        key = {"doc": 1}
        calls = []

        async def factory():
            calls.append(1)
            return "value"

        assert await cache.memoize("stage", key, factory) == "value"
        assert await cache.memoize("stage", key, factory) == "value"
        assert len(calls) == 1
        assert ("stage", key) in cache

    @pytest.mark.asyncio
    async def test_keys_compared_by_identity(self):
        cache = ComputationCache()

        async def factory():
            return object()

        first = await cache.memoize("stage", {"a": 1}, factory)
        second = await cache.memoize("stage", {"a": 1}, factory)

        assert first is not second
        assert len(cache) == 2

    @pytest.mark.asyncio
    async def test_stages_are_separate(self):
        cache = ComputationCache()
        key = {}

        async def one():
            return 1

        async def two():
            return 2

        assert await cache.memoize("a", key, one) == 1
        assert await cache.memoize("b", key, two) == 2

    @pytest.mark.asyncio
    async def test_concurrent_requests_share_computation(self):
        cache = ComputationCache()
        key = {}
        calls = []

        async def factory():
            calls.append(1)
            await asyncio.sleep(0)
            return "shared"

        results = await asyncio.gather(*(cache.memoize("stage", key, factory) for _ in range(3)))

        assert results == ["shared"] * 3
        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_failures_are_cached(self):
        cache = ComputationCache()
        key = {}
        calls = []

        async def factory():
            calls.append(1)
            raise RuntimeError("boom")

        for _ in range(2):
            with pytest.raises(RuntimeError, match="boom"):
                await cache.memoize("stage", key, factory)
        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_clear(self):
        cache = ComputationCache()

        async def factory():
            return 1

        await cache.memoize("stage", {}, factory)
        cache.clear()
        assert len(cache) == 0


class TestMetricComputationData:
    """测试输入数据构建"""

    def test_from_document(self, page_document):
        settings = Settings(rtt_ms=40)
        data = MetricComputationData.from_document(page_document, settings)

        assert data.devtools_log is page_document["graph"]
        assert data.trace is page_document["trace"]
        assert data.gather_context == GatherContext("navigation")
        assert data.settings is settings
        assert data.simulator is None

    def test_gather_mode_optional(self, page_document):
        del page_document["gather_mode"]
        assert MetricComputationData.from_document(page_document).gather_context is None

    def test_graph_required(self):
        with pytest.raises(ValueError, match="graph"):
            MetricComputationData.from_document({"trace": {}})


class TestPageArtifactProvider:
    """测试基于页面文档的协作者"""

    @pytest.mark.asyncio
    async def test_graph_loaded_from_document(self, page_data):
        context = ComputedContext(provider=PageArtifactProvider())
        graph = await context.provider.request_graph(page_data, context)

        assert graph.id == "doc"
        assert sum(1 for _ in graph.traverse_generator()) == 9

    @pytest.mark.asyncio
    async def test_invalid_graph(self):
        data = MetricComputationData(trace={}, devtools_log={"nodes": []})
        context = ComputedContext(provider=PageArtifactProvider())

        with pytest.raises(GraphLoadError):
            await context.provider.request_graph(data, context)

    @pytest.mark.asyncio
    async def test_navigation_requires_fcp(self):
        context = ComputedContext(provider=PageArtifactProvider())
        trace = await context.provider.request_processed_trace({"timestamps": {"load": 1000}}, context)

        with pytest.raises(MissingTimingError):
            await context.provider.request_processed_navigation(trace, context)

    @pytest.mark.asyncio
    async def test_speedline(self, page_document):
        context = ComputedContext(provider=PageArtifactProvider())
        speedline = await context.provider.request_speedline(page_document["trace"], context)
        assert speedline.speed_index == 1500

    @pytest.mark.asyncio
    async def test_simulator_settings_precedence(self, page_document):
        provider = PageArtifactProvider(Settings(rtt_ms=80))
        context = ComputedContext(provider=provider)

        with_data_settings = MetricComputationData.from_document(page_document, Settings(rtt_ms=40))
        without_settings = MetricComputationData.from_document(page_document)

        assert (await provider.request_simulator(with_data_settings, context)).rtt == 40
        assert (await provider.request_simulator(without_settings, context)).rtt == 80

    @pytest.mark.asyncio
    async def test_default_speedline_unavailable(self, page_document):
        class NoSpeedline(ArtifactProvider):
            async def request_graph(self, data, context):
                return None

            async def request_processed_trace(self, trace, context):
                return None

            async def request_processed_navigation(self, processed_trace, context):
                return None

            async def request_simulator(self, data, context):
                return None

        provider = NoSpeedline()
        with pytest.raises(MissingTimingError):
            await provider.request_speedline({}, ComputedContext(provider=provider))
