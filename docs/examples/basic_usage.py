#!/usr/bin/env python3
"""
Page-Estimate 基本使用示例

演示如何从页面文档估算加载指标。
"""

import asyncio
import json
import os
import sys

# 添加项目根目录到路径
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', '..'))

from page_estimate import (
    ComputedContext,
    MetricComputationData,
    PageArtifactProvider,
    PageMetricEstimator,
    metric_registry,
)
from page_estimate.config.settings import Settings

SAMPLE_PAGE = os.path.join(os.path.dirname(__file__), "sample_page.json")


async def run(document):
    estimator = PageMetricEstimator()

    for rtt_ms in (40, 150, 300):
        settings = Settings(rtt_ms=rtt_ms)
        data = MetricComputationData.from_document(document, settings)
        # 每次页面加载使用独立的上下文，缓存随上下文释放
        context = ComputedContext(provider=PageArtifactProvider(settings))

        results = await estimator.estimate_all(data, context)

        print(f"往返时延 {rtt_ms} ms:")
        for name, result in results.items():
            print(f"  {name}: {result.timing:.0f} ms "
                  f"(乐观 {result.optimistic_estimate.time_in_ms:.0f} / "
                  f"悲观 {result.pessimistic_estimate.time_in_ms:.0f})")
        print()


def main():
    """主函数"""
    print("=== Page-Estimate 基本使用示例 ===\n")

    print("支持的指标:")
    for name in metric_registry.list_metrics():
        print(f"  - {name}")
    print()

    with open(SAMPLE_PAGE, "r", encoding="utf-8") as f:
        document = json.load(f)

    try:
        asyncio.run(run(document))
    except Exception as e:
        print(f"估算失败: {e}")

    print("=== 示例完成 ===")


if __name__ == "__main__":
    main()
