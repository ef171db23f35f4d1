"""
CLI命令实现

提供命令行界面的具体命令实现。
"""

import asyncio
import json
from typing import Optional, Tuple

import click
from tabulate import tabulate

from ..computed.context import ComputedContext, MetricComputationData
from ..computed.provider import PageArtifactProvider
from ..config.settings import LOG_LEVELS, Settings, get_settings
from ..estimator.base import PageMetricEstimator
from ..graph.loader import load_graph
from ..metrics.base import get_script_urls
from ..metrics.registry import metric_registry
from ..utils.formatters import format_results
from ..utils.logging import setup_logging


def _read_document(path: str) -> dict:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


@click.group()
@click.version_option(version="0.1.0", prog_name="page-estimate")
@click.option("--log-level", default=None, type=click.Choice(LOG_LEVELS, case_sensitive=False),
              help="日志级别，覆盖配置中的 log_level")
def cli(log_level: Optional[str]):
    """页面加载指标估算工具

    对依赖图分别进行乐观和悲观模拟，再按回归系数混合得到指标估算值。
    """
    setup_logging(get_settings(), log_level)


@cli.command()
@click.option("--input", "-i", "input_file", required=True, type=click.Path(exists=True, dir_okay=False),
              help="页面文档路径 (JSON)")
@click.option("--metric", "-m", "metrics", multiple=True, help="指标注册名，可重复指定")
@click.option("--rtt", type=float, help="往返时延(ms)")
@click.option("--throughput", type=float, help="下行吞吐量(Kbps)")
@click.option("--cpu-slowdown", type=float, help="CPU减速倍数")
@click.option("--output-file", type=click.Path(), help="输出文件路径")
@click.option("--format", "-f", default=None, type=click.Choice(["table", "json", "csv"]), help="输出格式")
@click.option("--verbose", "-v", is_flag=True, help="显示乐观/悲观估算明细")
def estimate(input_file: str, metrics: Tuple[str, ...], rtt: Optional[float], throughput: Optional[float],
             cpu_slowdown: Optional[float], output_file: Optional[str], format: Optional[str], verbose: bool):
    """估算页面加载指标"""
    try:
        overrides = {}
        if rtt is not None:
            overrides["rtt_ms"] = rtt
        if throughput is not None:
            overrides["throughput_kbps"] = throughput
        if cpu_slowdown is not None:
            overrides["cpu_slowdown_multiplier"] = cpu_slowdown
        settings = Settings(**{**get_settings().model_dump(), **overrides})

        data = MetricComputationData.from_document(_read_document(input_file), settings)
        context = ComputedContext(provider=PageArtifactProvider(settings))
        metric_names = list(metrics) or settings.default_metrics

        estimator = PageMetricEstimator()
        results = asyncio.run(estimator.estimate_all(data, context, metric_names))

        formatted_result = format_results(
            {name: result.to_dict() for name, result in results.items()},
            format or settings.default_output_format,
            verbose,
        )

        if output_file:
            with open(output_file, "w", encoding="utf-8") as f:
                f.write(formatted_result)
            click.echo(f"结果已保存到: {output_file}")
        else:
            click.echo(formatted_result)

    except Exception as e:
        click.echo(f"错误: {e}", err=True)
        raise click.Abort()


@cli.command()
@click.option("--rtt", type=float, default=None, help="计算系数使用的往返时延(ms)")
def list_metrics(rtt: Optional[float]):
    """列出支持的指标"""
    rtt_ms = rtt if rtt is not None else get_settings().rtt_ms

    data = []
    for metric_name in metric_registry.list_metrics():
        info = metric_registry.get_metric_info(metric_name, rtt_ms)
        data.append([
            metric_name,
            info["intercept"],
            info["optimistic"],
            info["pessimistic"],
            ", ".join(info["depends_on"]) or "-",
        ])

    headers = ["指标", "截距", "乐观系数", "悲观系数", "依赖指标"]
    click.echo(tabulate(data, headers=headers, tablefmt="grid", floatfmt=".3f"))


@cli.command()
@click.option("--input", "-i", "input_file", required=True, type=click.Path(exists=True, dir_okay=False),
              help="页面文档路径 (JSON)")
def script_urls(input_file: str):
    """列出依赖图中的脚本URL"""
    try:
        document = _read_document(input_file)
        graph = load_graph(document.get("graph", {}))
    except Exception as e:
        click.echo(f"错误: {e}", err=True)
        raise click.Abort()

    for url in sorted(get_script_urls(graph)):
        click.echo(url)


def main():
    """主程序入口"""
    cli()


if __name__ == "__main__":
    main()
