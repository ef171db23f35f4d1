"""
数据格式化工具

提供估算结果的表格、JSON、CSV 格式化功能。
"""

import csv
import io
import json
from typing import Any, Dict, List
from tabulate import tabulate

COLUMNS = ["timing_ms", "optimistic_ms", "pessimistic_ms", "optimistic_graph_nodes", "pessimistic_graph_nodes"]


def format_results(results: Dict[str, Dict[str, Any]], format_type: str = "table",
                   verbose: bool = False) -> str:
    """
    格式化估算结果

    Args:
        results: 指标注册名到结果字典的映射（见 MetricResult.to_dict）
        format_type: 输出格式 ("table", "json", "csv")
        verbose: 是否显示乐观/悲观估算明细

    Returns:
        格式化后的字符串
    """
    if format_type == "json":
        return json.dumps(results, indent=2, ensure_ascii=False)

    elif format_type == "csv":
        return format_results_csv(results)

    else:  # table format
        return format_results_table(results, verbose)


def format_results_table(results: Dict[str, Dict[str, Any]], verbose: bool = False) -> str:
    """格式化为表格形式"""
    lines = []
    lines.append("=== 页面指标估算结果 ===\n")

    rows: List[List[Any]] = []
    for metric_name, result in results.items():
        row = [metric_name, f"{result['timing_ms']:.0f} ms"]
        if verbose:
            row.extend([
                f"{result['optimistic_ms']:.0f} ms",
                f"{result['pessimistic_ms']:.0f} ms",
                f"{result['optimistic_graph_nodes']} / {result['pessimistic_graph_nodes']}",
            ])
        rows.append(row)

    headers = ["指标", "估算值"]
    if verbose:
        headers.extend(["乐观估算", "悲观估算", "节点数(乐观/悲观)"])

    lines.append(tabulate(rows, headers=headers, tablefmt="grid"))
    return "\n".join(lines)


def format_results_csv(results: Dict[str, Dict[str, Any]]) -> str:
    """格式化为CSV形式"""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(["metric"] + COLUMNS)
    for metric_name, result in results.items():
        writer.writerow([metric_name] + [result[column] for column in COLUMNS])
    return buffer.getvalue()
