"""
Utility functions for parallel shard search
"""
from typing import List
import psutil


def default_worker_count() -> int:
    """
    Number of workers to use when none is configured

    Returns:
        Logical CPU count (hardware threads), at least 1
    """
    return psutil.cpu_count(logical=True) or 1


def format_file_size(size_bytes: int) -> str:
    """
    Format file size in human readable format

    Args:
        size_bytes: Size in bytes

    Returns:
        Formatted size string
    """
    if size_bytes == 0:
        return "0 B"

    size_names = ["B", "KB", "MB", "GB", "TB"]
    i = 0

    while size_bytes >= 1024 and i < len(size_names) - 1:
        size_bytes /= 1024.0
        i += 1

    return f"{size_bytes:.1f} {size_names[i]}"


def format_plan(plan) -> List[str]:
    """
    Render a shard plan as table rows

    Args:
        plan: ShardPlan to render

    Returns:
        One line per worker plus a header
    """
    lines = [f"{'rank':>6} {'start':>12} {'size':>12} {'claimed':>25}"]
    for rank in range(plan.workers):
        first, end = plan.claimed_range(rank)
        lines.append(
            f"{rank:>6} {plan.starts[rank]:>12} {plan.sizes[rank]:>12} {f'[{first}, {end})':>25}"
        )
    return lines
