from collections import Counter
from typing import Iterable

from .models import TaskStats


def aggregate_task_stats(tasks: Iterable) -> TaskStats:
    """Fold tasks (anything with ``status`` and ``priority``) into per-bucket counts."""
    total = 0
    statuses: Counter[str] = Counter()
    priorities: Counter[str] = Counter()
    for task in tasks:
        total += 1
        statuses[task.status] += 1
        priorities[task.priority] += 1

    return TaskStats(
        total=total,
        pending=statuses["pending"],
        in_progress=statuses["in-progress"],
        completed=statuses["completed"],
        high_priority=priorities["high"],
        medium_priority=priorities["medium"],
        low_priority=priorities["low"],
    )
