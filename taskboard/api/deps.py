from fastapi import Query

from ..queries import SORT_OPTIONS, TaskFilter, build_task_filter

_SORT_HELP = "One of: " + ", ".join(SORT_OPTIONS) + " (anything else means newest)"


def get_task_filter(
    status: str | None = Query(None, description="Exact status match"),
    priority: str | None = Query(None, description="Exact priority match"),
    search: str | None = Query(None, description="Case-insensitive match on title or description"),
    sort: str | None = Query(None, description=_SORT_HELP),
) -> TaskFilter:
    """Collect list query parameters into a TaskFilter.

    Values are not rejected here: an unknown status/priority simply matches
    nothing and an unknown sort falls back to newest.
    """
    return build_task_filter(status=status, priority=priority, search=search, sort=sort)
