"""Task query construction: per-user scoping, filters and sort orders.

A request's ``status``/``priority``/``search``/``sort`` parameters are first
normalized into a :class:`TaskFilter`, then applied to a ``TaskDB`` query.
Nothing here touches the session; ``store_db`` executes the result.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal, get_args

from sqlalchemy import case, or_

from .db_models import TaskDB

SortOption = Literal["newest", "oldest", "priority", "dueDate"]
SORT_OPTIONS: tuple[str, ...] = get_args(SortOption)
DEFAULT_SORT: SortOption = "newest"

# Ordinal used by sort=priority (higher first)
PRIORITY_RANK = {"high": 3, "medium": 2, "low": 1}


@dataclass(frozen=True)
class TaskFilter:
    status: str | None = None
    priority: str | None = None
    search: str | None = None
    sort: SortOption = DEFAULT_SORT


def resolve_sort(token: str | None) -> SortOption:
    """Map a raw ``sort`` token to a sort option; unknown or missing means newest."""
    if token in SORT_OPTIONS:
        return token  # type: ignore[return-value]
    return DEFAULT_SORT


def _blank_to_none(value: str | None) -> str | None:
    if value is None or value == "":
        return None
    return value


def build_task_filter(
    status: str | None = None,
    priority: str | None = None,
    search: str | None = None,
    sort: str | None = None,
) -> TaskFilter:
    """Normalize raw query values. Status/priority are not checked against their enums."""
    return TaskFilter(
        status=_blank_to_none(status),
        priority=_blank_to_none(priority),
        search=_blank_to_none(search),
        sort=resolve_sort(sort),
    )


def apply_task_filter(query, *, user_id: int, flt: TaskFilter):
    """Restrict ``query`` to the user's tasks matching every filter in ``flt``."""
    query = query.filter(TaskDB.user_id == user_id)
    if flt.status is not None:
        query = query.filter(TaskDB.status == flt.status)
    if flt.priority is not None:
        query = query.filter(TaskDB.priority == flt.priority)
    if flt.search is not None:
        query = query.filter(
            or_(
                TaskDB.title.icontains(flt.search, autoescape=True),
                TaskDB.description.icontains(flt.search, autoescape=True),
            )
        )
    return query


def task_ordering(sort: SortOption) -> list[Any]:
    """ORDER BY clauses for a sort option; ties fall back to id order."""
    if sort == "oldest":
        primary = [TaskDB.created_at.asc()]
    elif sort == "priority":
        rank = case(
            *((TaskDB.priority == name, value) for name, value in PRIORITY_RANK.items()),
            else_=0,
        )
        primary = [rank.desc()]
    elif sort == "dueDate":
        # tasks without a due date go last
        primary = [TaskDB.due_date.is_(None).asc(), TaskDB.due_date.asc()]
    else:
        return [TaskDB.created_at.desc(), TaskDB.id.desc()]
    return [*primary, TaskDB.id.asc()]
