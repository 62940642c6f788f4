import logging
from enum import Enum

from .db_models import TaskDB
from .errors import ForbiddenError, NotFoundError

logger = logging.getLogger("taskboard.ownership")


class Access(str, Enum):
    ALLOWED = "allowed"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"


def decide_access(task: TaskDB | None, user_id: int) -> Access:
    """Existence is checked before ownership, so a missing id is always NOT_FOUND."""
    if task is None:
        return Access.NOT_FOUND
    if task.user_id != user_id:
        return Access.FORBIDDEN
    return Access.ALLOWED


def ensure_task_access(task: TaskDB | None, user_id: int, action: str = "access") -> TaskDB:
    """Return ``task`` if ``user_id`` owns it; raise NotFoundError/ForbiddenError otherwise."""
    decision = decide_access(task, user_id)
    if decision is Access.NOT_FOUND:
        raise NotFoundError("Task not found")
    if decision is Access.FORBIDDEN:
        logger.warning("forbidden task access action=%s task_id=%s user_id=%s", action, task.id, user_id)
        raise ForbiddenError(f"Not authorized to {action} this task")
    return task
