# PURPOSE: /api/tasks CRUD + stats, always scoped to the authenticated user.

import logging
from typing import Any

import pydantic
from fastapi import APIRouter, Body, Depends, Response, status
from sqlalchemy.orm import Session

from ..api.deps import get_task_filter
from ..api.errors import validation_errors_from_pydantic
from ..auth import get_current_user
from ..db_models import UserDB
from ..errors import ValidationError
from ..models import (
    StatsResponse,
    TaskCreate,
    TaskDeleteResponse,
    TaskListResponse,
    TaskMutationResponse,
    TaskResponse,
    TaskUpdate,
)
from ..ownership import ensure_task_access
from ..queries import TaskFilter
from ..stats import aggregate_task_stats
from ..store_db import (
    get_db,
    list_tasks as db_list_tasks,
    list_status_priority as db_list_status_priority,
    create_task as db_create_task,
    get_task as db_get_task,
    update_task as db_update_task,
    delete_task as db_delete_task,
)

logger = logging.getLogger("taskboard.tasks")

router = APIRouter(prefix="/tasks", tags=["tasks"])


@router.get("", response_model=TaskListResponse)
def list_tasks(
    flt: TaskFilter = Depends(get_task_filter),
    db: Session = Depends(get_db),
    user: UserDB = Depends(get_current_user),
):
    tasks = db_list_tasks(db, user_id=user.id, flt=flt)
    return {"success": True, "count": len(tasks), "tasks": tasks}


# Declared before /{task_id} so "stats" is not parsed as an id
@router.get("/stats", response_model=StatsResponse)
def task_stats(
    db: Session = Depends(get_db),
    user: UserDB = Depends(get_current_user),
):
    stats = aggregate_task_stats(db_list_status_priority(db, user_id=user.id))
    return {"success": True, "stats": stats}


@router.get("/{task_id}", response_model=TaskResponse)
def get_task(
    task_id: int,
    db: Session = Depends(get_db),
    user: UserDB = Depends(get_current_user),
):
    task = ensure_task_access(db_get_task(db, task_id), user.id, "access")
    return {"success": True, "task": task}


@router.post("", response_model=TaskMutationResponse, status_code=status.HTTP_201_CREATED)
def create_task(
    item: TaskCreate,
    response: Response,
    db: Session = Depends(get_db),
    user: UserDB = Depends(get_current_user),
):
    task = db_create_task(db, item, user_id=user.id)
    logger.info("task created task_id=%s user_id=%s", task.id, user.id)
    response.headers["Location"] = f"/api/tasks/{task.id}"
    return {"success": True, "message": "Task created successfully", "task": task}


@router.put("/{task_id}", response_model=TaskMutationResponse)
def update_task(
    task_id: int,
    payload: Any = Body(None, examples=[{"status": "completed"}]),
    db: Session = Depends(get_db),
    user: UserDB = Depends(get_current_user),
):
    # ownership first, then the body: a non-owner gets 403 whatever they send
    task = ensure_task_access(db_get_task(db, task_id), user.id, "update")
    try:
        changes = TaskUpdate.model_validate(payload)
    except pydantic.ValidationError as err:
        raise ValidationError(validation_errors_from_pydantic(err.errors())) from err
    task = db_update_task(db, task, changes)
    logger.info("task updated task_id=%s user_id=%s", task.id, user.id)
    return {"success": True, "message": "Task updated successfully", "task": task}


@router.delete("/{task_id}", response_model=TaskDeleteResponse)
def delete_task(
    task_id: int,
    db: Session = Depends(get_db),
    user: UserDB = Depends(get_current_user),
):
    task = ensure_task_access(db_get_task(db, task_id), user.id, "delete")
    db_delete_task(db, task)
    logger.info("task deleted task_id=%s user_id=%s", task_id, user.id)
    return {"success": True, "message": "Task deleted successfully", "data": {}}
