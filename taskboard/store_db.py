# PURPOSE: persistence operations for users and tasks (SQLAlchemy session in, rows out).
# Ownership decisions are not made here: single-task lookups return the row
# regardless of owner and callers run it through ownership.ensure_task_access().

from __future__ import annotations

import logging
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from .db_models import TaskDB, UserDB, now_utc
from .errors import ConflictError
from .queries import TaskFilter, apply_task_filter, task_ordering

logger = logging.getLogger("taskboard.store")

# Fields a partial update may clear by sending an explicit null
_NULLABLE_TASK_FIELDS = {"description", "due_date"}

# Largest id an INTEGER primary key can hold (64-bit signed)
MAX_ROW_ID = 2**63 - 1


# --- Session dependency ----------------------------------------------------


def get_db():
    """Yield a SQLAlchemy session (used as a FastAPI dependency)."""
    from .db import SessionLocal

    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


# --- Users -----------------------------------------------------------------


def get_user(db: Session, user_id: int) -> Optional[UserDB]:
    return db.get(UserDB, user_id)


def get_user_by_email(db: Session, email: str) -> Optional[UserDB]:
    return db.query(UserDB).filter(UserDB.email == email).one_or_none()


def create_user(db: Session, *, name: str, email: str, password_hash: str) -> UserDB:
    """Insert a user; raises ConflictError when the email is already taken."""
    if get_user_by_email(db, email) is not None:
        raise ConflictError()
    user = UserDB(name=name, email=email, password_hash=password_hash, created_at=now_utc())
    db.add(user)
    try:
        db.commit()
    except IntegrityError as err:
        # concurrent signup with the same email won the unique index
        db.rollback()
        raise ConflictError() from err
    db.refresh(user)
    return user


def update_user_profile(db: Session, user: UserDB, data) -> UserDB:
    """Apply name/bio/avatar from a ProfileUpdate; only fields sent by the client change."""
    changes = data.model_dump(exclude_unset=True)
    if changes.get("name") is not None:
        user.name = changes["name"]
    if "bio" in changes:
        user.bio = changes["bio"]
    if "avatar" in changes:
        user.avatar = changes["avatar"]
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


# --- Tasks -----------------------------------------------------------------


def list_tasks(db: Session, *, user_id: int, flt: TaskFilter) -> List[TaskDB]:
    """Return every task of ``user_id`` matching ``flt``, ordered by ``flt.sort``."""
    query = apply_task_filter(db.query(TaskDB), user_id=user_id, flt=flt)
    return query.order_by(*task_ordering(flt.sort)).all()


def list_status_priority(db: Session, *, user_id: int):
    """Return (status, priority) rows for all of the user's tasks."""
    return db.query(TaskDB.status, TaskDB.priority).filter(TaskDB.user_id == user_id).all()


def create_task(db: Session, data, *, user_id: int) -> TaskDB:
    """Create a task from a TaskCreate; the owner always comes from the session."""
    now = now_utc()
    row = TaskDB(
        user_id=user_id,
        title=data.title,
        description=data.description,
        status=data.status,
        priority=data.priority,
        due_date=data.due_date,
        created_at=now,
        updated_at=now,
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


def get_task(db: Session, task_id: int) -> Optional[TaskDB]:
    """Fetch a single task by id, whoever owns it."""
    if not 1 <= task_id <= MAX_ROW_ID:
        # cannot be a stored id (and would overflow the driver)
        return None
    return db.get(TaskDB, task_id)


def update_task(db: Session, row: TaskDB, data) -> TaskDB:
    """Partial update from a TaskUpdate; ``user_id`` is never touched."""
    for field, value in data.model_dump(exclude_unset=True).items():
        if value is None and field not in _NULLABLE_TASK_FIELDS:
            continue
        setattr(row, field, value)
    row.updated_at = now_utc()
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


def delete_task(db: Session, row: TaskDB) -> None:
    db.delete(row)
    db.commit()
