"""
Task state transitions.

A task moves freely through list membership (Today/Backlog) x completion
(open/done); every combination is valid. Each transition is authorized first
and then written as one store update, so a failed check leaves the record
untouched.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from pydantic import ValidationError

from .errors import InternalFailure, InvalidInput
from .guard import authorize
from .models import Category, TaskEntity
from .repositories import Repository
from .schemas import TaskCreate, TaskUpdate

logger = logging.getLogger(__name__)


def _build_update(**fields: Any) -> TaskUpdate:
    try:
        return TaskUpdate(**fields)
    except ValidationError as e:
        raise InvalidInput(str(e.errors()[0]["msg"])) from e


# PUBLIC_INTERFACE
def create_task(repo: Repository, owner_id: str, payload: TaskCreate) -> TaskEntity:
    """Create an open task owned by ``owner_id``. Not idempotent."""
    task = repo.create_task(owner_id, payload.title, Category(payload.category).value, payload.is_today)
    logger.info("User %s created task %s", owner_id, task["id"])
    return task


# PUBLIC_INTERFACE
def get_task(repo: Repository, user_id: str, task_id: str) -> TaskEntity:
    return authorize(user_id, task_id, repo)


# PUBLIC_INTERFACE
def apply_update(repo: Repository, user_id: str, task_id: str, payload: TaskUpdate) -> TaskEntity:
    """
    Apply a partial update (edit, move, completion) to a task the caller owns.

    Only supplied fields change. Moving a task to the list it is already in
    is accepted and leaves it as it was apart from ``updated_at``.

    Raises:
        NotFound / Forbidden: from the ownership check, before any write.
        InternalFailure: the task vanished between the check and the write.
    """
    authorize(user_id, task_id, repo)
    changes: Dict[str, Any] = payload.changes()
    updated = repo.update_task(task_id, changes)
    if updated is None:
        logger.error("Task %s disappeared during update", task_id)
        raise InternalFailure("Failed to update task")
    logger.info("User %s updated task %s (%s)", user_id, task_id, ", ".join(sorted(changes)) or "no fields")
    return updated


# PUBLIC_INTERFACE
def edit(
    repo: Repository,
    user_id: str,
    task_id: str,
    title: Optional[str] = None,
    category: Optional[str] = None,
) -> TaskEntity:
    """Change title and/or category; membership and completion are untouched."""
    fields: Dict[str, Any] = {}
    if title is not None:
        fields["title"] = title
    if category is not None:
        fields["category"] = category
    return apply_update(repo, user_id, task_id, _build_update(**fields))


# PUBLIC_INTERFACE
def set_completion(repo: Repository, user_id: str, task_id: str, completed: bool) -> TaskEntity:
    """Set the completion flag to an explicit value."""
    return apply_update(repo, user_id, task_id, _build_update(is_completed=completed))


# PUBLIC_INTERFACE
def move(repo: Repository, user_id: str, task_id: str, to_today: bool) -> TaskEntity:
    """Place the task in the Today list (True) or the Backlog (False)."""
    return apply_update(repo, user_id, task_id, _build_update(is_today=to_today))


# PUBLIC_INTERFACE
def delete_task(repo: Repository, user_id: str, task_id: str) -> None:
    """Delete a task the caller owns."""
    authorize(user_id, task_id, repo)
    if not repo.delete_task(task_id):
        logger.error("Task %s disappeared during delete", task_id)
        raise InternalFailure("Failed to delete task")
    logger.info("User %s deleted task %s", user_id, task_id)
