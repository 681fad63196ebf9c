from __future__ import annotations

import logging

from .errors import Forbidden, NotFound
from .models import TaskEntity
from .repositories import Repository

logger = logging.getLogger(__name__)


# PUBLIC_INTERFACE
def authorize(user_id: str, task_id: str, repo: Repository) -> TaskEntity:
    """
    Load a task on behalf of ``user_id`` and confirm the caller owns it.

    Missing tasks and tasks owned by someone else are reported differently
    (404 vs 403). Unowned legacy tasks belong to nobody and are forbidden.

    Raises:
        NotFound: no task with this id.
        Forbidden: the task exists but is not owned by ``user_id``.
    """
    task = repo.get_task(task_id)
    if task is None:
        raise NotFound("Task not found")
    if task["user_id"] is None or task["user_id"] != user_id:
        logger.warning("User %s denied access to task %s", user_id, task_id)
        raise Forbidden()
    return task
