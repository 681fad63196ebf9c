from __future__ import annotations

from fastapi import APIRouter, Depends, status

from .. import mutations
from ..auth import get_current_user_id
from ..models import TaskEntity
from ..projection import project
from ..repositories import Repository, get_repository
from ..schemas import SuccessOut, TaskBoardOut, TaskCreate, TaskOut, TaskUpdate

router = APIRouter(
    prefix="/tasks",
    tags=["tasks"],
)

_AUTH_RESPONSES = {401: {"description": "Not authenticated"}}
_TASK_RESPONSES = {
    **_AUTH_RESPONSES,
    403: {"description": "Task belongs to another user"},
    404: {"description": "Task not found"},
}


def _get_repo(repo: Repository = Depends(get_repository)) -> Repository:
    """
    Dependency wrapper for repository to keep signatures clean.
    """
    return repo


def _out(task: TaskEntity) -> TaskOut:
    return TaskOut(**task)  # type: ignore[arg-type]


# PUBLIC_INTERFACE
@router.get(
    "",
    response_model=TaskBoardOut,
    summary="List Tasks",
    description=(
        "Return the caller's tasks split into the Today list and the Backlog.\n\n"
        "Within each list open tasks come first, completed tasks last; each group "
        "is ordered newest first."
    ),
    responses={200: {"description": "Lists retrieved"}, **_AUTH_RESPONSES},
)
def list_tasks(
    user_id: str = Depends(get_current_user_id),
    repo: Repository = Depends(_get_repo),
) -> TaskBoardOut:
    board = project(repo.list_tasks_by_owner(user_id))
    return TaskBoardOut(
        today=[_out(t) for t in board.today],
        backlog=[_out(t) for t in board.backlog],
        total=board.total,
    )


# PUBLIC_INTERFACE
@router.post(
    "",
    response_model=TaskOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create Task",
    description="Create a task. It goes to the Today list unless isToday is false.",
    responses={
        201: {"description": "Task created"},
        400: {"description": "Missing or invalid title/category"},
        **_AUTH_RESPONSES,
    },
)
def create_task(
    payload: TaskCreate,
    user_id: str = Depends(get_current_user_id),
    repo: Repository = Depends(_get_repo),
) -> TaskOut:
    return _out(mutations.create_task(repo, user_id, payload))


# PUBLIC_INTERFACE
@router.get(
    "/{task_id}",
    response_model=TaskOut,
    summary="Get Task",
    description="Get a single task owned by the caller.",
    responses={200: {"description": "Task found"}, **_TASK_RESPONSES},
)
def get_task(
    task_id: str,
    user_id: str = Depends(get_current_user_id),
    repo: Repository = Depends(_get_repo),
) -> TaskOut:
    return _out(mutations.get_task(repo, user_id, task_id))


# PUBLIC_INTERFACE
@router.patch(
    "/{task_id}",
    response_model=TaskOut,
    summary="Update Task",
    description=(
        "Partially update a task: edit title/category, move between lists (isToday), "
        "or set completion (isCompleted). Only provided fields change."
    ),
    responses={
        200: {"description": "Task updated"},
        400: {"description": "Invalid field value"},
        **_TASK_RESPONSES,
    },
)
def patch_task(
    task_id: str,
    payload: TaskUpdate,
    user_id: str = Depends(get_current_user_id),
    repo: Repository = Depends(_get_repo),
) -> TaskOut:
    return _out(mutations.apply_update(repo, user_id, task_id, payload))


# PUBLIC_INTERFACE
@router.delete(
    "/{task_id}",
    response_model=SuccessOut,
    summary="Delete Task",
    description="Delete a task owned by the caller.",
    responses={200: {"description": "Task deleted"}, **_TASK_RESPONSES},
)
def delete_task(
    task_id: str,
    user_id: str = Depends(get_current_user_id),
    repo: Repository = Depends(_get_repo),
) -> SuccessOut:
    mutations.delete_task(repo, user_id, task_id)
    return SuccessOut(success=True)
