from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from functools import lru_cache
from threading import RLock
from typing import Any, Dict, List, Mapping, Optional

from .errors import AlreadyExists
from .models import MUTABLE_TASK_FIELDS, TaskEntity, UserEntity
from .settings import get_settings
from .utils import MonotonicClock, new_id

logger = logging.getLogger(__name__)


def _task_changes(fields: Mapping[str, Any]) -> Dict[str, Any]:
    unknown = set(fields) - MUTABLE_TASK_FIELDS
    if unknown:
        raise ValueError(f"unsupported task fields: {sorted(unknown)}")
    return dict(fields)


# PUBLIC_INTERFACE
class Repository(ABC):
    """
    Abstract storage contract for users and tasks.

    Operations are scoped by identifier only; ownership checks belong to the
    caller (see ``guard``).
    """

    @abstractmethod
    def create_user(self, email: str, password_hash: str) -> UserEntity:
        """Create a user. Raise AlreadyExists if the email is taken."""

    @abstractmethod
    def get_user(self, user_id: str) -> Optional[UserEntity]:
        """Return a user by id, or None."""

    @abstractmethod
    def get_user_by_email(self, email: str) -> Optional[UserEntity]:
        """Return a user by exact email, or None."""

    @abstractmethod
    def create_task(self, owner_id: Optional[str], title: str, category: str, is_today: bool) -> TaskEntity:
        """Create and return a new, open task."""

    @abstractmethod
    def get_task(self, task_id: str) -> Optional[TaskEntity]:
        """Return a task by id, or None if not found."""

    @abstractmethod
    def list_tasks_by_owner(self, owner_id: str) -> List[TaskEntity]:
        """Return every task owned by ``owner_id``, in no particular order."""

    @abstractmethod
    def update_task(self, task_id: str, fields: Mapping[str, Any]) -> Optional[TaskEntity]:
        """
        Apply the given fields to a task and refresh ``updated_at``.
        Return the updated task or None if not found.
        """

    @abstractmethod
    def delete_task(self, task_id: str) -> bool:
        """Delete a task by id. Return True if deleted, False if not found."""


class InMemoryRepository(Repository):
    """
    Thread-safe in-memory repository suitable for testing and default runtime.
    """

    def __init__(self) -> None:
        self._lock = RLock()
        self._clock = MonotonicClock()
        self._users: dict[str, UserEntity] = {}
        self._tasks: dict[str, TaskEntity] = {}

    def create_user(self, email: str, password_hash: str) -> UserEntity:
        with self._lock:
            if any(u["email"] == email for u in self._users.values()):
                raise AlreadyExists("User already exists")
            user: UserEntity = {
                "id": new_id(),
                "email": email,
                "password_hash": password_hash,
                "created_at": self._clock.now(),
            }
            self._users[user["id"]] = user
            return user.copy()

    def get_user(self, user_id: str) -> Optional[UserEntity]:
        with self._lock:
            user = self._users.get(user_id)
            return None if user is None else user.copy()

    def get_user_by_email(self, email: str) -> Optional[UserEntity]:
        with self._lock:
            for user in self._users.values():
                if user["email"] == email:
                    return user.copy()
            return None

    def create_task(self, owner_id: Optional[str], title: str, category: str, is_today: bool) -> TaskEntity:
        now = self._clock.now()
        task: TaskEntity = {
            "id": new_id(),
            "user_id": owner_id,
            "title": title,
            "category": category,
            "is_today": is_today,
            "is_completed": False,
            "created_at": now,
            "updated_at": now,
        }
        with self._lock:
            self._tasks[task["id"]] = task
        return task.copy()

    def get_task(self, task_id: str) -> Optional[TaskEntity]:
        with self._lock:
            task = self._tasks.get(task_id)
            return None if task is None else task.copy()

    def list_tasks_by_owner(self, owner_id: str) -> List[TaskEntity]:
        with self._lock:
            # Return copies to avoid external mutation
            return [t.copy() for t in self._tasks.values() if t["user_id"] == owner_id]

    def update_task(self, task_id: str, fields: Mapping[str, Any]) -> Optional[TaskEntity]:
        changes = _task_changes(fields)
        with self._lock:
            existing = self._tasks.get(task_id)
            if existing is None:
                return None
            updated = existing.copy()
            updated.update(changes)  # type: ignore[typeddict-item]
            updated["updated_at"] = self._clock.now()
            self._tasks[task_id] = updated
            return updated.copy()

    def delete_task(self, task_id: str) -> bool:
        with self._lock:
            return self._tasks.pop(task_id, None) is not None


# PUBLIC_INTERFACE
@lru_cache(maxsize=1)
def get_repository() -> Repository:
    """
    Return the process-wide repository configured by settings.
    - memory: InMemoryRepository
    - sqlite: SQLiteRepository

    Cached so every request sees the same store; call
    ``get_repository.cache_clear()`` to rebuild it (tests do).
    """
    settings = get_settings()
    if settings.persistence_backend == "sqlite":
        from .db import SQLiteRepository

        logger.info("Using SQLite repository at %s", settings.sqlite_db_path)
        return SQLiteRepository(settings.sqlite_db_path)
    logger.info("Using in-memory repository")
    return InMemoryRepository()
