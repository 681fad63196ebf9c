from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional, TypedDict


# PUBLIC_INTERFACE
class Category(str, Enum):
    """Closed set of task categories."""

    FAMILY = "FAMILY"
    HEALTH = "HEALTH"
    CAREER = "CAREER"
    ESSENTIALS = "ESSENTIALS"

    @property
    def label(self) -> str:
        return self.value.capitalize()


# PUBLIC_INTERFACE
class UserEntity(TypedDict):
    """
    A registered account.

    Fields:
    - id: Opaque unique identifier
    - email: Unique email, compared exactly as stored
    - password_hash: One-way bcrypt credential, never the plaintext
    - created_at: UTC registration timestamp
    """

    id: str
    email: str
    password_hash: str
    created_at: datetime


# PUBLIC_INTERFACE
class TaskEntity(TypedDict):
    """
    A task record as held by every storage backend.

    Fields:
    - id: Opaque unique identifier assigned at creation
    - user_id: Owning user; None only for legacy unowned rows
    - title: Non-empty trimmed title
    - category: One of the Category values
    - is_today: True for the Today list, False for the Backlog
    - is_completed: Completion flag
    - created_at: UTC creation timestamp
    - updated_at: UTC last modification timestamp
    """

    id: str
    user_id: Optional[str]
    title: str
    category: str
    is_today: bool
    is_completed: bool
    created_at: datetime
    updated_at: datetime


# Fields a partial task update may touch.
MUTABLE_TASK_FIELDS = frozenset({"title", "category", "is_today", "is_completed"})
