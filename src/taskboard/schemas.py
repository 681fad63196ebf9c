from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .models import Category


def _clean_title(value: str) -> str:
    """
    Strip whitespace and require a non-empty result.
    """
    s = value.strip()
    if not s:
        raise ValueError("title must not be empty")
    return s


class _CamelModel(BaseModel):
    """Base model speaking camelCase on the wire while accepting snake_case too."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# PUBLIC_INTERFACE
class Credentials(_CamelModel):
    """
    Email/password pair used by register and login.

    Both fields default to empty so that missing values are reported by the
    identity service as invalid input rather than by schema validation.
    """

    model_config = ConfigDict(
        json_schema_extra={"example": {"email": "ada@example.com", "password": "s3cret!"}}
    )

    email: str = Field(default="", description="Account email, matched exactly as stored")
    password: str = Field(default="", description="Plaintext password (min 6 characters on register)")


# PUBLIC_INTERFACE
class UserOut(_CamelModel):
    """Public view of a user."""

    id: str = Field(..., description="Unique identifier of the user")
    email: str = Field(..., description="Account email")


# PUBLIC_INTERFACE
class AuthResponse(_CamelModel):
    """Envelope returned by register and login."""

    user: UserOut


# PUBLIC_INTERFACE
class TaskCreate(_CamelModel):
    """
    Schema for creating a new task.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {"title": "Buy milk", "category": "ESSENTIALS", "isToday": True}
        }
    )

    title: str = Field(..., description="Short title for the task")
    category: Category = Field(..., description="One of FAMILY, HEALTH, CAREER, ESSENTIALS")
    is_today: Optional[bool] = Field(
        default=True, description="True for the Today list, False for the Backlog; null means Today"
    )

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        return _clean_title(v)

    @field_validator("is_today")
    @classmethod
    def default_to_today(cls, v: Optional[bool]) -> bool:
        """Only an explicit false places a new task in the Backlog."""
        return True if v is None else v


# PUBLIC_INTERFACE
class TaskUpdate(_CamelModel):
    """
    Schema for a partial task update (edit, move, or completion toggle).
    All fields are optional; only provided fields will be updated. An explicit
    null is rejected since every task field is required on the record.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {"title": "Buy oat milk", "isCompleted": True}
        }
    )

    title: Optional[str] = Field(default=None, description="New title")
    category: Optional[Category] = Field(default=None, description="New category")
    is_today: Optional[bool] = Field(default=None, description="Target list membership")
    is_completed: Optional[bool] = Field(default=None, description="Target completion state")

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: Optional[str]) -> str:
        if v is None:
            raise ValueError("title may not be null")
        return _clean_title(v)

    @field_validator("category", "is_today", "is_completed")
    @classmethod
    def reject_null(cls, v: Any) -> Any:
        if v is None:
            raise ValueError("field may not be null")
        return v

    def changes(self) -> Dict[str, Any]:
        """Return only the fields the caller supplied, keyed by record field name."""
        data = self.model_dump(exclude_unset=True)
        if "category" in data:
            data["category"] = Category(data["category"]).value
        return data


# PUBLIC_INTERFACE
class TaskOut(_CamelModel):
    """
    Schema returned by the API for a task.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "5f0c3e0a9d4b4b1c8e2f7a6b5c4d3e2f",
                "userId": "0b1c2d3e4f5a6b7c8d9e0f1a2b3c4d5e",
                "title": "Buy milk",
                "category": "ESSENTIALS",
                "isToday": True,
                "isCompleted": False,
                "createdAt": "2025-01-25T10:15:30.123456Z",
                "updatedAt": "2025-01-25T10:15:30.123456Z",
            }
        }
    )

    id: str = Field(..., description="Unique identifier of the task")
    user_id: Optional[str] = Field(default=None, description="Owning user")
    title: str = Field(..., description="Short title for the task")
    category: Category = Field(..., description="Task category")
    is_today: bool = Field(..., description="True for the Today list, False for the Backlog")
    is_completed: bool = Field(..., description="Completion status flag")
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")


# PUBLIC_INTERFACE
class TaskBoardOut(_CamelModel):
    """The two task lists of a user plus the overall count."""

    today: List[TaskOut] = Field(..., description="Tasks in the Today list")
    backlog: List[TaskOut] = Field(..., description="Tasks in the Backlog (everything else)")
    total: int = Field(..., description="Total number of tasks across both lists")


# PUBLIC_INTERFACE
class SuccessOut(_CamelModel):
    success: bool = True


# PUBLIC_INTERFACE
class CategoryOut(_CamelModel):
    value: Category
    label: str
