"""Pydantic schemas for board request/response validation.

Python attributes are snake_case; the JSON surface is camelCase
(``columnId``, ``dueDate``, ``createdAt``...).
"""

from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

from app.schemas.user import UserPublic


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


# Requêtes

class BoardCreate(CamelModel):
    title: Optional[str] = None
    description: Optional[str] = None


class BoardUpdate(CamelModel):
    title: Optional[str] = None
    description: Optional[str] = None


class ColumnCreate(CamelModel):
    title: Optional[str] = None


class ColumnUpdate(CamelModel):
    column_id: str
    title: Optional[str] = None


class ColumnDelete(CamelModel):
    column_id: str


class _TaskFields(CamelModel):
    title: Optional[str] = None
    description: Optional[str] = None
    assignee: Optional[str] = None
    due_date: Optional[datetime] = None
    priority: Optional[str] = None

    @field_validator("due_date", mode="before")
    @classmethod
    def blank_due_date(cls, value):
        # le client envoie "" quand la date est vidée
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("due_date")
    @classmethod
    def naive_utc_due_date(cls, value):
        if value is not None and value.tzinfo is not None:
            return value.astimezone(timezone.utc).replace(tzinfo=None)
        return value


class TaskCreate(_TaskFields):
    column_id: str


class TaskUpdate(_TaskFields):
    """Partial task update; ``status`` is the id of the target column."""

    task_id: str
    column_id: Optional[str] = None
    status: Optional[str] = None


class TaskDelete(CamelModel):
    column_id: str
    task_id: str


class MemberAdd(CamelModel):
    email: str
    role: Optional[str] = None


class MemberRoleUpdate(CamelModel):
    user_id: str
    role: str


class MemberRemove(CamelModel):
    user_id: str


# Réponses

class TaskResponse(CamelModel):
    id: str
    title: str
    description: Optional[str]
    assignee: Optional[str]
    due_date: Optional[datetime]
    priority: str
    created_at: datetime
    updated_at: datetime


class ColumnResponse(CamelModel):
    id: str
    title: str
    tasks: List[TaskResponse]
    created_at: datetime
    updated_at: datetime


class MemberResponse(CamelModel):
    user: UserPublic
    role: str


class BoardResponse(CamelModel):
    id: str
    title: str
    description: Optional[str]
    owner: UserPublic
    members: List[MemberResponse]
    columns: List[ColumnResponse]
    created_at: datetime
    updated_at: datetime


class MessageResponse(BaseModel):
    message: str
