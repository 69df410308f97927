from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from .enums import TaskStatus


@dataclass(frozen=True)
class UserRef:
    id: str
    name: str = ""


@dataclass(frozen=True)
class UserEntity:
    id: str
    name: str
    email: str = ""

    def ref(self) -> UserRef:
        return UserRef(id=self.id, name=self.name)


@dataclass(frozen=True)
class TaskEntity:
    # status and category hold the raw wire value when it is not a known enum member
    id: str
    title: str
    description: str
    category: str
    status: str
    due_date: Optional[date]
    created_by: Optional[UserRef]
    assign_to: Optional[UserRef]
    created_at: Optional[datetime]
    updated_at: Optional[datetime] = None

    @property
    def creator_name(self) -> str:
        return self.created_by.name if self.created_by else ""

    @property
    def assignee_name(self) -> str:
        return self.assign_to.name if self.assign_to else ""


def is_overdue(task: TaskEntity, today: date) -> bool:
    if task.due_date is None:
        return False
    return task.due_date < today and task.status != TaskStatus.COMPLETED
