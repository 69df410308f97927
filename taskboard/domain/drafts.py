from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from .enums import TaskCategory, TaskStatus
from .errors import DraftValidationError


@dataclass(frozen=True)
class TaskDraft:
    title: str
    description: str
    category: str = TaskCategory.MEDIUM.value
    assign_to: str | None = None
    due_date: Optional[date] = None
    status: str | None = None

    def validate(self, editing: bool = False) -> None:
        if not self.title.strip():
            raise DraftValidationError("Title is required")
        if not self.description.strip():
            raise DraftValidationError("Description is required")
        if TaskCategory.parse(self.category) is None:
            raise DraftValidationError(f"Unknown category: {self.category}")
        if not self.assign_to:
            raise DraftValidationError("Select a user to assign the task to")
        if editing and TaskStatus.parse(self.status) is None:
            raise DraftValidationError(f"Unknown status: {self.status}")

    def to_payload(self, editing: bool = False) -> dict:
        payload = {
            "title": self.title.strip(),
            "description": self.description.strip(),
            "category": str(self.category),
            "assignTo": self.assign_to,
            "dueDate": self.due_date.isoformat() if self.due_date else None,
        }
        if editing:
            payload["status"] = str(self.status)
        return payload
