from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from .entities import TaskEntity


@dataclass(frozen=True)
class TaskFilters:
    search: str | None = None
    created_on: Optional[date] = None

    @property
    def term(self) -> str:
        return (self.search or "").strip().lower()

    def is_empty(self) -> bool:
        return not self.term and self.created_on is None

    def matches(self, task: TaskEntity) -> bool:
        if self.created_on is not None:
            if task.created_at is None or task.created_at.date() != self.created_on:
                return False

        term = self.term
        if not term:
            return True
        fields = (task.title, task.description, task.creator_name, task.assignee_name)
        return any(term in (value or "").lower() for value in fields)
