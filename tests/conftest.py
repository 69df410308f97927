from __future__ import annotations

from datetime import datetime

import pytest

from taskboard.domain.entities import TaskEntity, UserRef
from taskboard.services.notifications import Notifier


class RecordingNotifier(Notifier):
    def __init__(self) -> None:
        self.messages: list[tuple[str, str]] = []

    def success(self, message: str) -> None:
        self.messages.append(("success", message))

    def info(self, message: str) -> None:
        self.messages.append(("info", message))

    def warning(self, message: str) -> None:
        self.messages.append(("warning", message))

    def error(self, message: str) -> None:
        self.messages.append(("error", message))

    def of(self, level: str) -> list[str]:
        return [text for kind, text in self.messages if kind == level]


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def make_task():
    def factory(task_id: str, **overrides) -> TaskEntity:
        data = {
            "id": task_id,
            "title": f"Task {task_id}",
            "description": "",
            "category": "medium",
            "status": "Not Started",
            "due_date": None,
            "created_by": UserRef(id="u1", name="Bob"),
            "assign_to": UserRef(id="u2", name="Carol"),
            "created_at": datetime(2026, 3, 1, 9, 30),
            "updated_at": None,
        }
        data.update(overrides)
        return TaskEntity(**data)

    return factory
