from __future__ import annotations

from enum import StrEnum


class TaskStatus(StrEnum):
    NOT_STARTED = "Not Started"
    IN_PROCESS = "In Process"
    COMPLETED = "Completed"

    @classmethod
    def parse(cls, value: object) -> TaskStatus | None:
        try:
            return cls(value)
        except ValueError:
            return None


class TaskCategory(StrEnum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @classmethod
    def parse(cls, value: object) -> TaskCategory | None:
        try:
            return cls(value)
        except ValueError:
            return None


CATEGORY_RANK = {
    TaskCategory.HIGH: 1,
    TaskCategory.MEDIUM: 2,
    TaskCategory.LOW: 3,
}

# Droppable column ids as used by the board.
COLUMN_STATUS = {
    "not-started": TaskStatus.NOT_STARTED,
    "in-process": TaskStatus.IN_PROCESS,
    "completed": TaskStatus.COMPLETED,
}

STATUS_COLUMN = {status: column for column, status in COLUMN_STATUS.items()}
