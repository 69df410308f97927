from __future__ import annotations

from dataclasses import dataclass


class TaskBoardError(Exception):
    """Base class for failures a board operation reports to the user."""


class TransportError(TaskBoardError):
    """The request never produced a server response."""


class RequestRejected(TaskBoardError):
    """The server answered with an error status."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class DraftValidationError(TaskBoardError):
    pass


@dataclass(frozen=True)
class DataIntegrityError:
    """A task whose status or category is outside the known values."""

    task_id: str
    field: str
    value: str

    def describe(self) -> str:
        return f"task {self.task_id} has unknown {self.field} {self.value!r}"
