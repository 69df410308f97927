from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Iterable, Sequence

from taskboard.domain.entities import TaskEntity
from taskboard.domain.enums import CATEGORY_RANK, TaskCategory, TaskStatus
from taskboard.domain.errors import DataIntegrityError
from taskboard.domain.filters import TaskFilters

from .notifications import Notifier
from .task_store import TaskStore

logger = logging.getLogger(__name__)

UNKNOWN_CATEGORY_RANK = len(CATEGORY_RANK) + 1


@dataclass(frozen=True)
class BoardColumns:
    not_started: list[TaskEntity] = field(default_factory=list)
    in_process: list[TaskEntity] = field(default_factory=list)
    completed: list[TaskEntity] = field(default_factory=list)
    rejected: list[DataIntegrityError] = field(default_factory=list)

    def column(self, status: TaskStatus) -> list[TaskEntity]:
        return {
            TaskStatus.NOT_STARTED: self.not_started,
            TaskStatus.IN_PROCESS: self.in_process,
            TaskStatus.COMPLETED: self.completed,
        }[status]


def compute_visible(tasks: Iterable[TaskEntity], filters: TaskFilters | None = None) -> list[TaskEntity]:
    if filters is None or filters.is_empty():
        return list(tasks)
    return [task for task in tasks if filters.matches(task)]


def category_rank(task: TaskEntity) -> int:
    category = TaskCategory.parse(task.category)
    if category is None:
        return UNKNOWN_CATEGORY_RANK
    return CATEGORY_RANK[category]


def sort_by_category(tasks: Iterable[TaskEntity]) -> list[TaskEntity]:
    # sorted() is stable: equal ranks keep their input order
    return sorted(tasks, key=category_rank)


def partition(tasks: Sequence[TaskEntity]) -> BoardColumns:
    columns = BoardColumns()
    for task in sort_by_category(tasks):
        status = TaskStatus.parse(task.status)
        issues = []
        if TaskCategory.parse(task.category) is None:
            issues.append(DataIntegrityError(task.id, "category", str(task.category)))
        if status is None:
            issues.append(DataIntegrityError(task.id, "status", str(task.status)))
        if issues:
            columns.rejected.extend(issues)
            continue
        columns.column(status).append(task)
    return columns


def derive_board(tasks: Iterable[TaskEntity], filters: TaskFilters | None = None) -> BoardColumns:
    return partition(compute_visible(tasks, filters))


class BoardView:
    """Keeps the three columns derived from the store and the active filters."""

    def __init__(self, store: TaskStore, notifier: Notifier | None = None) -> None:
        self._store = store
        self._notifier = notifier or Notifier()
        self._filters = TaskFilters()
        self._columns = BoardColumns()
        self._reported: set[DataIntegrityError] = set()
        self._listeners: list[Callable[[BoardColumns], None]] = []
        self._unsubscribe = store.subscribe(self.refresh)
        self.refresh()

    @property
    def filters(self) -> TaskFilters:
        return self._filters

    @property
    def columns(self) -> BoardColumns:
        return self._columns

    def set_filters(self, filters: TaskFilters) -> None:
        if filters == self._filters:
            return
        self._filters = filters
        self.refresh()

    def subscribe(self, listener: Callable[[BoardColumns], None]) -> None:
        self._listeners.append(listener)

    def close(self) -> None:
        self._unsubscribe()
        self._listeners.clear()

    def refresh(self) -> None:
        self._columns = derive_board(self._store.tasks, self._filters)
        for issue in self._columns.rejected:
            if issue in self._reported:
                continue
            self._reported.add(issue)
            logger.warning("Excluded from board: %s", issue.describe())
            self._notifier.warning(f"Skipped a task with invalid data ({issue.describe()})")
        for listener in list(self._listeners):
            listener(self._columns)
