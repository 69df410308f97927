from __future__ import annotations

import logging
import queue
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Callable, Iterable

from taskboard.domain.entities import TaskEntity

logger = logging.getLogger(__name__)

Listener = Callable[[], None]


def _as_utc(value: datetime) -> datetime:
    # Naive timestamps from the backend are UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def is_older(candidate: datetime | None, reference: datetime | None) -> bool:
    if candidate is None or reference is None:
        return False
    return _as_utc(candidate) < _as_utc(reference)


@dataclass(frozen=True)
class StatusWrite:
    task_id: str
    previous_status: str
    revision: int


@dataclass
class Pin:
    """An optimistic status write waiting for the server."""

    since: datetime
    status: str
    previous_status: str


class TaskStore:
    """Session-local mirror of the server's task list.

    Every write bumps a monotonic sequence number. ``revision(task_id)`` is the
    sequence of the last write touching that task.

    Tasks with an optimistic status write in flight are pinned until the write
    is confirmed or rolled back. Incoming data for a pinned task that is not
    newer than the pin keeps the optimistic status; the status it carried
    becomes the value a rollback restores.

    ``post`` is the only method safe to call from other threads: it queues a
    remote update on ``inbox`` for the UI thread to drain.
    """

    def __init__(self) -> None:
        self._tasks: list[TaskEntity] = []
        self._positions: dict[str, int] = {}
        self._revisions: dict[str, int] = {}
        self._pins: dict[str, Pin] = {}
        self._version = 0
        self._listeners: list[Listener] = []
        self.inbox: queue.SimpleQueue[TaskEntity] = queue.SimpleQueue()

    @property
    def tasks(self) -> list[TaskEntity]:
        return list(self._tasks)

    @property
    def version(self) -> int:
        return self._version

    def get(self, task_id: str) -> TaskEntity | None:
        position = self._positions.get(task_id)
        return self._tasks[position] if position is not None else None

    def revision(self, task_id: str) -> int | None:
        return self._revisions.get(task_id)

    def pin(self, task_id: str) -> Pin | None:
        return self._pins.get(task_id)

    def pinned_at(self, task_id: str) -> datetime | None:
        pin = self._pins.get(task_id)
        return pin.since if pin else None

    def replace(self, tasks: Iterable[TaskEntity]) -> None:
        self._version += 1
        self._tasks = []
        self._positions = {}
        self._revisions = {}
        for task in tasks:
            if task.id in self._positions:
                logger.warning("Duplicate task id %s in snapshot, keeping the first", task.id)
                continue
            self._positions[task.id] = len(self._tasks)
            self._revisions[task.id] = self._version
            self._tasks.append(self._hold_pinned_status(task))
        logger.debug("Store replaced with %s tasks (version %s)", len(self._tasks), self._version)
        self._notify()

    def apply_patch(self, task: TaskEntity) -> bool:
        if task.id not in self._positions:
            return False
        self._write(self._hold_pinned_status(task))
        self._notify()
        return True

    def set_status(self, task_id: str, status: str) -> StatusWrite | None:
        current = self.get(task_id)
        if current is None:
            return None
        revision = self._write(replace(current, status=status))
        self._pins[task_id] = Pin(
            since=datetime.now(timezone.utc),
            status=status,
            previous_status=current.status,
        )
        self._notify()
        return StatusWrite(task_id=task_id, previous_status=current.status, revision=revision)

    def restore_status(self, task_id: str) -> bool:
        pin = self._pins.pop(task_id, None)
        current = self.get(task_id)
        if pin is None or current is None or current.status != pin.status:
            logger.info("Not restoring %s: status superseded by newer data", task_id)
            return False
        self._write(replace(current, status=pin.previous_status))
        self._notify()
        return True

    def release(self, task_id: str) -> None:
        self._pins.pop(task_id, None)

    def post(self, task: TaskEntity) -> None:
        self.inbox.put(task)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _hold_pinned_status(self, task: TaskEntity) -> TaskEntity:
        pin = self._pins.get(task.id)
        if pin is None or is_older(pin.since, task.updated_at):
            return task
        if task.status != pin.status:
            pin.previous_status = task.status
        return replace(task, status=pin.status)

    def _write(self, task: TaskEntity) -> int:
        self._version += 1
        self._tasks[self._positions[task.id]] = task
        self._revisions[task.id] = self._version
        return self._version

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener()
