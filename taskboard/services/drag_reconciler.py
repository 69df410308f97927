from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum
from typing import Protocol

from taskboard.domain.enums import COLUMN_STATUS
from taskboard.domain.errors import TaskBoardError

from .notifications import Notifier
from .task_store import TaskStore

logger = logging.getLogger(__name__)


class StatusApi(Protocol):
    def change_status(self, task_id: str, status: str) -> str: ...


class DragState(StrEnum):
    IDLE = "idle"
    PENDING_COMMIT = "pending_commit"
    COMMITTED = "committed"
    ROLLED_BACK = "rolled_back"


@dataclass(frozen=True)
class DropEvent:
    task_id: str
    source: str | None
    destination: str | None


@dataclass
class PendingCommit:
    task_id: str
    previous_status: str
    target_status: str
    revision: int
    state: DragState = DragState.PENDING_COMMIT
    sent: bool = False
    error: TaskBoardError | None = None


class DragReconciler:
    """Turns a finished drag into an optimistic status change.

    ``begin`` and ``settle`` touch the store and must run on the UI thread.
    ``send`` only talks to the server and may run on a worker.
    """

    def __init__(self, store: TaskStore, api: StatusApi, notifier: Notifier | None = None) -> None:
        self._store = store
        self._api = api
        self._notifier = notifier or Notifier()

    def begin(self, drop: DropEvent) -> PendingCommit | None:
        target = COLUMN_STATUS.get(drop.destination) if drop.destination else None
        if target is None:
            return None

        task = self._store.get(drop.task_id)
        if task is None:
            logger.info("Ignoring drop of unknown task %s", drop.task_id)
            return None

        source = COLUMN_STATUS.get(drop.source) if drop.source else None
        if (source or task.status) == target:
            return None

        if self._store.pinned_at(drop.task_id) is not None:
            logger.info("Ignoring drop of %s: status change already in flight", drop.task_id)
            return None

        write = self._store.set_status(drop.task_id, target)
        if write is None:
            return None
        logger.info("Moving %s from %s to %s", drop.task_id, write.previous_status, target)
        return PendingCommit(
            task_id=drop.task_id,
            previous_status=write.previous_status,
            target_status=target,
            revision=write.revision,
        )

    def send(self, pending: PendingCommit) -> PendingCommit:
        if pending.sent:
            raise ValueError(f"Status change for {pending.task_id} was already sent")
        try:
            self._api.change_status(pending.task_id, pending.target_status)
        except TaskBoardError as exc:
            pending.error = exc
        pending.sent = True
        return pending

    def settle(self, pending: PendingCommit) -> DragState:
        if not pending.sent:
            raise ValueError(f"Status change for {pending.task_id} has not been sent")
        if pending.state is not DragState.PENDING_COMMIT:
            return pending.state

        if pending.error is None:
            self._store.release(pending.task_id)
            pending.state = DragState.COMMITTED
            self._notifier.success(f"Task moved to {pending.target_status}")
            return pending.state

        logger.warning("Status change for %s failed: %s", pending.task_id, pending.error)
        self._store.restore_status(pending.task_id)
        pending.state = DragState.ROLLED_BACK
        self._notifier.error(str(pending.error) or "Network error")
        return pending.state

    def on_drag_end(self, drop: DropEvent) -> DragState:
        pending = self.begin(drop)
        if pending is None:
            return DragState.IDLE
        return self.settle(self.send(pending))
