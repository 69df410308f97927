from __future__ import annotations

import logging
import queue

from taskboard.domain.entities import TaskEntity

from .notifications import Notifier
from .task_store import TaskStore, is_older

logger = logging.getLogger(__name__)


class RealtimePatchApplier:
    """Merges pushed task updates into the store."""

    def __init__(self, store: TaskStore, notifier: Notifier | None = None) -> None:
        self._store = store
        self._notifier = notifier or Notifier()

    def on_remote_update(self, task: TaskEntity) -> bool:
        current = self._store.get(task.id)
        if current is None:
            logger.debug("Ignoring update for unknown task %s", task.id)
            return False

        if is_older(task.updated_at, current.updated_at):
            logger.info("Dropping stale update for %s", task.id)
            return False

        # A pinned task keeps its optimistic status unless the update is newer.
        self._store.apply_patch(task)
        self._notifier.info("Task updated in real-time")
        return True

    def drain(self) -> int:
        applied = 0
        while True:
            try:
                task = self._store.inbox.get_nowait()
            except queue.Empty:
                return applied
            if self.on_remote_update(task):
                applied += 1
