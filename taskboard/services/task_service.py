from __future__ import annotations

import logging

from taskboard.domain.drafts import TaskDraft
from taskboard.domain.entities import TaskEntity, UserEntity
from taskboard.domain.enums import TaskStatus
from taskboard.domain.errors import DraftValidationError, TaskBoardError
from taskboard.infra.api import TaskApiClient

from .notifications import Notifier
from .task_store import TaskStore

logger = logging.getLogger(__name__)


class TaskService:
    def __init__(self, api: TaskApiClient, store: TaskStore, notifier: Notifier | None = None) -> None:
        self._api = api
        self._store = store
        self._notifier = notifier or Notifier()
        self.current_user: UserEntity | None = None
        self.users: list[UserEntity] = []

    def refresh(self) -> bool:
        try:
            tasks = self._api.list_tasks()
        except TaskBoardError as exc:
            self._report(exc)
            return False
        self._store.replace(tasks)
        return True

    def load_session(self) -> bool:
        try:
            self.current_user = self._api.get_current_user()
            self.users = self._api.list_users()
        except TaskBoardError as exc:
            self._report(exc)
            return False
        return True

    def get_task(self, task_id: str) -> TaskEntity | None:
        try:
            return self._api.get_task(task_id)
        except TaskBoardError as exc:
            self._report(exc)
            return None

    def new_draft(self) -> TaskDraft:
        assignee = self.current_user.id if self.current_user else None
        return TaskDraft(title="", description="", assign_to=assignee)

    def draft_from_task(self, task: TaskEntity) -> TaskDraft:
        return TaskDraft(
            title=task.title,
            description=task.description,
            category=task.category,
            assign_to=task.assign_to.id if task.assign_to else None,
            due_date=task.due_date,
            status=task.status,
        )

    def create_task(self, draft: TaskDraft) -> bool:
        return self._mutate(lambda: self._api.register_task(self._payload(draft, editing=False)))

    def update_task(self, task_id: str, draft: TaskDraft) -> bool:
        return self._mutate(lambda: self._api.update_task(task_id, self._payload(draft, editing=True)))

    def change_status(self, task_id: str, status: TaskStatus | str) -> bool:
        return self._mutate(lambda: self._api.change_status(task_id, str(status)))

    def delete_task(self, task_id: str) -> bool:
        return self._mutate(lambda: self._api.delete_task(task_id))

    def is_current_user(self, user_id: str | None) -> bool:
        return bool(user_id) and self.current_user is not None and self.current_user.id == user_id

    @staticmethod
    def _payload(draft: TaskDraft, editing: bool) -> dict:
        draft.validate(editing=editing)
        return draft.to_payload(editing=editing)

    def _mutate(self, call) -> bool:
        try:
            message = call()
        except TaskBoardError as exc:
            self._report(exc)
            return False
        self._notifier.success(message or "Done")
        self.refresh()
        return True

    def _report(self, exc: TaskBoardError) -> None:
        if isinstance(exc, DraftValidationError):
            logger.info("Rejected task draft: %s", exc)
        else:
            logger.warning("Task API call failed: %s", exc)
        self._notifier.error(str(exc) or "Network error")
