from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Optional

import requests

from taskboard.domain.entities import TaskEntity, UserEntity, UserRef
from taskboard.domain.enums import TaskCategory, TaskStatus
from taskboard.domain.errors import RequestRejected, TransportError

from .session import SessionContext

logger = logging.getLogger(__name__)


def _parse_datetime(value: Any) -> Optional[datetime]:
    if not value:
        return None
    try:
        return datetime.fromisoformat(str(value))
    except ValueError:
        logger.warning("Unparseable timestamp %r", value)
        return None


def _parse_date(value: Any) -> Optional[date]:
    parsed = _parse_datetime(value)
    return parsed.date() if parsed else None


def _to_user_ref(value: Any) -> Optional[UserRef]:
    if not value:
        return None
    if isinstance(value, dict):
        return UserRef(id=str(value.get("_id") or value.get("id") or ""), name=value.get("name") or "")
    return UserRef(id=str(value))


def _enum_or_raw(enum_type, value: Any) -> str:
    parsed = enum_type.parse(value)
    if parsed is not None:
        return parsed
    return "" if value is None else str(value)


def to_task_entity(data: dict) -> TaskEntity:
    return TaskEntity(
        id=str(data.get("_id") or data.get("id")),
        title=data.get("title") or "",
        description=data.get("description") or "",
        category=_enum_or_raw(TaskCategory, data.get("category")),
        status=_enum_or_raw(TaskStatus, data.get("status")),
        due_date=_parse_date(data.get("dueDate")),
        created_by=_to_user_ref(data.get("createdBy")),
        assign_to=_to_user_ref(data.get("assignTo")),
        created_at=_parse_datetime(data.get("createdAt")),
        updated_at=_parse_datetime(data.get("updatedAt")),
    )


def to_user_entity(data: dict) -> UserEntity:
    return UserEntity(
        id=str(data.get("_id") or data.get("id")),
        name=data.get("name") or "",
        email=data.get("email") or "",
    )


class TaskApiClient:
    """HTTP client for the task board backend."""

    def __init__(
        self,
        base_url: str,
        session: SessionContext,
        timeout: float = 10.0,
        http: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.session = session
        self.timeout = timeout
        self._http = http or requests.Session()

    def list_tasks(self) -> list[TaskEntity]:
        body = self._request("GET", "/tasks/getTasks")
        return [to_task_entity(item) for item in body.get("data") or []]

    def get_task(self, task_id: str) -> TaskEntity:
        body = self._request("GET", f"/tasks/getTask/{task_id}")
        return to_task_entity(body.get("data") or {})

    def register_task(self, payload: dict) -> str:
        return self._message(self._request("POST", "/tasks/register", payload))

    def update_task(self, task_id: str, payload: dict) -> str:
        return self._message(self._request("PATCH", f"/tasks/update/{task_id}", payload))

    def change_status(self, task_id: str, status: str) -> str:
        body = self._request("PATCH", f"/tasks/status/{task_id}", {"status": str(status)})
        return self._message(body)

    def delete_task(self, task_id: str) -> str:
        return self._message(self._request("DELETE", f"/tasks/delete/{task_id}"))

    def get_current_user(self) -> UserEntity:
        body = self._request("GET", "/users/getUser")
        return to_user_entity(body.get("data") or {})

    def list_users(self) -> list[UserEntity]:
        body = self._request("GET", "/users/getAllUsers")
        return [to_user_entity(item) for item in body.get("data") or []]

    def _request(self, method: str, path: str, payload: dict | None = None) -> dict:
        url = f"{self.base_url}{path}"
        logger.debug("%s %s", method, url)
        try:
            response = self._http.request(
                method,
                url,
                json=payload,
                headers=self.session.auth_headers(),
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.warning("%s %s failed: %s", method, url, exc)
            raise TransportError(str(exc) or "Network error") from exc

        try:
            body = response.json()
        except ValueError:
            body = None

        if not response.ok:
            message = body.get("message") if isinstance(body, dict) else None
            message = message or response.reason or f"Request failed with status {response.status_code}"
            logger.warning("%s %s rejected (%s): %s", method, url, response.status_code, message)
            raise RequestRejected(message, response.status_code)

        if not isinstance(body, dict):
            raise RequestRejected("Malformed response from server", response.status_code)
        return body

    @staticmethod
    def _message(body: dict) -> str:
        return body.get("message") or ""
