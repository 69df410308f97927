from __future__ import annotations

from dataclasses import dataclass

from taskboard.config import Settings


@dataclass(frozen=True)
class SessionContext:
    token: str

    def auth_headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"}


def session_from_settings(settings: Settings) -> SessionContext | None:
    if not settings.api_token:
        return None
    return SessionContext(token=settings.api_token)
