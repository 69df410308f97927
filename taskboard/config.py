from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv


def _resolve_project_root() -> Path:
    if getattr(sys, "frozen", False):
        return Path(sys.executable).resolve().parent
    return Path(__file__).resolve().parents[1]


PROJECT_ROOT = _resolve_project_root()


def load_env() -> None:
    env_name = os.getenv("APP_ENV", "development")
    candidates = [Path.cwd(), PROJECT_ROOT]
    for base in candidates:
        env_path = base / ".env"
        if env_path.exists():
            load_dotenv(env_path)
            break

    for base in candidates:
        env_specific = base / f".env.{env_name}"
        if env_specific.exists():
            load_dotenv(env_specific, override=True)
            break


@dataclass(frozen=True)
class Settings:
    api_base_url: str
    api_token: str | None = None
    request_timeout: float = 10.0
    log_level: str = "INFO"
    log_dir: str = "logs"
    realtime_poll_ms: int = 500


def load_settings() -> Settings:
    load_env()

    api_base_url = os.getenv("TASKBOARD_API_URL", "").strip().rstrip("/")
    if not api_base_url:
        raise RuntimeError("TASKBOARD_API_URL is not set. Create a .env file with the API address.")

    return Settings(
        api_base_url=api_base_url,
        api_token=os.getenv("TASKBOARD_TOKEN", "").strip() or None,
        request_timeout=float(os.getenv("REQUEST_TIMEOUT", "10")),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        log_dir=os.getenv("LOG_DIR", "logs"),
        realtime_poll_ms=int(os.getenv("REALTIME_POLL_MS", "500")),
    )
