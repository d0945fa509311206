# src/ai_todolist/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app (normal "settings layer").
- No secrets required at import time.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "AITODO"

NOTIFIER_DESKTOP = "desktop"
NOTIFIER_CONSOLE = "console"

load_dotenv(override=False)


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _first_env(*names: str, default: str | None = None) -> str | None:
    for n in names:
        v = os.getenv(n)
        if v is not None and v.strip() != "":
            return v
    return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_list(name: str, default: list[str]) -> list[str]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return list(default)
    return [p.strip() for p in raw.replace(",", " ").split() if p.strip()]


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Reminders ----
    notifier: str

    # ---- LLM (natural-language todo parsing) ----
    openai_api_key: str | None
    openai_base_url: str | None
    llm_models: list[str]
    llm_timeout_seconds: float

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    todos_db_path: Path

    @staticmethod
    def from_env() -> Settings:
        app_name = _env(_k("APP_NAME"), "AI TodoList")
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        notifier = _env(_k("NOTIFIER"), NOTIFIER_DESKTOP).strip().lower()
        if notifier not in (NOTIFIER_DESKTOP, NOTIFIER_CONSOLE):
            notifier = NOTIFIER_DESKTOP

        # Accept the plain OpenAI variable names too.
        openai_api_key = _first_env(_k("OPENAI_API_KEY"), "OPENAI_API_KEY", default=None)
        openai_base_url = _first_env(_k("OPENAI_BASE_URL"), "OPENAI_BASE_URL", default=None)
        llm_models = _env_list(_k("LLM_MODELS"), ["gpt-4.1-mini"])
        llm_timeout_seconds = _env_float(_k("LLM_TIMEOUT_SECONDS"), 20.0)

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/ai_todolist"))
        todos_db_path = _env_path(_k("TODOS_DB_PATH"), data_dir / "todos.sqlite3")

        return Settings(
            app_name=app_name,
            log_level=log_level,
            notifier=notifier,
            openai_api_key=openai_api_key,
            openai_base_url=openai_base_url,
            llm_models=llm_models,
            llm_timeout_seconds=llm_timeout_seconds,
            data_dir=data_dir,
            todos_db_path=todos_db_path,
        )


_SETTINGS: Settings | None = None


def get_settings() -> Settings:
    global _SETTINGS
    if _SETTINGS is None:
        _SETTINGS = Settings.from_env()
    return _SETTINGS
