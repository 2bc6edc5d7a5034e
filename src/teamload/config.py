"""Application configuration objects and helpers."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool = False) -> bool:
    """Interpret environment variable values as booleans."""

    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_positive_int(name: str, default: int) -> int:
    """Read a positive integer from the environment."""

    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc
    if value < 1:
        raise ValueError(f"{name} must be >= 1, got {value}")
    return value


class BaseConfig:
    """Base configuration shared across environments."""

    APP_NAME = "Teamload"
    DB_FILENAME = "teamload.db"

    def __init__(self) -> None:
        self.DATA_DIR = self._resolve_data_dir()
        self.DEV_MODE = _env_bool("TEAMLOAD_DEV_MODE", default=True)
        self.DATABASE_URL = os.getenv("TEAMLOAD_DATABASE_URL", self._build_sqlite_url())
        self.WEEK_COUNT = _env_positive_int("TEAMLOAD_WEEK_COUNT", 4)
        self.SYNC_WORKERS = _env_positive_int("TEAMLOAD_SYNC_WORKERS", 1)
        self.LOG_LEVEL = os.getenv("TEAMLOAD_LOG_LEVEL", "INFO").strip().upper() or "INFO"

    def _resolve_data_dir(self) -> Path:
        """Return the directory where the SQLite file and logs live."""

        data_root = os.getenv("TEAMLOAD_DATA_DIR", "instance")
        path = Path(data_root).expanduser().resolve()
        path.mkdir(parents=True, exist_ok=True)
        return path

    def _build_sqlite_url(self) -> str:
        db_path = self.DATA_DIR / self.DB_FILENAME
        return f"sqlite:///{db_path}"

    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")

    def sqlalchemy_engine_options(self) -> dict[str, Any]:
        """Expose engine kwargs for SQLModel to consume."""

        engine_options: dict[str, Any] = {}
        if self.is_sqlite:
            # Background writer threads share the engine with the caller.
            engine_options["connect_args"] = {"check_same_thread": False}
        return engine_options


class DevConfig(BaseConfig):
    """Development configuration using local SQLite."""

    DEBUG = True
    TESTING = False


class TestConfig(BaseConfig):
    """Configuration pinned to a throwaway directory."""

    __test__ = False  # keep pytest from collecting this class

    DEBUG = False
    TESTING = True

    def __init__(self, data_dir: Path | str) -> None:
        self._data_dir = Path(data_dir)
        super().__init__()
        self.DEV_MODE = False
        self.DATABASE_URL = self._build_sqlite_url()
        self.SYNC_WORKERS = 1

    def _resolve_data_dir(self) -> Path:
        path = self._data_dir.expanduser().resolve()
        path.mkdir(parents=True, exist_ok=True)
        return path
