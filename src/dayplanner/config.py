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


def _env_int(name: str, default: int) -> int:
    """Read a positive integer from the environment, falling back to ``default``."""

    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    parsed = int(value)
    if parsed < 1:
        raise ValueError(f"{name} must be a positive integer, got {value!r}")
    return parsed


class BaseConfig:
    """Base configuration shared across environments."""

    APP_NAME = "DayPlanner"
    DB_FILENAME = "dayplanner.db"
    LOG_FILENAME = "dayplanner.log"
    SQLITE_PRAGMAS = {"foreign_keys": "on"}

    def __init__(self) -> None:
        self.DATA_DIR = self._resolve_data_dir()
        self.DEV_MODE = _env_bool("DAYPLANNER_DEV_MODE", default=True)
        self.DATABASE_URL = os.getenv("DAYPLANNER_DATABASE_URL", self._build_sqlite_url())
        # Upper bound on days walked by range materialization.
        self.MATERIALIZE_MAX_DAYS = _env_int("DAYPLANNER_MATERIALIZE_MAX_DAYS", 366)

    def _resolve_data_dir(self) -> Path:
        """Return the directory where the SQLite file and logs live."""

        data_root = os.getenv("DAYPLANNER_DATA_DIR", "instance")
        path = Path(data_root).expanduser().resolve()
        path.mkdir(parents=True, exist_ok=True)
        return path

    def _build_sqlite_url(self) -> str:
        """Construct the default SQLite URL inside the data directory."""

        db_path = self.DATA_DIR / self.DB_FILENAME
        return f"sqlite:///{db_path}"

    def sqlalchemy_engine_options(self) -> dict[str, Any]:
        """Expose engine kwargs for SQLModel to consume."""

        engine_options: dict[str, Any] = {}
        if self.DATABASE_URL.startswith("sqlite"):
            engine_options["connect_args"] = {"check_same_thread": False}
        return engine_options


class DevConfig(BaseConfig):
    """Development configuration using local SQLite."""

    DEBUG = True
    TESTING = False


class TestConfig(BaseConfig):
    """Configuration for the test-suite: a throwaway database under ``data_dir``."""

    __test__ = False  # not a pytest test class

    DEBUG = False
    TESTING = True

    def __init__(self, data_dir: Path | str) -> None:
        self._data_dir = Path(data_dir)
        super().__init__()
        self.DATABASE_URL = self._build_sqlite_url()
        self.DEV_MODE = True

    def _resolve_data_dir(self) -> Path:
        self._data_dir.mkdir(parents=True, exist_ok=True)
        return self._data_dir.resolve()
