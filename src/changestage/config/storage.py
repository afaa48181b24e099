"""Where changestage keeps its default SQLite database."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .env import optional_env_var

APP_DIR_NAME: Final[str] = "changestage"
DEFAULT_DB_FILENAME: Final[str] = "changestage.db"
DATA_DIR_ENV_VAR: Final[str] = "CHANGESTAGE_DATA_DIR"
DATABASE_URI_ENV_VAR: Final[str] = "DATABASE_URI"


@dataclass(frozen=True, slots=True)
class StorageConfig:
    """Data directory holding the fallback database file."""

    data_dir: Path
    database_filename: str = DEFAULT_DB_FILENAME

    def resolve_data_dir(self) -> Path:
        return self.data_dir.expanduser().resolve()

    def database_path(self, *, ensure: bool = True) -> Path:
        data_dir = self.resolve_data_dir()
        if ensure:
            data_dir.mkdir(parents=True, exist_ok=True)
        return data_dir / self.database_filename

    def database_uri(self) -> str:
        return f"sqlite+pysqlite:///{self.database_path()}"


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    uri: str


def _platform_data_home() -> Path:
    if os.name == "nt":
        local = optional_env_var("LOCALAPPDATA")
        return Path(local) if local else Path.home() / "AppData" / "Local"
    xdg = optional_env_var("XDG_DATA_HOME")
    return Path(xdg) if xdg else Path.home() / ".local" / "share"


def get_storage_config() -> StorageConfig:
    env_dir = optional_env_var(DATA_DIR_ENV_VAR)
    data_dir = Path(env_dir) if env_dir else _platform_data_home() / APP_DIR_NAME
    return StorageConfig(data_dir=data_dir)


def get_database_config(
    *,
    uri: str | None = None,
    storage: StorageConfig | None = None,
) -> DatabaseConfig:
    """Pick the database: explicit ``uri``, then ``$DATABASE_URI``, then the data dir file."""

    resolved = uri or optional_env_var(DATABASE_URI_ENV_VAR)
    if resolved:
        return DatabaseConfig(uri=resolved)
    return DatabaseConfig(uri=(storage or get_storage_config()).database_uri())
