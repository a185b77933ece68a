"""Where the ledger database lives."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .env import optional_env_str
from .errors import ConfigurationError

APP_DIR_NAME: Final[str] = "playledger"
LEDGER_DB_FILENAME: Final[str] = "ledger.sqlite3"

DATABASE_URI_ENV: Final[str] = "DATABASE_URI"
DATA_DIR_ENV: Final[str] = "PLAYLEDGER_DATA_DIR"
DATABASE_FILE_ENV: Final[str] = "PLAYLEDGER_DATABASE_FILE"


def default_data_dir() -> Path:
    """Per-user data directory: ``LOCALAPPDATA`` on Windows, XDG elsewhere."""

    if os.name == "nt":
        root = os.getenv("LOCALAPPDATA") or str(Path.home() / "AppData" / "Local")
    else:
        root = os.getenv("XDG_DATA_HOME") or str(Path.home() / ".local" / "share")
    return Path(root).expanduser().resolve() / APP_DIR_NAME


@dataclass(frozen=True, slots=True)
class StorageConfig:
    data_dir: Path
    database_file: str = LEDGER_DB_FILENAME

    @property
    def database_path(self) -> Path:
        return self.data_dir / self.database_file

    def sqlite_uri(self, *, create_dir: bool = True) -> str:
        if create_dir:
            self.data_dir.mkdir(parents=True, exist_ok=True)
        return f"sqlite+pysqlite:///{self.database_path}"


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    uri: str


def get_storage_config() -> StorageConfig:
    env_dir = optional_env_str(DATA_DIR_ENV)
    data_dir = Path(env_dir).expanduser().resolve() if env_dir else default_data_dir()
    database_file = optional_env_str(DATABASE_FILE_ENV) or LEDGER_DB_FILENAME
    if Path(database_file).name != database_file:
        raise ConfigurationError(
            f"{DATABASE_FILE_ENV} must be a bare file name, got {database_file!r}",
            variable=DATABASE_FILE_ENV,
        )
    return StorageConfig(data_dir=data_dir, database_file=database_file)


def get_database_config(override: str | None = None) -> DatabaseConfig:
    """Pick the database: explicit ``override``, then ``DATABASE_URI``, then the data dir."""

    if override and override.strip():
        return DatabaseConfig(uri=override.strip())
    env_uri = optional_env_str(DATABASE_URI_ENV)
    if env_uri:
        return DatabaseConfig(uri=env_uri)
    return DatabaseConfig(uri=get_storage_config().sqlite_uri())


def get_database_uri(override: str | None = None) -> str:
    return get_database_config(override).uri
