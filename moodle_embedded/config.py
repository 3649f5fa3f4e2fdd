"""Configuration objects and constants for the embedded link tools."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

MAX_FILE_BYTES = 1000 * 1024 * 1024
FETCH_TIMEOUT = 300
HEAD_TIMEOUT = 30

DEFAULT_BACKUP_DIR = "bbbackup"
DEFAULT_WEB_PATH = "/bbbackup/"
DEFAULT_LOG_PATH = "log.csv"
DEFAULT_TABLE_PREFIX = "mdl_"
COOKIE_FILENAME = "curl_cookie.txt"


class ConfigurationError(ValueError):
    """Raised when a run cannot start because its inputs are unusable."""


@dataclass
class EnvironmentSettings:
    """Settings read from the process environment (and an optional .env file)."""

    database_url: Optional[str]
    table_prefix: str = DEFAULT_TABLE_PREFIX
    dataroot: Path = Path(".")
    wwwroot: str = ""


def load_environment() -> EnvironmentSettings:
    load_dotenv()
    return EnvironmentSettings(
        database_url=os.getenv("DATABASE_URL") or None,
        table_prefix=os.getenv("MOODLE_TABLE_PREFIX", DEFAULT_TABLE_PREFIX),
        dataroot=Path(os.getenv("MOODLE_DATAROOT", ".")).expanduser(),
        wwwroot=os.getenv("MOODLE_WWWROOT", "").rstrip("/"),
    )


@dataclass
class EmbedConfig:
    """Top-level settings that control a rewrite run."""

    table: str
    field: str
    match: str
    exceptions: List[str] = field(default_factory=list)
    backup_dir: Path = Path(DEFAULT_BACKUP_DIR)
    web_path: str = DEFAULT_WEB_PATH
    cookie_path: Optional[Path] = None
    log_path: Path = Path(DEFAULT_LOG_PATH)


def resolve_cookie_path(cookie: Optional[str], dataroot: Path) -> Path:
    """Return the cookie jar to use, failing if it is missing."""
    path = Path(cookie).expanduser() if cookie else dataroot / COOKIE_FILENAME
    if not path.is_file():
        raise ConfigurationError(f"No cookie file at {path}")
    return path
