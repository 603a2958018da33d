# src/task_planner/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One frozen Settings object for the whole app.
- No secrets required at import time.
- Storage backends get explicit config values built from Settings;
  nothing reads or mutates settings behind their back.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from .storage.blob import DEFAULT_API_VERSION, DEFAULT_CONTAINER, DEFAULT_FILENAME, BlobStorageConfig

ENV_PREFIX = "PLANNER"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


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

    # ---- Local data (ignored by git) ----
    data_dir: Path
    tasks_csv_path: Path

    # ---- Schema ----
    extended_fields: bool

    # ---- Spreadsheet web app ----
    sheets_url: str

    # ---- Blob storage ----
    blob_account: str
    blob_container: str
    blob_filename: str
    blob_sas_token: str
    blob_use_emulator: bool
    blob_api_version: str

    # ---- Remote sync ----
    http_timeout_seconds: float

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "planner").strip() or "planner"
        log_level = _env(_k("LOG_LEVEL"), "WARNING")

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/planner"))
        tasks_csv_path = _env_path(_k("TASKS_CSV_PATH"), data_dir / "tasks.csv")

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            tasks_csv_path=tasks_csv_path,
            extended_fields=_env_bool(_k("EXTENDED_FIELDS"), True),
            sheets_url=_env(_k("SHEETS_URL")).strip(),
            blob_account=_env(_k("BLOB_ACCOUNT")).strip(),
            blob_container=_env(_k("BLOB_CONTAINER"), DEFAULT_CONTAINER).strip() or DEFAULT_CONTAINER,
            blob_filename=_env(_k("BLOB_FILENAME"), DEFAULT_FILENAME).strip() or DEFAULT_FILENAME,
            blob_sas_token=_env(_k("BLOB_SAS_TOKEN")).strip(),
            blob_use_emulator=_env_bool(_k("BLOB_USE_EMULATOR"), False),
            blob_api_version=_env(_k("BLOB_API_VERSION"), DEFAULT_API_VERSION).strip() or DEFAULT_API_VERSION,
            http_timeout_seconds=_env_float(_k("HTTP_TIMEOUT_SECONDS"), 10.0),
        )

    def blob_config(self) -> BlobStorageConfig:
        return BlobStorageConfig(
            account_name=self.blob_account,
            container=self.blob_container,
            filename=self.blob_filename,
            sas_token=self.blob_sas_token,
            use_emulator=self.blob_use_emulator,
            api_version=self.blob_api_version,
            timeout=self.http_timeout_seconds,
        )


_SETTINGS: Settings | None = None


def get_settings() -> Settings:
    """Load .env (once) and build the settings on first use."""
    global _SETTINGS
    if _SETTINGS is None:
        load_dotenv(override=False)
        _SETTINGS = Settings.from_env()
    return _SETTINGS
