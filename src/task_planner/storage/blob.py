# src/task_planner/storage/blob.py

"""
Cloud blob sync leg (Azure Blob Storage REST, SAS-token auth).

The whole CSV export is stored as one block blob. Request signing is left
to the SAS token; the adapter only appends it to the blob URL.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import httpx

from .base import StorageLoadError, StorageSaveError

logger = logging.getLogger(__name__)

EMULATOR_BASE_URL = "http://localhost:10000/devstoreaccount1"
DEFAULT_CONTAINER = "tasks"
DEFAULT_FILENAME = "tasks.csv"
DEFAULT_API_VERSION = "2020-10-02"


@dataclass(frozen=True, slots=True)
class BlobStorageConfig:
    account_name: str = ""
    container: str = DEFAULT_CONTAINER
    filename: str = DEFAULT_FILENAME
    sas_token: str = ""
    use_emulator: bool = False
    api_version: str = DEFAULT_API_VERSION
    timeout: float = 10.0

    @property
    def enabled(self) -> bool:
        return self.use_emulator or bool(self.account_name.strip())


def build_blob_url(account_name: str, container: str, filename: str, *, use_emulator: bool = False) -> str:
    if use_emulator:
        return f"{EMULATOR_BASE_URL}/{container}/{filename}"
    return f"https://{account_name}.blob.core.windows.net/{container}/{filename}"


class BlobStorage:
    name = "blob"

    def __init__(self, config: BlobStorageConfig, *, client: httpx.Client | None = None) -> None:
        if not config.enabled:
            raise ValueError("blob storage needs an account name or the emulator")
        self._config = config
        self._url = build_blob_url(
            config.account_name,
            config.container,
            config.filename,
            use_emulator=config.use_emulator,
        )
        self._client = client or httpx.Client(timeout=config.timeout)

    @property
    def url(self) -> str:
        return self._url

    def close(self) -> None:
        self._client.close()

    def _request_url(self) -> str:
        sas = self._config.sas_token.strip().lstrip("?")
        return f"{self._url}?{sas}" if sas else self._url

    def load(self) -> str | None:
        try:
            resp = self._client.get(
                self._request_url(),
                headers={"x-ms-version": self._config.api_version},
            )
            if resp.status_code == 404:
                logger.info("Blob %s does not exist yet.", self._url)
                return None
            resp.raise_for_status()
            return resp.content.decode("utf-8")
        except (httpx.HTTPError, UnicodeDecodeError) as e:
            raise StorageLoadError(self.name, f"cannot download {self._url}: {e}") from e

    def save(self, text: str) -> None:
        try:
            resp = self._client.put(
                self._request_url(),
                content=text.encode("utf-8"),
                headers={
                    "x-ms-blob-type": "BlockBlob",
                    "x-ms-version": self._config.api_version,
                    "Content-Type": "text/csv; charset=utf-8",
                },
            )
            resp.raise_for_status()
        except httpx.HTTPError as e:
            raise StorageSaveError(self.name, f"cannot upload {self._url}: {e}") from e
        logger.debug("Uploaded %d bytes to %s", len(text), self._url)
