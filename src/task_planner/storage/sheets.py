# src/task_planner/storage/sheets.py

"""
Spreadsheet sync leg (Google Apps Script web app).

Wire format of the web app:
- GET  <url>                                  -> {"success": true, "data": [task, ...]}
- POST <url> {"action": "updateTasks", "data": [task, ...]} -> {"success": true, "message": "..."}

Tasks travel as nested camelCase dicts (Task.to_dict); the script flattens
them into sheet rows itself. The adapter translates to and from CSV text
so it fits the same storage port as the other backends.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from ..tasks.task_codec import Schema, forest_to_rows, rows_to_forest
from ..tasks.task_models import Task
from .base import StorageLoadError, StorageSaveError

logger = logging.getLogger(__name__)


class SheetsWebAppStorage:
    name = "sheets"

    def __init__(
        self,
        url: str,
        *,
        timeout: float = 10.0,
        schema: Schema = Schema.EXTENDED,
        client: httpx.Client | None = None,
    ) -> None:
        if not url or not url.strip():
            raise ValueError("sheets web app url is required")
        self._url = url.strip()
        self._schema = schema
        # Apps Script answers with a redirect to googleusercontent.com.
        self._client = client or httpx.Client(timeout=timeout, follow_redirects=True)

    def close(self) -> None:
        self._client.close()

    @staticmethod
    def _payload(resp: httpx.Response) -> dict[str, Any]:
        resp.raise_for_status()
        body = resp.json()
        if not isinstance(body, dict):
            raise ValueError("unexpected response body")
        if not body.get("success", False):
            raise ValueError(str(body.get("error") or "web app reported failure"))
        return body

    def load(self) -> str | None:
        try:
            body = self._payload(self._client.get(self._url))
        except (httpx.HTTPError, ValueError) as e:
            raise StorageLoadError(self.name, f"cannot read sheet: {e}") from e

        data = body.get("data") or []
        if not isinstance(data, list) or not data:
            return None
        forest = [Task.from_dict(item) for item in data if isinstance(item, dict)]
        logger.info("Loaded %d root task(s) from sheet.", len(forest))
        return forest_to_rows(forest, self._schema)

    def save(self, text: str) -> None:
        forest = rows_to_forest(text)
        payload = {"action": "updateTasks", "data": [t.to_dict() for t in forest]}
        try:
            body = self._payload(self._client.post(self._url, json=payload))
        except (httpx.HTTPError, ValueError) as e:
            raise StorageSaveError(self.name, f"cannot update sheet: {e}") from e
        logger.debug("Sheet sync: %s", body.get("message", "ok"))
