"""
Client key-value storage used by the credential/config pass-through commands.

The sync core never reads these values; it only moves them between the UI
and the store.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal, Protocol

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    async def get(self, key: str) -> Any: ...

    async def set(self, key: str, value: Any) -> None: ...

    async def delete(self, key: str) -> None: ...


class MemoryStore:
    def __init__(self) -> None:
        self.data: dict[str, Any] = {}

    async def get(self, key: str) -> Any:
        return self.data.get(key)

    async def set(self, key: str, value: Any) -> None:
        self.data[key] = value

    async def delete(self, key: str) -> None:
        self.data.pop(key, None)


class JsonFileStore:
    """Persists all keys in one JSON file, rewritten on every change."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def _read(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            return json.loads(self.path.read_text(encoding="utf-8"))
        except json.JSONDecodeError:
            logger.warning("Ignoring unreadable store %s", self.path)
            return {}

    def _write(self, data: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, indent=2), encoding="utf-8")

    async def get(self, key: str) -> Any:
        return self._read().get(key)

    async def set(self, key: str, value: Any) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    async def delete(self, key: str) -> None:
        data = self._read()
        if data.pop(key, None) is not None:
            self._write(data)


@dataclass(frozen=True)
class StorageRoute:
    """How one storage command maps onto the store."""

    key: str
    action: Literal["get", "set", "delete"]
    reply: str | None
    default: Any = None


STORAGE_ROUTES: dict[str, StorageRoute] = {
    "bb-get-creds": StorageRoute("bb-creds", "get", "bb-creds-data"),
    "bb-save-creds": StorageRoute("bb-creds", "set", "bb-creds-saved"),
    "bb-delete-creds": StorageRoute("bb-creds", "delete", "bb-creds-deleted"),
    "bb-get-reviewers": StorageRoute("bb-saved-reviewers", "get", "bb-reviewers-data", default=[]),
    "bb-save-reviewers": StorageRoute("bb-saved-reviewers", "set", "bb-reviewers-saved"),
    "bb-get-config": StorageRoute("bb-last-config", "get", "bb-config-data"),
    "bb-save-config": StorageRoute("bb-last-config", "set", None),
}
