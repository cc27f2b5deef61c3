"""
Row registry: which rendered row documents which style or variable.

Styles are keyed by name, so a renamed style shows up as a new key and its
old row is left orphaned. Variables are keyed by their stable id, so a
rename is tracked and repaired in place.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from enum import StrEnum
from typing import NamedTuple

from .snapshot import Snapshot


class EntityKind(StrEnum):
    """Kind of entity a row documents."""

    PAINT = "paint"
    TEXT = "text"
    EFFECT = "effect"
    VARIABLE = "var"

    @property
    def is_style(self) -> bool:
        return self is not EntityKind.VARIABLE


class RowKey(NamedTuple):
    kind: EntityKind
    identity: str

    def __str__(self) -> str:
        return f"{self.kind.value}:{self.identity}"


@dataclass(frozen=True)
class RowEntry:
    """Rendered node id plus the snapshot the row was rendered from."""

    node_id: str
    snapshot: Snapshot


@dataclass(frozen=True)
class DocumentFrame:
    """A top-level generated documentation frame."""

    frame_id: str
    group_name: str
    is_variable: bool


class RowRegistry:
    """Bidirectional index between entity keys and rendered rows.

    Entries are replaced wholesale, never mutated, so a reader on the other
    sync loop sees either the old or the new (node, snapshot) pair.
    """

    def __init__(self) -> None:
        self._entries: dict[RowKey, RowEntry] = {}
        self._by_node: dict[str, RowKey] = {}

    def get(self, key: RowKey) -> RowEntry | None:
        return self._entries.get(key)

    def set(self, key: RowKey, node_id: str, snapshot: Snapshot) -> None:
        previous = self._entries.get(key)
        if previous is not None:
            self._by_node.pop(previous.node_id, None)
        self._entries[key] = RowEntry(node_id=node_id, snapshot=snapshot)
        self._by_node[node_id] = key

    def delete(self, key: RowKey) -> None:
        entry = self._entries.pop(key, None)
        if entry is not None:
            self._by_node.pop(entry.node_id, None)

    def has(self, key: RowKey) -> bool:
        return key in self._entries

    def key_for_node(self, node_id: str) -> RowKey | None:
        return self._by_node.get(node_id)

    def keys(self, kind: EntityKind | None = None) -> list[RowKey]:
        """Snapshot of the current keys, optionally of one kind."""
        return [k for k in self._entries if kind is None or k.kind is kind]

    def count(self, kind: EntityKind | None = None) -> int:
        if kind is None:
            return len(self._entries)
        return sum(1 for k in self._entries if k.kind is kind)

    def clear(self, *, styles: bool = False, variables: bool = False) -> None:
        """Drop every style entry and/or every variable entry."""
        for key in self.keys():
            if (styles and key.kind.is_style) or (variables and not key.kind.is_style):
                self.delete(key)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __iter__(self) -> Iterator[tuple[RowKey, RowEntry]]:
        return iter(list(self._entries.items()))

    def __len__(self) -> int:
        return len(self._entries)
