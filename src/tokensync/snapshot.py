"""
Comparison-only snapshots of extracted records.

A snapshot is canonical JSON: sorted keys, compact separators, absent
fields omitted and whole-number floats written as ints. Two snapshots are
equal exactly when the records they were taken from serialise identically,
regardless of dict ordering or of how a number was spelled.
"""

from __future__ import annotations

import hashlib
import json
from dataclasses import dataclass
from functools import cached_property
from typing import Any

from .ir.base import WireModel
from .ir.records import VariableRecord, VariableSnapshotRecord


@dataclass(frozen=True)
class Snapshot:
    text: str

    @cached_property
    def digest(self) -> str:
        """sha256 of the canonical text."""
        return hashlib.sha256(self.text.encode("utf-8")).hexdigest()

    def __str__(self) -> str:
        return self.digest[:12]


def _canonical(value: Any) -> Any:
    # 8 and 8.0 are the same number once a record has been through JSON
    match value:
        case float() if value.is_integer():
            return int(value)
        case dict():
            return {key: _canonical(item) for key, item in value.items()}
        case list():
            return [_canonical(item) for item in value]
    return value


def take_snapshot(record: WireModel) -> Snapshot:
    """Snapshot any extracted record."""
    data = _canonical(record.to_wire())
    return Snapshot(json.dumps(data, sort_keys=True, separators=(",", ":"), ensure_ascii=False))


def variable_snapshot(record: VariableRecord) -> Snapshot:
    """Snapshot only the fields the variable poll compares."""
    return take_snapshot(VariableSnapshotRecord.of(record))
