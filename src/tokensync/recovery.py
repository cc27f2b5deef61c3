"""
Startup recovery: re-attach live sync to documentation generated in an
earlier session.

Generated frames and rows are recognised purely by name (see
:mod:`tokensync.naming`). Matched rows are registered with a snapshot of
the entity's current state, so the first reconciliation pass after a
restart compares against reality instead of flagging every row.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from .context import SyncContext
from .extract import Extractor
from .ir.records import ModeRecord, VariableRecord
from .naming import (
    STYLE_FRAME_SUFFIX,
    STYLE_WRAPPER_NAME,
    VARIABLE_FRAME_SUFFIX,
    entity_name_from_row,
    group_from_frame_name,
)
from .registry import DocumentFrame, EntityKind, RowKey
from .render import RowData
from .scene import NodeKind, Scene, SceneNode
from .snapshot import take_snapshot, variable_snapshot

logger = logging.getLogger(__name__)


@dataclass
class RecoveryReport:
    frames: int = 0
    style_rows: int = 0
    variable_rows: int = 0
    orphaned: list[str] = field(default_factory=list)

    @property
    def rows(self) -> int:
        return self.style_rows + self.variable_rows


@dataclass
class _Lookup:
    """Current entities by display name."""

    styles: dict[str, tuple[EntityKind, RowData]] = field(default_factory=dict)
    variables: dict[str, tuple[VariableRecord, list[ModeRecord]]] = field(default_factory=dict)


def is_wrapper(node: SceneNode) -> bool:
    """Wrappers group several documentation frames and are scanned through."""
    if node.name == STYLE_WRAPPER_NAME:
        return True
    return node.name.endswith(VARIABLE_FRAME_SUFFIX) and node.layout_mode == "HORIZONTAL"


class StartupRecovery:
    """Scans the current page for generated documentation and registers its rows."""

    def __init__(self, context: SyncContext, scene: Scene, extractor: Extractor) -> None:
        self._context = context
        self._scene = scene
        self._extractor = extractor

    def _build_lookup(self) -> _Lookup:
        lookup = _Lookup()
        styles = self._extractor.extract_styles()
        # first kind wins when a paint, text and effect style share a name
        for kind, records in (
            (EntityKind.PAINT, styles.paint_styles),
            (EntityKind.TEXT, styles.text_styles),
            (EntityKind.EFFECT, styles.effect_styles),
        ):
            for record in records:
                lookup.styles.setdefault(record.name, (kind, record))

        for collection in self._extractor.extract_variables().collections:
            for variable in collection.variables:
                lookup.variables.setdefault(variable.name, (variable, collection.modes))
        return lookup

    def run(self) -> RecoveryReport:
        """Register every recognisable row and activate sync if any frame was found."""
        lookup = self._build_lookup()
        report = RecoveryReport()
        for node in self._scene.current_page.children:
            self._scan(node, lookup, report)

        if report.frames:
            self._context.activate()
            logger.info(
                "Found %d doc frame(s), %d rows mapped",
                report.frames,
                report.rows,
                extra={
                    "context": {
                        "frames": report.frames,
                        "variable_rows": report.variable_rows,
                        "orphaned": len(report.orphaned),
                    }
                },
            )
        return report

    def _scan(self, node: SceneNode, lookup: _Lookup, report: RecoveryReport) -> None:
        if node.kind is not NodeKind.FRAME:
            return
        if is_wrapper(node):
            for child in node.children:
                self._scan(child, lookup, report)
            return

        is_variable = node.name.endswith(VARIABLE_FRAME_SUFFIX)
        if not is_variable and not node.name.endswith(STYLE_FRAME_SUFFIX):
            return

        self._context.add_frame(
            DocumentFrame(node.id, group_from_frame_name(node.name), is_variable=is_variable)
        )
        report.frames += 1

        for child in node.children:
            if child.kind is not NodeKind.FRAME:
                continue
            name = entity_name_from_row(child.name)
            if name is None:
                continue
            if is_variable:
                matched = self._register_variable(child, name, lookup)
                report.variable_rows += matched
            else:
                matched = self._register_style(child, name, lookup)
                report.style_rows += matched
            if not matched:
                report.orphaned.append(name)

    def _register_style(self, row: SceneNode, name: str, lookup: _Lookup) -> bool:
        found = lookup.styles.get(name)
        if found is None:
            return False
        kind, record = found
        self._context.registry.set(RowKey(kind, name), row.id, take_snapshot(record))
        return True

    def _register_variable(self, row: SceneNode, name: str, lookup: _Lookup) -> bool:
        found = lookup.variables.get(name)
        if found is None:
            return False
        record, modes = found
        self._context.registry.set(
            RowKey(EntityKind.VARIABLE, record.id), row.id, variable_snapshot(record)
        )
        if not self._context.var_modes:
            self._context.var_modes = list(modes)
        return True
