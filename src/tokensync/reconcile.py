"""
Reconciliation engine: repairs documentation rows whose entity changed.

Two passes share one rebuild primitive. The style pass re-extracts every
style after a debounced change notification; the variable pass checks only
tracked variables on a timer. Both only repair rows that already exist and
never add rows for entities documented nowhere.

Each pass guards against re-entering itself but not against the other
pass; registry entries are swapped whole so a key is never seen half
updated across an await.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from .context import SyncContext
from .errors import RenderError
from .extract import Extractor
from .ir.records import ModeRecord, StyleSnapshotSet
from .messages import LiveSyncStatusMessage, LiveSyncUpdateMessage, Notifier, toast_for_update
from .registry import EntityKind, RowKey
from .render import Renderer, RowData
from .scene import Scene, SceneNode, index_in_parent
from .snapshot import Snapshot, take_snapshot, variable_snapshot
from .source import SourceDocument, find_collection, find_variable

logger = logging.getLogger(__name__)


def _styles_by_kind(styles: StyleSnapshotSet) -> list[tuple[EntityKind, Sequence[RowData]]]:
    return [
        (EntityKind.PAINT, styles.paint_styles),
        (EntityKind.TEXT, styles.text_styles),
        (EntityKind.EFFECT, styles.effect_styles),
    ]


class ReconciliationEngine:
    """Diffs current entity state against stored snapshots and rebuilds rows."""

    def __init__(
        self,
        context: SyncContext,
        source: SourceDocument,
        scene: Scene,
        renderer: Renderer,
        notifier: Notifier,
        extractor: Extractor | None = None,
    ) -> None:
        self._context = context
        self._source = source
        self._scene = scene
        self._renderer = renderer
        self._notifier = notifier
        self._extractor = extractor or Extractor(source)
        self._styles_busy = False
        self._variables_busy = False

    @property
    def styles_busy(self) -> bool:
        return self._styles_busy

    @property
    def variables_busy(self) -> bool:
        return self._variables_busy

    # -------------------------------------------------------------------------
    # Row rebuild
    # -------------------------------------------------------------------------

    async def rebuild_row(
        self,
        key: RowKey,
        data: RowData,
        snapshot: Snapshot,
        modes: Sequence[ModeRecord] = (),
    ) -> SceneNode | None:
        """Replace the row registered under *key* with one rendered from *data*.

        The new row takes the old row's position among its siblings. If the
        old row or its parent is gone the key is pruned and None returned.

        Raises:
            RenderError: If the renderer produced no row. The key is pruned
                here and also when the renderer itself raises.
        """
        entry = self._context.registry.get(key)
        if entry is None:
            return None
        old = self._scene.get_node(entry.node_id)
        parent = old.parent if old is not None else None
        if old is None or parent is None:
            logger.info("Row for %s no longer exists, pruning", key)
            self._context.registry.delete(key)
            return None

        index = index_in_parent(old)
        old.remove()

        try:
            row = await self._renderer.render_row(parent, key.kind, data, modes)
        except Exception:
            self._context.registry.delete(key)
            raise
        if row is None:
            self._context.registry.delete(key)
            raise RenderError(f"Renderer produced no row for {key}")

        # rows are appended, so only move when the old slot was not last
        if 0 <= index < len(parent.children) - 1:
            parent.insert_child(index, row)

        self._context.registry.set(key, row.id, snapshot)
        logger.debug(
            "Rebuilt row %s",
            key,
            extra={"context": {"key": str(key), "node": row.id, "snapshot": str(snapshot)}},
        )
        return row

    def _report(self, updated: int, noun: str) -> None:
        if updated > 0:
            self._notifier.post(LiveSyncUpdateMessage(count=updated))
            self._notifier.post(toast_for_update(updated, noun))

    def _deactivate(self) -> None:
        self._context.deactivate()
        self._notifier.post(LiveSyncStatusMessage(active=False))

    # -------------------------------------------------------------------------
    # Style pass
    # -------------------------------------------------------------------------

    async def reconcile_styles(self) -> int:
        """Rebuild every documented style whose snapshot changed.

        Returns the number of rows rebuilt. A trigger that arrives while a
        pass is running, or while sync is inactive, is dropped.
        """
        if self._styles_busy or not self._context.active:
            return 0
        self._styles_busy = True
        try:
            if not self._context.prune_missing_frames(self._scene):
                logger.info("No documentation frames left")
                self._deactivate()
                return 0

            current = self._extractor.extract_styles()
            updated = 0
            for kind, records in _styles_by_kind(current):
                for record in records:
                    if await self._reconcile_style(RowKey(kind, record.name), record):
                        updated += 1

            self._report(updated, "item")
            return updated
        except Exception:
            logger.exception("Style reconciliation failed")
            return 0
        finally:
            self._styles_busy = False

    async def _reconcile_style(self, key: RowKey, record: RowData) -> bool:
        entry = self._context.registry.get(key)
        if entry is None:
            return False
        fresh = take_snapshot(record)
        if fresh == entry.snapshot:
            return False
        try:
            return await self.rebuild_row(key, record, fresh) is not None
        except Exception:
            logger.exception(
                "Failed to rebuild %s", key, extra={"context": {"key": str(key)}}
            )
            return False

    # -------------------------------------------------------------------------
    # Variable pass
    # -------------------------------------------------------------------------

    async def reconcile_variables(self) -> int:
        """Rebuild every tracked variable whose minimal snapshot changed.

        Tracked variables whose row or variable disappeared are pruned. When
        no variable frame survives, all variable tracking is dropped, and sync
        deactivates if no style frame survives either.
        """
        registry = self._context.registry
        if (
            self._variables_busy
            or not self._context.active
            or registry.count(EntityKind.VARIABLE) == 0
        ):
            return 0
        self._variables_busy = True
        try:
            self._context.prune_missing_frames(self._scene)
            if not self._context.has_variable_frames():
                logger.info("No variable documentation frames left, dropping variable rows")
                self._context.reset_variables()
                if not self._context.frames:
                    self._deactivate()
                return 0

            updated = 0
            for key in registry.keys(EntityKind.VARIABLE):
                if await self._reconcile_variable(key):
                    updated += 1

            self._report(updated, "variable")
            return updated
        except Exception:
            logger.exception("Variable poll failed")
            return 0
        finally:
            self._variables_busy = False

    async def _reconcile_variable(self, key: RowKey) -> bool:
        registry = self._context.registry
        entry = registry.get(key)
        if entry is None:
            return False
        if self._scene.get_node(entry.node_id) is None:
            registry.delete(key)
            return False

        variable = find_variable(self._source, key.identity)
        if variable is None:
            logger.info("Variable %s was deleted, pruning its row", key.identity)
            registry.delete(key)
            return False
        collection = find_collection(self._source, variable.variable_collection_id)
        if collection is None:
            return False

        try:
            record = self._extractor.extract_variable(variable, collection)
            fresh = variable_snapshot(record)
            if fresh == entry.snapshot:
                return False
            row = await self.rebuild_row(key, record, fresh, self._context.var_modes)
        except Exception:
            logger.exception(
                "Failed to rebuild %s", key, extra={"context": {"key": str(key)}}
            )
            return False
        return row is not None
