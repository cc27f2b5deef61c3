"""
Process-wide synchronization state, owned in one place.

Created once per session and shared by the generator, the reconciliation
engine, the scheduler and startup recovery.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from .ir.records import ModeRecord
from .registry import DocumentFrame, RowRegistry
from .scene import Scene

logger = logging.getLogger(__name__)


@dataclass
class SyncContext:
    """Registry, generated frames, the active flag and the variable mode list.

    ``var_modes`` are the modes variable rows were rendered with; rebuilt
    variable rows reuse them so every row shows the same columns.
    """

    registry: RowRegistry = field(default_factory=RowRegistry)
    frames: list[DocumentFrame] = field(default_factory=list)
    active: bool = False
    var_modes: list[ModeRecord] = field(default_factory=list)

    def activate(self) -> None:
        if not self.active:
            logger.info("Live sync activated")
        self.active = True

    def deactivate(self) -> None:
        """Stop new passes from starting; an in-flight pass still completes."""
        if self.active:
            logger.info("Live sync deactivated")
        self.active = False

    def add_frame(self, frame: DocumentFrame) -> None:
        self.frames.append(frame)

    def reset_styles(self) -> None:
        """Forget style frames and rows before style documentation is regenerated."""
        self.frames = [f for f in self.frames if f.is_variable]
        self.registry.clear(styles=True)

    def reset_variables(self) -> None:
        """Forget variable frames and rows before variable documentation is regenerated."""
        self.frames = [f for f in self.frames if not f.is_variable]
        self.registry.clear(variables=True)

    def prune_missing_frames(self, scene: Scene) -> list[DocumentFrame]:
        """Drop frame records whose container no longer exists; return the survivors."""
        alive = [f for f in self.frames if scene.get_node(f.frame_id) is not None]
        if len(alive) != len(self.frames):
            logger.info("Pruned %d missing documentation frame(s)", len(self.frames) - len(alive))
        self.frames = alive
        return alive

    def has_variable_frames(self) -> bool:
        return any(f.is_variable for f in self.frames)

    def teardown(self) -> None:
        self.deactivate()
        self.frames = []
        self.registry.clear(styles=True, variables=True)
        self.var_modes = []
