"""
Documentation generation.

Builds one documentation frame per group on the current page, registers
every rendered row with a baseline snapshot, and turns live sync on.
Style and variable documentation are generated independently: each resets
only its own side of the sync state.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from .context import SyncContext
from .ir.records import CollectionRecord, ModeRecord, StyleSnapshotSet, VariableRecord
from .messages import (
    DocProgressMessage,
    GroupStyles,
    LiveSyncStatusMessage,
    Notifier,
    StyleGroup,
    ToastMessage,
    VariableGroup,
)
from .naming import (
    STYLE_WRAPPER_NAME,
    style_frame_name,
    variable_frame_name,
    variable_wrapper_name,
)
from .registry import DocumentFrame, EntityKind, RowKey
from .render import FRAME_WIDTH, Renderer, RowData
from .scene import Scene, SceneNode
from .snapshot import take_snapshot, variable_snapshot

logger = logging.getLogger(__name__)

PLACEMENT_GAP = 200
WRAPPER_SPACING = 111
DEFAULT_COLLECTION_NAME = "Variables"
GENERAL_SECTION = "General"


def _plural(count: int) -> str:
    return "s" if count > 1 else ""


def placement_x(page: SceneNode) -> float:
    """X coordinate for new content: right of everything already on the page."""
    right = max((child.x + child.width for child in page.children), default=0.0)
    return max(right, 0.0) + PLACEMENT_GAP


def section_name(variable_name: str, depth: int) -> str:
    """Sub-section for a variable: the path segment after the group's ``depth`` segments."""
    parts = variable_name.split("/")
    if len(parts) > depth + 1:
        return parts[depth]
    return GENERAL_SECTION


def split_sections(
    variables: Sequence[VariableRecord], depth: int
) -> list[tuple[str, list[VariableRecord]]]:
    """Group variables into sorted sub-sections, keeping source order within each."""
    sections: dict[str, list[VariableRecord]] = {}
    for variable in variables:
        sections.setdefault(section_name(variable.name, depth), []).append(variable)
    return sorted(sections.items())


class DocumentationGenerator:
    """Renders style and variable documentation into a scene."""

    def __init__(
        self,
        context: SyncContext,
        scene: Scene,
        renderer: Renderer,
        notifier: Notifier,
    ) -> None:
        self._context = context
        self._scene = scene
        self._renderer = renderer
        self._notifier = notifier

    def _container(self, name: str, group_count: int) -> tuple[SceneNode, SceneNode | None]:
        """Parent for the group frames: a horizontal wrapper when there are several."""
        page = self._scene.current_page
        if group_count <= 1:
            return page, None
        wrapper = self._scene.create_frame(name, "HORIZONTAL")
        wrapper.item_spacing = WRAPPER_SPACING
        page.append_child(wrapper)
        return page, wrapper

    def _group_frame(
        self, name: str, page: SceneNode, wrapper: SceneNode | None, x: float
    ) -> SceneNode:
        frame = self._scene.create_frame(name, "VERTICAL")
        frame.resize(FRAME_WIDTH, 100)
        if wrapper is not None:
            wrapper.append_child(frame)
        else:
            page.append_child(frame)
            frame.x = x
            frame.y = 0
        return frame

    async def _row(
        self,
        parent: SceneNode,
        key: RowKey,
        data: RowData,
        modes: Sequence[ModeRecord] = (),
    ) -> None:
        row = await self._renderer.render_row(parent, key.kind, data, modes)
        if row is None:
            logger.warning("Renderer produced no row for %s", key)
        else:
            snapshot = (
                variable_snapshot(data)
                if isinstance(data, VariableRecord)
                else take_snapshot(data)
            )
            self._context.registry.set(key, row.id, snapshot)
        self._renderer.render_divider(parent)

    def _finish(self, frames: list[SceneNode], wrapper: SceneNode | None) -> None:
        view = [wrapper] if wrapper is not None else frames
        if view:
            self._scene.scroll_into_view(view)
        self._context.activate()
        self._notifier.post(LiveSyncStatusMessage(active=True))

    # -------------------------------------------------------------------------
    # Styles
    # -------------------------------------------------------------------------

    async def generate_style_docs(self, groups: Sequence[StyleGroup]) -> list[SceneNode]:
        """Generate one ``"<group> Documentation"`` frame per style group."""
        self._context.reset_styles()
        total = len(groups)
        self._notifier.post(DocProgressMessage(status="starting", total=total))

        await self._renderer.prepare()
        page = self._scene.current_page
        x = placement_x(page)
        page, wrapper = self._container(STYLE_WRAPPER_NAME, total)
        if wrapper is not None:
            wrapper.x = x
            wrapper.y = 0

        frames: list[SceneNode] = []
        for current, group in enumerate(groups, start=1):
            self._notifier.post(
                DocProgressMessage(
                    status="generating", current=current, total=total, name=group.group_name
                )
            )
            logger.info(
                "Generating documentation for %s",
                group.group_name,
                extra={"context": {"group": group.group_name, "styles": group.style_count}},
            )
            frame = self._group_frame(style_frame_name(group.group_name), page, wrapper, x)
            await self._renderer.render_header(frame, group.group_name, group.style_count)

            styles = group.styles
            if styles.text_styles:
                await self._renderer.render_section_title(frame, "Text Styles")
                await self._renderer.render_column_headers(frame)
                self._renderer.render_divider(frame)
                for text_style in styles.text_styles:
                    await self._row(frame, RowKey(EntityKind.TEXT, text_style.name), text_style)
            if styles.paint_styles:
                await self._renderer.render_section_title(frame, "Colour Styles")
                self._renderer.render_divider(frame)
                for paint_style in styles.paint_styles:
                    await self._row(frame, RowKey(EntityKind.PAINT, paint_style.name), paint_style)
            if styles.effect_styles:
                await self._renderer.render_section_title(frame, "Effect Styles")
                self._renderer.render_divider(frame)
                for effect_style in styles.effect_styles:
                    await self._row(
                        frame, RowKey(EntityKind.EFFECT, effect_style.name), effect_style
                    )

            self._renderer.render_divider(frame)
            await self._renderer.render_footer(frame)
            frames.append(frame)
            self._context.add_frame(DocumentFrame(frame.id, group.group_name, is_variable=False))

        self._finish(frames, wrapper)
        self._notifier.post(DocProgressMessage(status="done", page_count=total))
        self._notifier.post(
            ToastMessage(text=f"Documentation generated — {total} group{_plural(total)}")
        )
        return frames

    # -------------------------------------------------------------------------
    # Variables
    # -------------------------------------------------------------------------

    async def generate_variable_docs(
        self,
        modes: Sequence[ModeRecord],
        groups: Sequence[VariableGroup],
        collection_name: str | None = None,
    ) -> list[SceneNode]:
        """Generate one ``"<group> Variables"`` frame per variable group.

        Rows are rendered with a value column per mode in *modes*; the same
        modes are kept on the context so rebuilt rows match.
        """
        collection_name = collection_name or DEFAULT_COLLECTION_NAME
        self._context.reset_variables()
        self._context.var_modes = list(modes)

        total = len(groups)
        variable_count = sum(len(g.variables) for g in groups)
        self._notifier.post(DocProgressMessage(status="starting", total=total, is_variable=True))

        await self._renderer.prepare()
        page = self._scene.current_page
        x = placement_x(page)
        page, wrapper = self._container(variable_wrapper_name(collection_name), total)
        if wrapper is not None:
            wrapper.x = x
            wrapper.y = 0

        frames: list[SceneNode] = []
        for current, group in enumerate(groups, start=1):
            self._notifier.post(
                DocProgressMessage(
                    status="generating",
                    current=current,
                    total=total,
                    name=group.group_name,
                    is_variable=True,
                )
            )
            logger.info(
                "Generating variable documentation for %s (%d vars)",
                group.group_name,
                len(group.variables),
                extra={"context": {"group": group.group_name}},
            )
            frame = self._group_frame(variable_frame_name(group.group_name), page, wrapper, x)
            await self._renderer.render_variable_header(
                frame, group.group_name, modes, len(group.variables)
            )

            for title, members in split_sections(group.variables, group.depth):
                await self._renderer.render_section_title(frame, f"{title} ({len(members)})")
                await self._renderer.render_column_headers(frame, variables=True)
                self._renderer.render_divider(frame)
                for variable in members:
                    await self._row(
                        frame, RowKey(EntityKind.VARIABLE, variable.id), variable, modes
                    )

            self._renderer.render_divider(frame)
            await self._renderer.render_footer(frame)
            frames.append(frame)
            self._context.add_frame(DocumentFrame(frame.id, group.group_name, is_variable=True))

        self._finish(frames, wrapper)
        self._notifier.post(
            DocProgressMessage(
                status="done", page_count=total, is_variable=True, var_count=variable_count
            )
        )
        self._notifier.post(
            ToastMessage(
                text=(
                    f"Variable documentation generated — {variable_count} variables "
                    f"in {total} group{_plural(total)}"
                )
            )
        )
        return frames


# =============================================================================
# Grouping
# =============================================================================


def _top_segment(name: str) -> str:
    return name.split("/")[0].strip() or name


def style_groups(styles: StyleSnapshotSet) -> list[StyleGroup]:
    """Group styles by the first segment of their name, in first-seen order."""
    grouped: dict[str, dict[str, list]] = {}

    def bucket(name: str) -> dict[str, list]:
        return grouped.setdefault(
            _top_segment(name), {"text_styles": [], "paint_styles": [], "effect_styles": []}
        )

    for text_style in styles.text_styles:
        bucket(text_style.name)["text_styles"].append(text_style)
    for paint_style in styles.paint_styles:
        bucket(paint_style.name)["paint_styles"].append(paint_style)
    for effect_style in styles.effect_styles:
        bucket(effect_style.name)["effect_styles"].append(effect_style)

    return [
        StyleGroup(group_name=name, styles=GroupStyles(**members))
        for name, members in grouped.items()
    ]


def variable_groups(collection: CollectionRecord) -> list[VariableGroup]:
    """Group a collection's variables by the first segment of their name."""
    grouped: dict[str, list[VariableRecord]] = {}
    for variable in collection.variables:
        grouped.setdefault(_top_segment(variable.name), []).append(variable)
    return [
        VariableGroup(group_name=name, depth=1, variables=members)
        for name, members in grouped.items()
    ]
