"""
Unit tests for documentation generation.

Generation lays out one frame per group, registers every row with a
baseline snapshot and turns live sync on.
"""

from __future__ import annotations

import pytest

from tokensync.context import SyncContext
from tokensync.extract import Extractor
from tokensync.generate import (
    PLACEMENT_GAP,
    WRAPPER_SPACING,
    DocumentationGenerator,
    placement_x,
    section_name,
    split_sections,
    style_groups,
    variable_groups,
)
from tokensync.ir.records import VariableRecord
from tokensync.messages import MemoryNotifier
from tokensync.registry import EntityKind, RowKey
from tokensync.render import FRAME_WIDTH
from tokensync.scene import MemoryScene


def _names(node) -> list[str]:
    return [child.name for child in node.children]


def _variable(name: str) -> VariableRecord:
    return VariableRecord(id=name, name=name, resolved_type="FLOAT")


# =============================================================================
# Helpers
# =============================================================================


class TestLayoutHelpers:
    def test_placement_on_empty_page(self) -> None:
        assert placement_x(MemoryScene().current_page) == PLACEMENT_GAP

    def test_placement_right_of_existing_content(self) -> None:
        scene = MemoryScene()
        existing = scene.create_frame("Something")
        existing.x = 100
        existing.resize(500, 300)
        scene.current_page.append_child(existing)

        assert placement_x(scene.current_page) == 600 + PLACEMENT_GAP

    @pytest.mark.parametrize(
        ("name", "depth", "expected"),
        [
            ("Brand/Primary", 1, "General"),
            ("Brand/Surface/Default", 1, "Surface"),
            ("Brand/Surface/Default", 2, "General"),
            ("Color/Brand/Primary/500", 2, "Primary"),
        ],
    )
    def test_section_name(self, name: str, depth: int, expected: str) -> None:
        assert section_name(name, depth) == expected

    def test_split_sections_sorted(self) -> None:
        variables = [_variable("A/Zeta/x"), _variable("A/one"), _variable("A/Alpha/y")]

        sections = split_sections(variables, 1)

        assert [title for title, _ in sections] == ["Alpha", "General", "Zeta"]
        assert [v.name for v in sections[1][1]] == ["A/one"]


class TestGrouping:
    def test_style_groups_by_top_segment(self, extractor: Extractor) -> None:
        groups = style_groups(extractor.extract_styles())

        assert [g.group_name for g in groups] == ["Text", "Brand", "Elevation"]
        assert groups[0].style_count == 2
        assert [s.name for s in groups[1].styles.paint_styles] == [
            "Brand/Primary",
            "Brand/Gradient",
        ]

    def test_variable_groups(self, extractor: Extractor) -> None:
        theme = extractor.extract_variables().collections[0]

        groups = variable_groups(theme)

        assert [(g.group_name, len(g.variables), g.depth) for g in groups] == [
            ("Brand", 2, 1),
            ("Type", 1, 1),
        ]


# =============================================================================
# Style documentation
# =============================================================================


class TestGenerateStyleDocs:
    @pytest.mark.asyncio
    async def test_frames_in_wrapper(
        self,
        generator: DocumentationGenerator,
        extractor: Extractor,
        scene: MemoryScene,
    ) -> None:
        frames = await generator.generate_style_docs(style_groups(extractor.extract_styles()))

        wrapper = scene.current_page.find_child("Documentation")
        assert wrapper is not None
        assert wrapper.layout_mode == "HORIZONTAL"
        assert wrapper.item_spacing == WRAPPER_SPACING
        assert wrapper.x == PLACEMENT_GAP
        assert _names(wrapper) == [
            "Text Documentation",
            "Brand Documentation",
            "Elevation Documentation",
        ]
        assert [f.id for f in frames] == [c.id for c in wrapper.children]
        assert all(f.width == FRAME_WIDTH for f in frames)
        assert scene.viewport == [wrapper.id]

    @pytest.mark.asyncio
    async def test_text_frame_layout(
        self, generator: DocumentationGenerator, extractor: Extractor, scene: MemoryScene
    ) -> None:
        await generator.generate_style_docs(style_groups(extractor.extract_styles()))

        text_frame = scene.current_page.find_child("Documentation").find_child(
            "Text Documentation"
        )
        assert _names(text_frame) == [
            "Header",
            "Section Title",
            "Column Headers",
            "Divider",
            "Row — Text/Heading/H1",
            "Divider",
            "Row — Text/Body",
            "Divider",
            "Divider",
            "Footer",
        ]
        assert text_frame.find_child("Header").texts() == ["Text", "2 STYLES"]

    @pytest.mark.asyncio
    async def test_colour_frame_has_no_column_headers(
        self, generator: DocumentationGenerator, extractor: Extractor, scene: MemoryScene
    ) -> None:
        await generator.generate_style_docs(style_groups(extractor.extract_styles()))

        brand = scene.current_page.find_child("Documentation").find_child("Brand Documentation")
        assert _names(brand)[:4] == ["Header", "Section Title", "Divider", "Row — Brand/Primary"]
        assert brand.find_child("Section Title").texts() == ["Colour Styles"]

    @pytest.mark.asyncio
    async def test_rows_registered_and_sync_active(
        self,
        generator: DocumentationGenerator,
        extractor: Extractor,
        context: SyncContext,
        scene: MemoryScene,
    ) -> None:
        await generator.generate_style_docs(style_groups(extractor.extract_styles()))

        assert context.active
        assert context.registry.count(EntityKind.TEXT) == 2
        assert context.registry.count(EntityKind.PAINT) == 2
        assert context.registry.count(EntityKind.EFFECT) == 1
        entry = context.registry.get(RowKey(EntityKind.PAINT, "Brand/Primary"))
        assert scene.get_node(entry.node_id).name == "Row — Brand/Primary"
        assert [f.group_name for f in context.frames] == ["Text", "Brand", "Elevation"]
        assert not any(f.is_variable for f in context.frames)

    @pytest.mark.asyncio
    async def test_messages(
        self,
        generator: DocumentationGenerator,
        extractor: Extractor,
        notifier: MemoryNotifier,
    ) -> None:
        await generator.generate_style_docs(style_groups(extractor.extract_styles()))

        progress = notifier.of_type("doc-progress")
        assert [p.status for p in progress] == [
            "starting",
            "generating",
            "generating",
            "generating",
            "done",
        ]
        assert progress[0].total == 3
        assert progress[1].name == "Text"
        assert progress[-1].page_count == 3
        assert notifier.of_type("live-sync-status")[-1].active is True
        assert notifier.of_type("notify")[-1].text == "Documentation generated — 3 groups"

    @pytest.mark.asyncio
    async def test_single_group_goes_on_page(
        self, generator: DocumentationGenerator, extractor: Extractor, scene: MemoryScene
    ) -> None:
        groups = [g for g in style_groups(extractor.extract_styles()) if g.group_name == "Brand"]

        (frame,) = await generator.generate_style_docs(groups)

        assert frame.parent is scene.current_page
        assert scene.current_page.find_child("Documentation") is None
        assert (frame.x, frame.y) == (PLACEMENT_GAP, 0)

    @pytest.mark.asyncio
    async def test_second_run_placed_to_the_right(
        self, generator: DocumentationGenerator, extractor: Extractor, scene: MemoryScene
    ) -> None:
        groups = [g for g in style_groups(extractor.extract_styles()) if g.group_name == "Brand"]

        (first,) = await generator.generate_style_docs(groups)
        (second,) = await generator.generate_style_docs(groups)

        assert second.x == first.x + FRAME_WIDTH + PLACEMENT_GAP

    @pytest.mark.asyncio
    async def test_regeneration_resets_only_style_rows(
        self,
        generator: DocumentationGenerator,
        extractor: Extractor,
        context: SyncContext,
    ) -> None:
        theme = extractor.extract_variables().collections[0]
        await generator.generate_variable_docs(theme.modes, variable_groups(theme), theme.name)
        groups = style_groups(extractor.extract_styles())
        await generator.generate_style_docs(groups)

        await generator.generate_style_docs(groups[:1])

        assert context.registry.count(EntityKind.PAINT) == 0
        assert context.registry.count(EntityKind.TEXT) == 2
        assert context.registry.count(EntityKind.VARIABLE) == 3
        assert context.has_variable_frames()


# =============================================================================
# Variable documentation
# =============================================================================


class TestGenerateVariableDocs:
    @pytest.mark.asyncio
    async def test_frames_and_sections(
        self,
        generator: DocumentationGenerator,
        extractor: Extractor,
        scene: MemoryScene,
    ) -> None:
        theme = extractor.extract_variables().collections[0]

        await generator.generate_variable_docs(theme.modes, variable_groups(theme), theme.name)

        wrapper = scene.current_page.find_child("Theme Variables")
        assert wrapper.layout_mode == "HORIZONTAL"
        assert _names(wrapper) == ["Brand Variables", "Type Variables"]
        brand = wrapper.find_child("Brand Variables")
        titles = [c.texts()[0] for c in brand.children if c.name == "Section Title"]
        assert titles == ["General (1)", "Surface (1)"]
        assert brand.find_child("Header").texts() == [
            "Brand Variables",
            "2 VARIABLES · 2 MODES",
            "Modes: Light, Dark",
        ]

    @pytest.mark.asyncio
    async def test_rows_show_every_mode(
        self,
        generator: DocumentationGenerator,
        extractor: Extractor,
        context: SyncContext,
        scene: MemoryScene,
    ) -> None:
        theme = extractor.extract_variables().collections[0]

        await generator.generate_variable_docs(theme.modes, variable_groups(theme), theme.name)

        entry = context.registry.get(RowKey(EntityKind.VARIABLE, "v-primary"))
        row = scene.get_node(entry.node_id)
        assert row.name == "Row — Brand/Primary"
        assert "#112233" in row.texts()
        assert "#EEDDCC" in row.texts()
        assert "$brand-primary" in row.texts()

    @pytest.mark.asyncio
    async def test_state_and_messages(
        self,
        generator: DocumentationGenerator,
        extractor: Extractor,
        context: SyncContext,
        notifier: MemoryNotifier,
    ) -> None:
        theme = extractor.extract_variables().collections[0]

        await generator.generate_variable_docs(theme.modes, variable_groups(theme), theme.name)

        assert context.active
        assert [m.name for m in context.var_modes] == ["Light", "Dark"]
        assert context.registry.count(EntityKind.VARIABLE) == 3
        assert all(f.is_variable for f in context.frames)
        done = notifier.of_type("doc-progress")[-1]
        assert (done.status, done.is_variable, done.var_count, done.page_count) == (
            "done",
            True,
            3,
            2,
        )
        assert (
            notifier.of_type("notify")[-1].text
            == "Variable documentation generated — 3 variables in 2 groups"
        )

    @pytest.mark.asyncio
    async def test_default_collection_name(
        self, generator: DocumentationGenerator, extractor: Extractor, scene: MemoryScene
    ) -> None:
        theme = extractor.extract_variables().collections[0]

        await generator.generate_variable_docs(theme.modes, variable_groups(theme))

        assert scene.current_page.find_child("Variables Variables") is not None
