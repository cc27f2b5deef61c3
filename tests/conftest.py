"""Shared pytest fixtures for tokensync tests."""

from __future__ import annotations

import pytest

from tokensync.context import SyncContext
from tokensync.extract import Extractor
from tokensync.generate import DocumentationGenerator
from tokensync.ir.document import (
    RGBA,
    ColorStop,
    Effect,
    EffectStyle,
    FontName,
    GridStyle,
    LayoutGrid,
    LineHeight,
    Mode,
    Paint,
    PaintStyle,
    TextStyle,
    Variable,
    VariableAlias,
    VariableBinding,
    VariableCollection,
    VariableType,
    Vector,
)
from tokensync.messages import MemoryNotifier
from tokensync.reconcile import ReconciliationEngine
from tokensync.render import OutlineRenderer
from tokensync.scene import MemoryScene
from tokensync.source import InMemoryDocument


def rgb(r: int, g: int, b: int, a: float | None = None) -> RGBA:
    """Colour from 8-bit channels."""
    return RGBA(r=r / 255, g=g / 255, b=b / 255, a=a)


@pytest.fixture
def theme_collection() -> VariableCollection:
    return VariableCollection(
        id="c-theme",
        name="Theme",
        modes=[Mode(mode_id="m-light", name="Light"), Mode(mode_id="m-dark", name="Dark")],
    )


@pytest.fixture
def document(theme_collection: VariableCollection) -> InMemoryDocument:
    """A small document: two colour themes, an aliased spacing scale and one of each style."""
    core = VariableCollection(
        id="c-core", name="Core", modes=[Mode(mode_id="m-core", name="Default")]
    )
    spacing = VariableCollection(
        id="c-spacing", name="Spacing", modes=[Mode(mode_id="m-spacing", name="Default")]
    )
    variables = [
        Variable(
            id="v-primary",
            name="Brand/Primary",
            resolved_type=VariableType.COLOR,
            variable_collection_id="c-theme",
            values_by_mode={"m-light": rgb(0x11, 0x22, 0x33), "m-dark": rgb(0xEE, 0xDD, 0xCC)},
        ),
        Variable(
            id="v-surface",
            name="Brand/Surface/Default",
            resolved_type=VariableType.COLOR,
            variable_collection_id="c-theme",
            description="Page background",
            values_by_mode={"m-light": rgb(255, 255, 255), "m-dark": rgb(0, 0, 0)},
        ),
        Variable(
            id="v-unit",
            name="Core/Unit",
            resolved_type=VariableType.FLOAT,
            variable_collection_id="c-core",
            values_by_mode={"m-core": 8},
        ),
        Variable(
            id="v-base",
            name="Spacing/Base",
            resolved_type=VariableType.FLOAT,
            variable_collection_id="c-spacing",
            values_by_mode={"m-spacing": VariableAlias(id="v-unit")},
        ),
        Variable(
            id="v-font-size",
            name="Type/Size/Body",
            resolved_type=VariableType.FLOAT,
            variable_collection_id="c-theme",
            values_by_mode={"m-light": 16, "m-dark": 18},
        ),
    ]
    return InMemoryDocument(
        name="Design System",
        paint_styles=[
            PaintStyle(
                name="Brand/Primary",
                description="Primary brand colour",
                paints=[Paint(type="SOLID", color=rgb(0x11, 0x22, 0x33))],
            ),
            PaintStyle(
                name="Brand/Gradient",
                paints=[
                    Paint(
                        type="GRADIENT_LINEAR",
                        gradient_stops=[
                            ColorStop(position=0, color=rgb(255, 0, 0, 1)),
                            ColorStop(position=1, color=rgb(0, 0, 255, 1)),
                        ],
                    )
                ],
            ),
        ],
        text_styles=[
            TextStyle(
                name="Text/Heading/H1",
                font_name=FontName(family="Inter", style="Bold"),
                font_size=32,
                line_height=LineHeight(unit="PIXELS", value=40),
                bound_variables={"fontSize": VariableBinding(id="v-font-size")},
            ),
            TextStyle(
                name="Text/Body",
                font_name=FontName(family="Inter", style="Regular"),
                font_size=16,
            ),
        ],
        effect_styles=[
            EffectStyle(
                name="Elevation/Card",
                effects=[
                    Effect(
                        type="DROP_SHADOW",
                        color=rgb(0, 0, 0, 0.25),
                        offset=Vector(x=0, y=4),
                        radius=12,
                        spread=0,
                    )
                ],
            )
        ],
        grid_styles=[
            GridStyle(
                name="Grid/Columns",
                layout_grids=[LayoutGrid(pattern="COLUMNS", count=12, gutter_size=24)],
            )
        ],
        collections=[theme_collection, core, spacing],
        variables=variables,
    )


@pytest.fixture
def extractor(document: InMemoryDocument) -> Extractor:
    return Extractor(document)


@pytest.fixture
def scene() -> MemoryScene:
    return MemoryScene()


@pytest.fixture
def notifier() -> MemoryNotifier:
    return MemoryNotifier()


@pytest.fixture
def context() -> SyncContext:
    return SyncContext()


@pytest.fixture
def renderer(scene: MemoryScene) -> OutlineRenderer:
    return OutlineRenderer(scene)


@pytest.fixture
def engine(
    context: SyncContext,
    document: InMemoryDocument,
    scene: MemoryScene,
    renderer: OutlineRenderer,
    notifier: MemoryNotifier,
    extractor: Extractor,
) -> ReconciliationEngine:
    return ReconciliationEngine(context, document, scene, renderer, notifier, extractor=extractor)


@pytest.fixture
def generator(
    context: SyncContext,
    scene: MemoryScene,
    renderer: OutlineRenderer,
    notifier: MemoryNotifier,
) -> DocumentationGenerator:
    return DocumentationGenerator(context, scene, renderer, notifier)
