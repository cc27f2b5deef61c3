"""
Extracted records: the immutable, serialisable view of styles and variables.

One record per style or variable; the aggregate snapshot sets are what the
UI receives as the full-data payload.
"""

from __future__ import annotations

from pydantic import Field

from .base import WireModel
from .values import ResolvedValue, TerminalValue

# =============================================================================
# Shared pieces
# =============================================================================


class RGBColor(WireModel):
    """8-bit colour with alpha."""

    hex: str
    r: int
    g: int
    b: int
    a: float = 1


class LineHeightRecord(WireModel):
    unit: str
    value: float | None = None


class LetterSpacingRecord(WireModel):
    value: float
    unit: str


# =============================================================================
# Styles
# =============================================================================


class GradientStopRecord(WireModel):
    position: float
    color: RGBColor


class PaintRecord(WireModel):
    type: str
    visible: bool = True
    opacity: float = 1
    blend_mode: str = "NORMAL"
    color: RGBColor | None = None
    gradient_stops: list[GradientStopRecord] | None = None
    gradient_transform: list[list[float]] | None = None
    scale_mode: str | None = None
    image_hash: str | None = None


class PaintStyleRecord(WireModel):
    name: str
    description: str = ""
    paints: list[PaintRecord] = Field(default_factory=list)


class TextStyleRecord(WireModel):
    """Typography plus the variables bound to its properties.

    ``bound_var_modes`` maps property -> mode name -> terminal value and is
    only present when some bound variable lives in a multi-mode collection.
    """

    name: str
    description: str = ""
    font_family: str
    font_style: str
    font_size: float
    line_height: LineHeightRecord
    letter_spacing: LetterSpacingRecord
    text_case: str = "ORIGINAL"
    text_decoration: str = "NONE"
    paragraph_spacing: float = 0
    paragraph_indent: float = 0
    bound_variables: dict[str, str] = Field(default_factory=dict)
    bound_var_modes: dict[str, dict[str, TerminalValue]] | None = None
    mode_names: list[str] | None = None


class OffsetRecord(WireModel):
    x: float
    y: float


class EffectRecord(WireModel):
    type: str
    visible: bool = True
    color: RGBColor | None = None
    offset: OffsetRecord | None = None
    radius: float | None = None
    spread: float | None = None
    blend_mode: str | None = None


class EffectStyleRecord(WireModel):
    name: str
    description: str = ""
    effects: list[EffectRecord] = Field(default_factory=list)


class GridColorRecord(WireModel):
    hex: str
    a: float | None = None


class GridRecord(WireModel):
    pattern: str
    section_size: float | None = None
    visible: bool | None = None
    color: GridColorRecord | None = None
    alignment: str | None = None
    gutter_size: float | None = None
    offset: float | None = None
    count: int | None = None


class GridStyleRecord(WireModel):
    name: str
    description: str = ""
    grids: list[GridRecord] = Field(default_factory=list)


StyleRecord = PaintStyleRecord | TextStyleRecord | EffectStyleRecord | GridStyleRecord


class StyleBreakdown(WireModel):
    paint: int = 0
    text: int = 0
    effect: int = 0
    grid: int = 0


class StylesMeta(WireModel):
    exported_at: str
    file_name: str
    total_styles: int = 0
    breakdown: StyleBreakdown = Field(default_factory=StyleBreakdown)


class StyleSnapshotSet(WireModel):
    """Every local style, grouped by kind."""

    meta: StylesMeta = Field(alias="_meta")
    paint_styles: list[PaintStyleRecord] = Field(default_factory=list)
    text_styles: list[TextStyleRecord] = Field(default_factory=list)
    effect_styles: list[EffectStyleRecord] = Field(default_factory=list)
    grid_styles: list[GridStyleRecord] = Field(default_factory=list)


# =============================================================================
# Variables
# =============================================================================


class ModeRecord(WireModel):
    id: str
    name: str


class VariableRecord(WireModel):
    """A variable with its value resolved for every mode (keyed by mode name)."""

    id: str
    name: str
    resolved_type: str
    description: str = ""
    scopes: list[str] = Field(default_factory=list)
    code_syntax: dict[str, str] = Field(default_factory=dict)
    values_by_mode: dict[str, ResolvedValue | None] = Field(default_factory=dict)


class VariableSnapshotRecord(WireModel):
    """The subset of a variable compared by the variable poll."""

    id: str
    name: str
    resolved_type: str
    description: str = ""
    values_by_mode: dict[str, ResolvedValue | None] = Field(default_factory=dict)

    @classmethod
    def of(cls, record: VariableRecord) -> VariableSnapshotRecord:
        return cls(
            id=record.id,
            name=record.name,
            resolved_type=record.resolved_type,
            description=record.description,
            values_by_mode=record.values_by_mode,
        )


class CollectionRecord(WireModel):
    id: str
    name: str
    modes: list[ModeRecord] = Field(default_factory=list)
    variable_count: int = 0
    variables: list[VariableRecord] = Field(default_factory=list)


class VariablesMeta(WireModel):
    available: bool = True
    reason: str | None = None
    exported_at: str | None = None
    file_name: str | None = None
    total_collections: int = 0
    total_variables: int = 0


class VariableSnapshotSet(WireModel):
    """Every local collection with its resolved variables."""

    meta: VariablesMeta = Field(alias="_meta")
    collections: list[CollectionRecord] = Field(default_factory=list)

    def iter_variables(self):
        for collection in self.collections:
            yield from collection.variables

    def find_by_id(self, variable_id: str) -> VariableRecord | None:
        for variable in self.iter_variables():
            if variable.id == variable_id:
                return variable
        return None
