"""
Host document types: styles, variables, collections and modes.

These mirror what the design tool exposes to plugins. They are mutable
because the live document changes between extraction passes; everything
derived from them (records, snapshots) is immutable.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Literal

from pydantic import Field, model_validator

from .base import DocumentModel

# =============================================================================
# Variables
# =============================================================================


class VariableType(StrEnum):
    """Declared type of a variable."""

    COLOR = "COLOR"
    FLOAT = "FLOAT"
    STRING = "STRING"
    BOOLEAN = "BOOLEAN"


class RGBA(DocumentModel):
    """Colour with fractional (0-1) channels."""

    r: float
    g: float
    b: float
    a: float | None = None


class VariableAlias(DocumentModel):
    """A value that points at another variable."""

    type: Literal["VARIABLE_ALIAS"] = "VARIABLE_ALIAS"
    id: str


RawValue = RGBA | VariableAlias | bool | int | float | str


class Mode(DocumentModel):
    """A named variant (Light, Dark, ...) inside a collection."""

    mode_id: str
    name: str


class VariableCollection(DocumentModel):
    """A named group of variables sharing an ordered list of modes."""

    id: str
    name: str
    modes: list[Mode] = Field(min_length=1)
    default_mode_id: str | None = None

    @model_validator(mode="after")
    def _default_mode(self) -> VariableCollection:
        if self.default_mode_id is None:
            self.default_mode_id = self.modes[0].mode_id
        return self

    def mode_named(self, name: str) -> Mode | None:
        """First mode whose display name equals *name*."""
        for mode in self.modes:
            if mode.name == name:
                return mode
        return None


class Variable(DocumentModel):
    """A design variable with one raw value per mode."""

    id: str
    name: str
    resolved_type: VariableType
    variable_collection_id: str
    description: str | None = None
    values_by_mode: dict[str, RawValue] = Field(default_factory=dict)
    scopes: list[str] = Field(default_factory=list)
    code_syntax: dict[str, str] = Field(default_factory=dict)


# =============================================================================
# Styles
# =============================================================================


class VariableBinding(DocumentModel):
    """A style property bound to a variable."""

    type: str = "VARIABLE_ALIAS"
    id: str


class ColorStop(DocumentModel):
    position: float
    color: RGBA


class Paint(DocumentModel):
    """One fill layer of a paint style."""

    type: str
    visible: bool | None = None
    opacity: float | None = None
    blend_mode: str | None = None
    color: RGBA | None = None
    gradient_stops: list[ColorStop] | None = None
    gradient_transform: list[list[float]] | None = None
    scale_mode: str | None = None
    image_hash: str | None = None


class PaintStyle(DocumentModel):
    id: str = ""
    name: str
    description: str | None = None
    paints: list[Paint] = Field(default_factory=list)


class FontName(DocumentModel):
    family: str
    style: str


class LineHeight(DocumentModel):
    """Line height; unit is AUTO, PIXELS or PERCENT."""

    unit: str
    value: float | None = None


class LetterSpacing(DocumentModel):
    value: float
    unit: str


class TextStyle(DocumentModel):
    id: str = ""
    name: str
    description: str | None = None
    font_name: FontName
    font_size: float
    line_height: LineHeight | None = None
    letter_spacing: LetterSpacing | None = None
    text_case: str | None = None
    text_decoration: str | None = None
    paragraph_spacing: float | None = None
    paragraph_indent: float | None = None
    bound_variables: dict[str, VariableBinding] = Field(default_factory=dict)


class Vector(DocumentModel):
    x: float
    y: float


class Effect(DocumentModel):
    """Drop/inner shadow or blur."""

    type: str
    visible: bool | None = None
    color: RGBA | None = None
    offset: Vector | None = None
    radius: float | None = None
    spread: float | None = None
    blend_mode: str | None = None


class EffectStyle(DocumentModel):
    id: str = ""
    name: str
    description: str | None = None
    effects: list[Effect] = Field(default_factory=list)


class LayoutGrid(DocumentModel):
    pattern: str
    section_size: float | None = None
    visible: bool | None = None
    color: RGBA | None = None
    alignment: str | None = None
    gutter_size: float | None = None
    offset: float | None = None
    count: int | None = None


class GridStyle(DocumentModel):
    id: str = ""
    name: str
    description: str | None = None
    layout_grids: list[LayoutGrid] = Field(default_factory=list)


# =============================================================================
# Change events and document files
# =============================================================================


STYLE_CHANGE_TYPES: frozenset[str] = frozenset(
    {"STYLE_PROPERTY_CHANGE", "STYLE_CREATE", "STYLE_DELETE"}
)


class DocumentChange(DocumentModel):
    """One entry of a host document-change notification."""

    type: str
    id: str | None = None

    @property
    def is_style_change(self) -> bool:
        return self.type in STYLE_CHANGE_TYPES


class DocumentData(DocumentModel):
    """Serialised form of a whole source document (used by the CLI)."""

    name: str = "Untitled"
    paint_styles: list[PaintStyle] = Field(default_factory=list)
    text_styles: list[TextStyle] = Field(default_factory=list)
    effect_styles: list[EffectStyle] = Field(default_factory=list)
    grid_styles: list[GridStyle] = Field(default_factory=list)
    # None means the host has no variables capability at all.
    variable_collections: list[VariableCollection] | None = Field(default_factory=list)
    variables: list[Variable] = Field(default_factory=list)
