"""
tokensync intermediate representation.

- document: mutable host-document types (styles, variables, collections)
- values: the resolved-value tagged union
- records: immutable extracted records and aggregate snapshot sets
"""

from .base import DocumentModel, WireModel
from .document import (
    RGBA,
    STYLE_CHANGE_TYPES,
    ColorStop,
    DocumentChange,
    DocumentData,
    Effect,
    EffectStyle,
    FontName,
    GridStyle,
    LayoutGrid,
    LetterSpacing,
    LineHeight,
    Mode,
    Paint,
    PaintStyle,
    RawValue,
    TextStyle,
    Variable,
    VariableAlias,
    VariableBinding,
    VariableCollection,
    VariableType,
    Vector,
)
from .records import (
    CollectionRecord,
    EffectRecord,
    EffectStyleRecord,
    GradientStopRecord,
    GridRecord,
    GridStyleRecord,
    LetterSpacingRecord,
    LineHeightRecord,
    ModeRecord,
    PaintRecord,
    PaintStyleRecord,
    RGBColor,
    StyleRecord,
    StyleSnapshotSet,
    TextStyleRecord,
    VariableRecord,
    VariableSnapshotRecord,
    VariableSnapshotSet,
)
from .values import (
    UNRESOLVED_ALIAS_NAME,
    AliasValue,
    BooleanValue,
    ColorValue,
    NumberValue,
    ResolvedValue,
    StringValue,
    TerminalValue,
    UnresolvedValue,
    describe_value,
    terminal_of,
)

__all__ = [
    "DocumentModel",
    "WireModel",
    # Document
    "RGBA",
    "STYLE_CHANGE_TYPES",
    "ColorStop",
    "DocumentChange",
    "DocumentData",
    "Effect",
    "EffectStyle",
    "FontName",
    "GridStyle",
    "LayoutGrid",
    "LetterSpacing",
    "LineHeight",
    "Mode",
    "Paint",
    "PaintStyle",
    "RawValue",
    "TextStyle",
    "Variable",
    "VariableAlias",
    "VariableBinding",
    "VariableCollection",
    "VariableType",
    "Vector",
    # Records
    "CollectionRecord",
    "EffectRecord",
    "EffectStyleRecord",
    "GradientStopRecord",
    "GridRecord",
    "GridStyleRecord",
    "LetterSpacingRecord",
    "LineHeightRecord",
    "ModeRecord",
    "PaintRecord",
    "PaintStyleRecord",
    "RGBColor",
    "StyleRecord",
    "StyleSnapshotSet",
    "TextStyleRecord",
    "VariableRecord",
    "VariableSnapshotRecord",
    "VariableSnapshotSet",
    # Values
    "UNRESOLVED_ALIAS_NAME",
    "AliasValue",
    "BooleanValue",
    "ColorValue",
    "NumberValue",
    "ResolvedValue",
    "StringValue",
    "TerminalValue",
    "UnresolvedValue",
    "describe_value",
    "terminal_of",
]
