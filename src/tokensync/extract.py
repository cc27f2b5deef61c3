"""
Extraction layer: walks the source document into immutable records.

Every call re-reads the document; nothing is cached between calls. A style
or variable that fails to extract is logged and left out so that one bad
entity never aborts the whole pass.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from datetime import UTC, datetime
from typing import TypeVar

from .codec import color_record, normalize_letter_spacing, normalize_line_height, rgb_to_hex
from .ir.document import (
    Effect,
    EffectStyle,
    GridStyle,
    LayoutGrid,
    Paint,
    PaintStyle,
    TextStyle,
    Variable,
    VariableCollection,
)
from .ir.records import (
    CollectionRecord,
    EffectRecord,
    EffectStyleRecord,
    GradientStopRecord,
    GridColorRecord,
    GridRecord,
    GridStyleRecord,
    ModeRecord,
    OffsetRecord,
    PaintRecord,
    PaintStyleRecord,
    StyleBreakdown,
    StylesMeta,
    StyleSnapshotSet,
    TextStyleRecord,
    VariableRecord,
    VariablesMeta,
    VariableSnapshotSet,
)
from .ir.values import TerminalValue, terminal_of
from .resolver import AliasResolver
from .source import SourceDocument, find_collection, find_variable

logger = logging.getLogger(__name__)

S = TypeVar("S")
R = TypeVar("R")


def _now() -> str:
    return datetime.now(UTC).isoformat().replace("+00:00", "Z")


# =============================================================================
# Per-item extractors
# =============================================================================


def extract_paint(paint: Paint) -> PaintRecord:
    opacity = paint.opacity if paint.opacity is not None else 1
    color = None
    if paint.type == "SOLID" and paint.color is not None:
        color = color_record(paint.color, alpha=opacity)

    gradient_stops = None
    gradient_transform = None
    if paint.type.startswith("GRADIENT_"):
        gradient_stops = [
            GradientStopRecord(position=stop.position, color=color_record(stop.color))
            for stop in paint.gradient_stops or []
        ]
        gradient_transform = paint.gradient_transform

    is_image = paint.type == "IMAGE"
    return PaintRecord(
        type=paint.type,
        visible=paint.visible is not False,
        opacity=opacity,
        blend_mode=paint.blend_mode or "NORMAL",
        color=color,
        gradient_stops=gradient_stops,
        gradient_transform=gradient_transform,
        scale_mode=paint.scale_mode if is_image else None,
        image_hash=paint.image_hash if is_image else None,
    )


def extract_effect(effect: Effect) -> EffectRecord:
    return EffectRecord(
        type=effect.type,
        visible=effect.visible is not False,
        color=color_record(effect.color) if effect.color is not None else None,
        offset=OffsetRecord(x=effect.offset.x, y=effect.offset.y) if effect.offset else None,
        radius=effect.radius,
        spread=effect.spread,
        blend_mode=effect.blend_mode or None,
    )


def extract_grid(grid: LayoutGrid) -> GridRecord:
    color = None
    if grid.color is not None:
        color = GridColorRecord(
            hex=rgb_to_hex(grid.color.r, grid.color.g, grid.color.b), a=grid.color.a
        )
    return GridRecord(
        pattern=grid.pattern,
        section_size=grid.section_size,
        visible=grid.visible,
        color=color,
        alignment=grid.alignment,
        gutter_size=grid.gutter_size,
        offset=grid.offset,
        count=grid.count,
    )


class Extractor:
    """Produces style and variable snapshot sets from a source document."""

    def __init__(self, source: SourceDocument, resolver: AliasResolver | None = None) -> None:
        self._source = source
        self._resolver = resolver or AliasResolver(source)

    @property
    def resolver(self) -> AliasResolver:
        return self._resolver

    # -------------------------------------------------------------------------
    # Styles
    # -------------------------------------------------------------------------

    def extract_styles(self) -> StyleSnapshotSet:
        """Extract every local paint, text, effect and grid style."""
        paint_styles = _collect(self._source.local_paint_styles(), self.extract_paint_style)
        text_styles = _collect(self._source.local_text_styles(), self.extract_text_style)
        effect_styles = _collect(self._source.local_effect_styles(), self.extract_effect_style)
        grid_styles = _collect(self._source.local_grid_styles(), self.extract_grid_style)

        breakdown = StyleBreakdown(
            paint=len(paint_styles),
            text=len(text_styles),
            effect=len(effect_styles),
            grid=len(grid_styles),
        )
        meta = StylesMeta(
            exported_at=_now(),
            file_name=self._source.name,
            total_styles=breakdown.paint + breakdown.text + breakdown.effect + breakdown.grid,
            breakdown=breakdown,
        )
        return StyleSnapshotSet(
            meta=meta,
            paint_styles=paint_styles,
            text_styles=text_styles,
            effect_styles=effect_styles,
            grid_styles=grid_styles,
        )

    def extract_paint_style(self, style: PaintStyle) -> PaintStyleRecord:
        return PaintStyleRecord(
            name=style.name,
            description=style.description or "",
            paints=[extract_paint(p) for p in style.paints],
        )

    def extract_text_style(self, style: TextStyle) -> TextStyleRecord:
        bound_names: dict[str, str] = {}
        bound_modes: dict[str, dict[str, TerminalValue]] = {}
        mode_names: list[str] | None = None

        for prop, binding in style.bound_variables.items():
            variable = find_variable(self._source, binding.id)
            if variable is None:
                continue
            bound_names[prop] = variable.name

            collection = find_collection(self._source, variable.variable_collection_id)
            if collection is None or len(collection.modes) <= 1:
                continue
            bound_modes[prop] = self._resolve_every_mode(variable, collection)
            if mode_names is None:
                mode_names = [m.name for m in collection.modes]

        return TextStyleRecord(
            name=style.name,
            description=style.description or "",
            font_family=style.font_name.family,
            font_style=style.font_name.style,
            font_size=style.font_size,
            line_height=normalize_line_height(style.line_height),
            letter_spacing=normalize_letter_spacing(style.letter_spacing),
            text_case=style.text_case or "ORIGINAL",
            text_decoration=style.text_decoration or "NONE",
            paragraph_spacing=style.paragraph_spacing or 0,
            paragraph_indent=style.paragraph_indent or 0,
            bound_variables=bound_names,
            bound_var_modes=bound_modes or None,
            mode_names=mode_names if bound_modes else None,
        )

    def _resolve_every_mode(
        self, variable: Variable, collection: VariableCollection
    ) -> dict[str, TerminalValue]:
        """Terminal value of *variable* for each mode of its collection."""
        per_mode: dict[str, TerminalValue] = {}
        for mode in collection.modes:
            terminal = terminal_of(self._resolver.resolve(variable, mode.mode_id, mode.name))
            if terminal is not None:
                per_mode[mode.name] = terminal
        return per_mode

    def extract_effect_style(self, style: EffectStyle) -> EffectStyleRecord:
        return EffectStyleRecord(
            name=style.name,
            description=style.description or "",
            effects=[extract_effect(e) for e in style.effects],
        )

    def extract_grid_style(self, style: GridStyle) -> GridStyleRecord:
        return GridStyleRecord(
            name=style.name,
            description=style.description or "",
            grids=[extract_grid(g) for g in style.layout_grids],
        )

    # -------------------------------------------------------------------------
    # Variables
    # -------------------------------------------------------------------------

    def extract_variables(self) -> VariableSnapshotSet:
        """Extract every collection with each variable resolved for every mode."""
        if not self._source.supports_variables:
            return VariableSnapshotSet(
                meta=VariablesMeta(available=False, reason="Variables API not available"),
            )

        collections = list(self._source.local_variable_collections())
        variables = list(self._source.local_variables())

        records: list[CollectionRecord] = []
        for collection in collections:
            members = [v for v in variables if v.variable_collection_id == collection.id]
            extracted = _collect(
                members, lambda v, c=collection: self.extract_variable(v, c)
            )
            records.append(
                CollectionRecord(
                    id=collection.id,
                    name=collection.name,
                    modes=[ModeRecord(id=m.mode_id, name=m.name) for m in collection.modes],
                    variable_count=len(extracted),
                    variables=extracted,
                )
            )

        meta = VariablesMeta(
            available=True,
            exported_at=_now(),
            file_name=self._source.name,
            total_collections=len(collections),
            total_variables=len(variables),
        )
        return VariableSnapshotSet(meta=meta, collections=records)

    def extract_variable(
        self, variable: Variable, collection: VariableCollection
    ) -> VariableRecord:
        """Record for one variable, values keyed by mode name."""
        values = {
            mode.name: self._resolver.resolve(variable, mode.mode_id, mode.name)
            for mode in collection.modes
        }
        return VariableRecord(
            id=variable.id,
            name=variable.name,
            resolved_type=variable.resolved_type.value,
            description=variable.description or "",
            scopes=list(variable.scopes),
            code_syntax=dict(variable.code_syntax),
            values_by_mode=values,
        )


def _collect(items: Iterable[S], extract: Callable[[S], R]) -> list[R]:
    """Apply *extract* to each item, logging and skipping failures."""
    results: list[R] = []
    for item in items:
        try:
            results.append(extract(item))
        except Exception:
            logger.exception(
                "Failed to extract %s",
                getattr(item, "name", item),
                extra={"context": {"entity": getattr(item, "name", None)}},
            )
    return results
