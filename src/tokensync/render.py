"""
Renderer contract and the default outline renderer.

The sync engine treats rendering as a black box: it hands over a parent
container and fresh entity data and gets back the new row node. Every row
is a frame named ``"Row — <entity name>"`` appended at the end of the
parent; callers move it into place.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import datetime
from typing import Protocol

from .ir.records import (
    EffectRecord,
    EffectStyleRecord,
    ModeRecord,
    PaintStyleRecord,
    RGBColor,
    TextStyleRecord,
    VariableRecord,
)
from .ir.values import ColorValue, describe_value
from .naming import (
    row_name,
    short_name,
    style_token_name,
    variable_token_name,
)
from .registry import EntityKind
from .scene import Scene, SceneNode

logger = logging.getLogger(__name__)

RowData = PaintStyleRecord | TextStyleRecord | EffectStyleRecord | VariableRecord

# Layout constants
FRAME_WIDTH = 1400
BODY_SIZE = 16

DEFAULT_FAMILY = "Inter"
DEFAULT_STYLE = "Regular"
CHROME_STYLES = ("Regular", "Medium", "Semi Bold", "Bold")

SHADOW_TYPES = ("DROP_SHADOW", "INNER_SHADOW")
BLUR_TYPES = ("LAYER_BLUR", "BACKGROUND_BLUR")


class Renderer(Protocol):
    """Builds documentation nodes. Every method appends to *parent*."""

    async def prepare(self) -> None: ...

    async def render_row(
        self,
        parent: SceneNode,
        kind: EntityKind,
        data: RowData,
        modes: Sequence[ModeRecord] = (),
    ) -> SceneNode | None: ...

    async def render_header(self, parent: SceneNode, group_name: str, style_count: int) -> None: ...

    async def render_variable_header(
        self, parent: SceneNode, title: str, modes: Sequence[ModeRecord], variable_count: int
    ) -> None: ...

    async def render_section_title(self, parent: SceneNode, title: str) -> None: ...

    async def render_column_headers(self, parent: SceneNode, *, variables: bool = False) -> None: ...

    def render_divider(self, parent: SceneNode) -> None: ...

    async def render_footer(self, parent: SceneNode) -> None: ...


def _percent(alpha: float) -> str:
    return f"{round(alpha * 100)}%"


def _color_label(color: RGBColor | ColorValue) -> str:
    label = color.hex
    if color.a is not None and color.a < 1:
        label += " " + _percent(color.a)
    return label


def _title_case(token: str) -> str:
    words = token.lower().replace("_", " ")
    return words[:1].upper() + words[1:]


def _number(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return str(value)


class OutlineRenderer:
    """Structural renderer: frames, text and swatches without visual styling.

    Fonts are loaded once per generation and cached; a font that fails to
    load falls back to Inter Regular.
    """

    def __init__(self, scene: Scene) -> None:
        self._scene = scene
        self._loaded: set[tuple[str, str]] = set()

    async def prepare(self) -> None:
        """Reset the font cache and preload the chrome fonts."""
        self._loaded.clear()
        for style in CHROME_STYLES:
            await self._load_font(DEFAULT_FAMILY, style)

    async def _load_font(self, family: str, style: str) -> bool:
        key = (family, style)
        if key in self._loaded:
            return True
        try:
            await self._scene.load_font(family, style)
        except Exception as e:
            logger.warning("Font %s %s unavailable: %s", family, style, e)
            return False
        self._loaded.add(key)
        return True

    async def _text(
        self,
        characters: str,
        size: float = BODY_SIZE,
        style: str = DEFAULT_STYLE,
        family: str = DEFAULT_FAMILY,
    ) -> SceneNode:
        if not await self._load_font(family, style):
            await self._load_font(DEFAULT_FAMILY, DEFAULT_STYLE)
            family, style = DEFAULT_FAMILY, DEFAULT_STYLE
        return self._scene.create_text(
            characters or " ", font_family=family, font_style=style, font_size=size
        )

    def _frame(self, name: str, layout_mode: str = "VERTICAL") -> SceneNode:
        return self._scene.create_frame(name, layout_mode)

    async def _badge(self, label: str, style: str = "Medium") -> SceneNode:
        badge = self._frame("Badge", "HORIZONTAL")
        badge.append_child(await self._text(label, style=style))
        return badge

    async def _color_badge(self, color: RGBColor | ColorValue, prefix: str = "") -> SceneNode:
        wrap = self._frame("Colour", "HORIZONTAL")
        if prefix:
            wrap.append_child(await self._text(prefix, style="Medium"))
        wrap.append_child(self._scene.create_rectangle("Dot", 14, 14))
        wrap.append_child(await self._text(_color_label(color), style="Medium"))
        return wrap

    async def _description(
        self, name: str, description: str, details: Sequence[SceneNode] = ()
    ) -> SceneNode:
        column = self._frame("Description")
        column.append_child(await self._text(short_name(name), style="Semi Bold"))
        for item in details:
            column.append_child(item)
        if description:
            column.append_child(await self._text(description))
        return column

    async def _token(self, token_name: str) -> SceneNode:
        column = self._frame("Token")
        column.append_child(await self._badge(token_name))
        return column

    # -------------------------------------------------------------------------
    # Rows
    # -------------------------------------------------------------------------

    async def render_row(
        self,
        parent: SceneNode,
        kind: EntityKind,
        data: RowData,
        modes: Sequence[ModeRecord] = (),
    ) -> SceneNode | None:
        match kind:
            case EntityKind.PAINT if isinstance(data, PaintStyleRecord):
                row = await self._paint_row(data)
            case EntityKind.TEXT if isinstance(data, TextStyleRecord):
                row = await self._text_row(data)
            case EntityKind.EFFECT if isinstance(data, EffectStyleRecord):
                row = await self._effect_row(data)
            case EntityKind.VARIABLE if isinstance(data, VariableRecord):
                row = await self._variable_row(data, modes)
            case _:
                logger.warning("No row renderer for %s with %s", kind, type(data).__name__)
                return None
        parent.append_child(row)
        return row

    async def _paint_row(self, style: PaintStyleRecord) -> SceneNode:
        row = self._frame(row_name(style.name), "HORIZONTAL")
        row.append_child(self._scene.create_rectangle("Swatch", 56, 56))

        details: list[SceneNode] = []
        paint = style.paints[0] if style.paints else None
        if paint is not None and paint.type == "SOLID" and paint.color is not None:
            alpha = f" · {_percent(paint.color.a)}" if paint.color.a < 1 else ""
            details.append(await self._text(paint.color.hex + alpha))
        elif paint is not None and paint.type.startswith("GRADIENT_") and paint.gradient_stops:
            kind = _title_case(paint.type.removeprefix("GRADIENT_"))
            details.append(await self._text(f"{kind} gradient"))
            stops = self._frame("Stops", "HORIZONTAL")
            for stop in paint.gradient_stops:
                stops.append_child(await self._color_badge(stop.color))
                stops.append_child(await self._badge(_percent(stop.position)))
            details.append(stops)

        row.append_child(await self._description(style.name, style.description, details))
        row.append_child(await self._token(style_token_name("color", style.name)))
        return row

    async def _text_row(self, style: TextStyleRecord) -> SceneNode:
        row = self._frame(row_name(style.name), "HORIZONTAL")

        example = self._frame("Example")
        example.append_child(
            await self._text("String", style.font_size, style.font_style, style.font_family)
        )
        row.append_child(example)

        bound = style.bound_variables
        badges = self._frame("Properties", "HORIZONTAL")
        labels = [
            f"${bound['fontSize']}" if "fontSize" in bound else f"$font-size-{round(style.font_size)}"
        ]
        if style.line_height.unit != "AUTO" and style.line_height.value is not None:
            labels.append(
                f"${bound['lineHeight']}"
                if "lineHeight" in bound
                else f"$line-height-{round(style.line_height.value)}"
            )
        labels.append(
            f"${bound['fontFamily']}"
            if "fontFamily" in bound
            else "$font-family-" + "-".join(style.font_family.lower().split())
        )
        labels.append(
            f"${bound['fontStyle']}"
            if "fontStyle" in bound
            else "$font-weight-" + "-".join(style.font_style.lower().split())
        )
        spacing = style.letter_spacing.value
        labels.append(
            f"${bound['letterSpacing']}"
            if "letterSpacing" in bound
            else "$letter-spacing-" + ("00" if spacing == 0 else f"{spacing:.1f}")
        )
        for label in labels:
            badges.append_child(await self._badge(label))

        details = [badges]
        if style.bound_var_modes:
            per_mode = self._frame("Modes", "HORIZONTAL")
            for prop, values in style.bound_var_modes.items():
                for mode_name, value in values.items():
                    per_mode.append_child(
                        await self._badge(f"{prop} · {mode_name}: {describe_value(value)}")
                    )
            details.append(per_mode)

        row.append_child(await self._description(style.name, style.description, details))
        row.append_child(await self._token(style_token_name("text", style.name)))
        return row

    async def _effect_row(self, style: EffectStyleRecord) -> SceneNode:
        row = self._frame(row_name(style.name), "HORIZONTAL")
        row.append_child(self._scene.create_rectangle("Preview", 56, 56))

        blocks = []
        for index, effect in enumerate(style.effects, start=1):
            if not effect.visible:
                continue
            blocks.append(await self._effect_block(index, effect))

        row.append_child(await self._description(style.name, style.description, blocks))
        row.append_child(await self._token(style_token_name("effect", style.name)))
        return row

    async def _effect_block(self, index: int, effect: EffectRecord) -> SceneNode:
        block = self._frame(f"Effect {index}")
        block.append_child(await self._text(_title_case(effect.type), style="Medium"))
        props = self._frame("Props", "HORIZONTAL")
        if effect.type in SHADOW_TYPES:
            if effect.color is not None:
                props.append_child(await self._color_badge(effect.color))
            ox = _number(effect.offset.x) if effect.offset else "0"
            oy = _number(effect.offset.y) if effect.offset else "0"
            props.append_child(await self._badge(f"X: {ox}  Y: {oy}"))
            props.append_child(await self._badge(f"Blur: {_number(effect.radius or 0)}"))
            props.append_child(await self._badge(f"Spread: {_number(effect.spread or 0)}"))
            if effect.blend_mode and effect.blend_mode not in ("NORMAL", "PASS_THROUGH"):
                props.append_child(
                    await self._badge("Blend: " + effect.blend_mode.lower().replace("_", " "))
                )
        elif effect.type in BLUR_TYPES:
            props.append_child(await self._badge(f"Radius: {_number(effect.radius or 0)}"))
        block.append_child(props)
        return block

    async def _variable_row(self, variable: VariableRecord, modes: Sequence[ModeRecord]) -> SceneNode:
        row = self._frame(row_name(variable.name), "HORIZONTAL")

        values = self._frame("Values", "HORIZONTAL")
        values.append_child(await self._badge(variable.resolved_type.lower()))
        for mode in modes:
            value = variable.values_by_mode.get(mode.name)
            if value is None:
                continue
            if isinstance(value, ColorValue):
                values.append_child(await self._color_badge(value, prefix=f"{mode.name}:"))
            else:
                values.append_child(await self._badge(f"{mode.name}: {describe_value(value)}"))

        row.append_child(await self._description(variable.name, variable.description, [values]))
        row.append_child(await self._token(variable_token_name(variable.name)))
        return row

    # -------------------------------------------------------------------------
    # Frame chrome
    # -------------------------------------------------------------------------

    async def render_header(self, parent: SceneNode, group_name: str, style_count: int) -> None:
        header = self._frame("Header")
        header.append_child(await self._text(group_name, 42, "Bold"))
        header.append_child(await self._text(f"{style_count} STYLES", style="Medium"))
        parent.append_child(header)

    async def render_variable_header(
        self, parent: SceneNode, title: str, modes: Sequence[ModeRecord], variable_count: int
    ) -> None:
        header = self._frame("Header")
        header.append_child(await self._text(f"{title} Variables", 42, "Bold"))
        plural = "S" if len(modes) > 1 else ""
        header.append_child(
            await self._text(f"{variable_count} VARIABLES · {len(modes)} MODE{plural}", style="Medium")
        )
        header.append_child(await self._text("Modes: " + ", ".join(m.name for m in modes)))
        parent.append_child(header)

    async def render_section_title(self, parent: SceneNode, title: str) -> None:
        section = self._frame("Section Title", "HORIZONTAL")
        section.append_child(await self._text(title, 24, "Bold"))
        parent.append_child(section)

    async def render_column_headers(self, parent: SceneNode, *, variables: bool = False) -> None:
        headers = self._frame("Column Headers", "HORIZONTAL")
        labels = ("Variable", "Token path") if variables else ("Example", "Description", "Token name")
        for label in labels:
            headers.append_child(await self._text(label, style="Medium"))
        parent.append_child(headers)

    def render_divider(self, parent: SceneNode) -> None:
        divider = self._frame("Divider")
        divider.append_child(self._scene.create_rectangle("Line", 100, 1))
        parent.append_child(divider)

    async def render_footer(self, parent: SceneNode) -> None:
        stamp = datetime.now().strftime("%d/%m/%Y at %H:%M")
        footer = self._frame("Footer", "HORIZONTAL")
        footer.append_child(await self._text(f"Generated on {stamp}  ·  tokensync"))
        parent.append_child(footer)
