"""
Token export formats.

- W3C Design Token Community Group (DTCG) ``tokens.json``
  See: https://design-tokens.github.io/community-group/format/
- CSS custom properties, one selector block per mode
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, assert_never

from .codec import percent_to_em
from .ir.records import (
    CollectionRecord,
    EffectStyleRecord,
    PaintStyleRecord,
    RGBColor,
    StyleSnapshotSet,
    TextStyleRecord,
    VariableRecord,
    VariableSnapshotSet,
)
from .ir.values import (
    UNRESOLVED_ALIAS_NAME,
    AliasValue,
    BooleanValue,
    ColorValue,
    NumberValue,
    ResolvedValue,
    StringValue,
    UnresolvedValue,
)
from .naming import slug

logger = logging.getLogger(__name__)

DTCG_TYPES = {
    "COLOR": "color",
    "FLOAT": "number",
    "STRING": "string",
    "BOOLEAN": "boolean",
}


def _hex_with_alpha(color: ColorValue | RGBColor) -> str:
    if color.a >= 1:
        return color.hex
    return f"{color.hex}{round(color.a * 255):02X}"


def _path(name: str) -> list[str]:
    return [part.strip() for part in name.split("/") if part.strip()]


def _insert(tree: dict[str, Any], path: list[str], token: dict[str, Any]) -> bool:
    """Place *token* at *path*; False if a token and a group would share a name."""
    if not path:
        return False
    node = tree
    for part in path[:-1]:
        child = node.setdefault(part, {})
        if "$value" in child:
            return False
        node = child
    leaf = path[-1]
    if leaf in node:
        return False
    node[leaf] = token
    return True


def _px(value: float) -> str:
    if float(value).is_integer():
        return f"{int(value)}px"
    return f"{value}px"


def _mode_for(collection: CollectionRecord, mode: str | None) -> str | None:
    """Requested mode if the collection has it, else the collection's first mode."""
    names = [m.name for m in collection.modes]
    if mode is not None and mode in names:
        return mode
    return names[0] if names else None


# =============================================================================
# DTCG
# =============================================================================


def dtcg_value(value: ResolvedValue) -> Any:
    """DTCG ``$value`` for a resolved value; aliases become ``{group.token}`` references."""
    match value:
        case ColorValue():
            return _hex_with_alpha(value)
        case NumberValue() | StringValue() | BooleanValue():
            return value.value
        case AliasValue():
            return "{" + ".".join(_path(value.alias_name)) + "}"
        case UnresolvedValue():
            return value.value
        case _:
            assert_never(value)


def _variable_token(variable: VariableRecord, value: ResolvedValue) -> dict[str, Any]:
    token: dict[str, Any] = {
        "$type": DTCG_TYPES.get(variable.resolved_type, "string"),
        "$value": dtcg_value(value),
    }
    if variable.description:
        token["$description"] = variable.description
    return token


def generate_dtcg_tokens(
    variables: VariableSnapshotSet,
    styles: StyleSnapshotSet | None = None,
    mode: str | None = None,
) -> dict[str, Any]:
    """Generate W3C DTCG format design tokens.

    Variables are nested by their ``/`` path segments. Each collection is
    exported for *mode* when it has a mode of that name, otherwise for its
    first mode. Styles, when given, add ``color``, ``typography`` and
    ``shadow`` groups.

    Args:
        variables: Extracted variables.
        styles: Extracted styles to include.
        mode: Mode name to export.

    Returns:
        DTCG-formatted dict suitable for writing as tokens.json.
    """
    dtcg: dict[str, Any] = {}

    for collection in variables.collections:
        mode_name = _mode_for(collection, mode)
        if mode_name is None:
            continue
        for variable in collection.variables:
            value = variable.values_by_mode.get(mode_name)
            if value is None:
                continue
            if isinstance(value, AliasValue) and value.alias_name == UNRESOLVED_ALIAS_NAME:
                logger.warning("Skipping %s: alias target is missing", variable.name)
                continue
            if not _insert(dtcg, _path(variable.name), _variable_token(variable, value)):
                logger.warning("Skipping %s: name collides with another token", variable.name)

    if styles is not None:
        for group, tokens in generate_dtcg_style_tokens(styles).items():
            if group in dtcg:
                logger.warning("Style group %r collides with a variable group", group)
                continue
            dtcg[group] = tokens

    return dtcg


def _paint_token(style: PaintStyleRecord) -> dict[str, Any] | None:
    paint = style.paints[0] if style.paints else None
    if paint is None or paint.type != "SOLID" or paint.color is None:
        return None
    return {"$type": "color", "$value": _hex_with_alpha(paint.color)}


def _text_token(style: TextStyleRecord) -> dict[str, Any]:
    line_height: Any = "normal"
    if style.line_height.unit == "PIXELS" and style.line_height.value is not None:
        line_height = _px(style.line_height.value)
    elif style.line_height.unit == "PERCENT" and style.line_height.value is not None:
        line_height = style.line_height.value / 100

    spacing = style.letter_spacing
    letter_spacing = (
        f"{percent_to_em(spacing.value)}em" if spacing.unit == "PERCENT" else _px(spacing.value)
    )
    return {
        "$type": "typography",
        "$value": {
            "fontFamily": style.font_family,
            "fontWeight": style.font_style,
            "fontSize": _px(style.font_size),
            "lineHeight": line_height,
            "letterSpacing": letter_spacing,
        },
    }


def _shadow_token(style: EffectStyleRecord) -> dict[str, Any] | None:
    shadows = []
    for effect in style.effects:
        if effect.type != "DROP_SHADOW" or not effect.visible:
            continue
        color = _hex_with_alpha(effect.color) if effect.color is not None else "#000000"
        shadows.append(
            {
                "color": color,
                "offsetX": _px(effect.offset.x if effect.offset else 0),
                "offsetY": _px(effect.offset.y if effect.offset else 0),
                "blur": _px(effect.radius or 0),
                "spread": _px(effect.spread or 0),
            }
        )
    if not shadows:
        return None
    return {"$type": "shadow", "$value": shadows[0] if len(shadows) == 1 else shadows}


def generate_dtcg_style_tokens(styles: StyleSnapshotSet) -> dict[str, Any]:
    """Solid paint, text and drop-shadow styles as DTCG groups."""
    groups: dict[str, dict[str, Any]] = {"color": {}, "typography": {}, "shadow": {}}

    for paint_style in styles.paint_styles:
        token = _paint_token(paint_style)
        if token is not None:
            _insert(groups["color"], _path(paint_style.name), token)
    for text_style in styles.text_styles:
        _insert(groups["typography"], _path(text_style.name), _text_token(text_style))
    for effect_style in styles.effect_styles:
        token = _shadow_token(effect_style)
        if token is not None:
            _insert(groups["shadow"], _path(effect_style.name), token)

    return {name: tokens for name, tokens in groups.items() if tokens}


def export_dtcg_file(
    variables: VariableSnapshotSet,
    output_path: Path,
    styles: StyleSnapshotSet | None = None,
    mode: str | None = None,
) -> Path:
    """Generate DTCG tokens and write to a JSON file."""
    tokens = generate_dtcg_tokens(variables, styles=styles, mode=mode)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(
        json.dumps(tokens, indent=2),
        encoding="utf-8",
    )

    return output_path


# =============================================================================
# CSS custom properties
# =============================================================================


def css_property(name: str) -> str:
    return "--" + slug(name)


def css_value(value: ResolvedValue) -> str | None:
    """CSS value for a resolved value; None when nothing sensible can be emitted."""
    match value:
        case ColorValue():
            return _hex_with_alpha(value)
        case NumberValue():
            number = value.value
            if isinstance(number, float) and number.is_integer():
                number = int(number)
            return str(number)
        case StringValue():
            return json.dumps(value.value)
        case BooleanValue():
            return "true" if value.value else "false"
        case AliasValue():
            if value.alias_name == UNRESOLVED_ALIAS_NAME:
                return None
            return f"var({css_property(value.alias_name)})"
        case UnresolvedValue():
            return None
        case _:
            assert_never(value)


def _declarations(collection: CollectionRecord, mode_name: str) -> list[str]:
    lines = []
    for variable in collection.variables:
        value = variable.values_by_mode.get(mode_name)
        rendered = css_value(value) if value is not None else None
        if rendered is None:
            continue
        lines.append(f"  {css_property(variable.name)}: {rendered};")
    return lines


def generate_css_variables(variables: VariableSnapshotSet, mode: str | None = None) -> str:
    """Render variables as CSS custom properties.

    ``:root`` holds each collection's first mode (or *mode* when given).
    Without *mode*, every further mode gets a ``[data-mode="<slug>"]``
    block overriding only that collection's properties.
    """
    root: list[str] = []
    blocks: dict[str, list[str]] = {}

    for collection in variables.collections:
        mode_name = _mode_for(collection, mode)
        if mode_name is None:
            continue
        root.extend(_declarations(collection, mode_name))
        if mode is not None:
            continue
        for extra in collection.modes[1:]:
            blocks.setdefault(extra.name, []).extend(_declarations(collection, extra.name))

    parts = [":root {", *root, "}"]
    for mode_name, lines in blocks.items():
        if not lines:
            continue
        parts.extend(["", f'[data-mode="{slug(mode_name)}"] {{', *lines, "}"])
    return "\n".join(parts) + "\n"
