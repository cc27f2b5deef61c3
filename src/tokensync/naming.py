"""
Naming conventions shared by documentation generation and startup recovery.

Recovery finds generated frames and rows purely by name, so any change
here must be made on both sides at once.
"""

from __future__ import annotations

import re

ROW_PREFIX = "Row — "
STYLE_FRAME_SUFFIX = " Documentation"
VARIABLE_FRAME_SUFFIX = " Variables"
STYLE_WRAPPER_NAME = "Documentation"

_SLUG_SEPARATORS = re.compile(r"[/\s]+")


def row_name(entity_name: str) -> str:
    return ROW_PREFIX + entity_name


def entity_name_from_row(node_name: str) -> str | None:
    """Entity name encoded in a row name, or None if it is not a row."""
    if not node_name.startswith(ROW_PREFIX):
        return None
    return node_name[len(ROW_PREFIX) :]


def style_frame_name(group_name: str) -> str:
    return group_name + STYLE_FRAME_SUFFIX


def variable_frame_name(group_name: str) -> str:
    return group_name + VARIABLE_FRAME_SUFFIX


def variable_wrapper_name(collection_name: str) -> str:
    return collection_name + VARIABLE_FRAME_SUFFIX


def group_from_frame_name(frame_name: str) -> str:
    """Group name with the frame suffix stripped."""
    for suffix in (STYLE_FRAME_SUFFIX, VARIABLE_FRAME_SUFFIX):
        if frame_name.endswith(suffix):
            return frame_name[: -len(suffix)]
    return frame_name


def short_name(entity_name: str) -> str:
    """Display name without the top-level group: ``Brand/Primary/500`` -> ``Primary / 500``."""
    parts = entity_name.split("/")
    if len(parts) > 1:
        return " / ".join(parts[1:])
    return parts[0]


def slug(name: str) -> str:
    return _SLUG_SEPARATORS.sub("-", name).lower()


def style_token_name(prefix: str, style_name: str) -> str:
    """Token badge for a style, e.g. ``$color-brand-primary``."""
    return f"${prefix}-{slug(style_name)}"


def variable_token_name(variable_name: str) -> str:
    return "$" + slug(variable_name)
