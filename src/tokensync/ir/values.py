"""
Resolved variable values.

A resolved value is a tagged union discriminated on ``type``. The four
scalar cases are *terminal*; an alias carries the terminal value of the
variable it points at when that could be resolved.
"""

from __future__ import annotations

from typing import Annotated, Literal, assert_never

from pydantic import Field, TypeAdapter

from .base import WireModel


class ColorValue(WireModel):
    type: Literal["color"] = "color"
    hex: str
    r: int
    g: int
    b: int
    a: float = 1


class NumberValue(WireModel):
    type: Literal["number"] = "number"
    value: int | float


class StringValue(WireModel):
    type: Literal["string"] = "string"
    value: str


class BooleanValue(WireModel):
    type: Literal["boolean"] = "boolean"
    value: bool


TerminalValue = Annotated[
    ColorValue | NumberValue | StringValue | BooleanValue,
    Field(discriminator="type"),
]


class AliasValue(WireModel):
    """Reference to another variable.

    ``alias_name`` is ``"unresolved"`` when the target could not be looked
    up; ``resolved_value`` is None when the chain could not be followed to
    a concrete value for the requested mode.
    """

    type: Literal["alias"] = "alias"
    alias_name: str
    alias_id: str
    resolved_value: TerminalValue | None = None


class UnresolvedValue(WireModel):
    """Raw value whose shape does not match the declared type."""

    type: Literal["unresolved"] = "unresolved"
    value: str


ResolvedValue = Annotated[
    ColorValue | NumberValue | StringValue | BooleanValue | AliasValue | UnresolvedValue,
    Field(discriminator="type"),
]

UNRESOLVED_ALIAS_NAME = "unresolved"

resolved_value_adapter: TypeAdapter[ResolvedValue] = TypeAdapter(ResolvedValue)


def terminal_of(value: ResolvedValue | None) -> TerminalValue | None:
    """Unwrap an alias to its terminal value; scalars are returned as-is."""
    match value:
        case None | UnresolvedValue():
            return None
        case AliasValue():
            return value.resolved_value
        case ColorValue() | NumberValue() | StringValue() | BooleanValue():
            return value
        case _:
            assert_never(value)


def describe_value(value: ResolvedValue) -> str:
    """Short human-readable form used on value badges."""
    match value:
        case ColorValue():
            return value.hex
        case NumberValue():
            return _format_number(value.value)
        case StringValue():
            return f'"{value.value}"'
        case BooleanValue():
            return "true" if value.value else "false"
        case AliasValue():
            return f"→ {value.alias_name}"
        case UnresolvedValue():
            return value.value
        case _:
            assert_never(value)


def _format_number(number: int | float) -> str:
    if isinstance(number, float) and number.is_integer():
        return str(int(number))
    return str(number)
