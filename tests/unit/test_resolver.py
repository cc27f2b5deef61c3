"""
Unit tests for alias resolution.

Covers scalar resolution per mode, alias chains across collections with
different mode ids, and the depth limit that also stops cycles.
"""

from __future__ import annotations

import pytest

from tokensync.ir.document import (
    RGBA,
    Mode,
    Variable,
    VariableAlias,
    VariableCollection,
    VariableType,
)
from tokensync.ir.values import (
    UNRESOLVED_ALIAS_NAME,
    AliasValue,
    ColorValue,
    NumberValue,
    UnresolvedValue,
)
from tokensync.resolver import MAX_ALIAS_DEPTH, AliasResolver, mode_id_for_name
from tokensync.source import InMemoryDocument


def _chain_document(hops: int, *, cycle: bool = False) -> InMemoryDocument:
    """``v0 -> v1 -> ... -> v<hops>``; the last one holds 42 unless *cycle* points it back at v0."""
    collection = VariableCollection(id="c", name="Chain", modes=[Mode(mode_id="m", name="Default")])
    variables = []
    for i in range(hops + 1):
        if i < hops:
            value = VariableAlias(id=f"v{i + 1}")
        elif cycle:
            value = VariableAlias(id="v0")
        else:
            value = 42
        variables.append(
            Variable(
                id=f"v{i}",
                name=f"Chain/{i}",
                resolved_type=VariableType.FLOAT,
                variable_collection_id="c",
                values_by_mode={"m": value},
            )
        )
    return InMemoryDocument(collections=[collection], variables=variables)


def _resolve_first(document: InMemoryDocument):
    return AliasResolver(document).resolve(document.variables[0], "m", "Default")


# =============================================================================
# Scalars
# =============================================================================


class TestScalarResolution:
    def test_color_per_mode(self, document: InMemoryDocument) -> None:
        resolver = AliasResolver(document)
        primary = document.get_variable("v-primary")

        dark = resolver.resolve(primary, "m-dark", "Dark")

        assert dark == ColorValue(hex="#EEDDCC", r=238, g=221, b=204, a=1)

    def test_missing_mode_value_is_none(self, document: InMemoryDocument) -> None:
        resolver = AliasResolver(document)
        primary = document.get_variable("v-primary")

        assert resolver.resolve(primary, "m-nope", "Nope") is None

    def test_unsupported_shape_is_unresolved(self) -> None:
        collection = VariableCollection(id="c", name="C", modes=[Mode(mode_id="m", name="M")])
        broken = Variable(
            id="v",
            name="Broken",
            resolved_type=VariableType.COLOR,
            variable_collection_id="c",
            values_by_mode={"m": "not a colour"},
        )
        document = InMemoryDocument(collections=[collection], variables=[broken])

        value = AliasResolver(document).resolve(broken, "m", "M")

        assert isinstance(value, UnresolvedValue)
        assert value.value == "not a colour"

    def test_resolve_all_modes_keys_by_mode_name(self, document: InMemoryDocument) -> None:
        values = AliasResolver(document).resolve_all_modes(document.get_variable("v-font-size"))

        assert values == {"Light": NumberValue(value=16), "Dark": NumberValue(value=18)}

    def test_resolve_all_modes_without_collection(self, document: InMemoryDocument) -> None:
        orphan = Variable(
            id="v-orphan",
            name="Orphan",
            resolved_type=VariableType.FLOAT,
            variable_collection_id="c-gone",
            values_by_mode={"m": 1},
        )
        assert AliasResolver(document).resolve_all_modes(orphan) == {}


# =============================================================================
# Aliases
# =============================================================================


class TestAliasResolution:
    def test_alias_across_collections(self, document: InMemoryDocument) -> None:
        base = document.get_variable("v-base")

        value = AliasResolver(document).resolve(base, "m-spacing", "Default")

        assert isinstance(value, AliasValue)
        assert value.alias_name == "Core/Unit"
        assert value.alias_id == "v-unit"
        assert value.resolved_value == NumberValue(value=8)

    def test_alias_to_missing_variable(self, document: InMemoryDocument) -> None:
        dangling = Variable(
            id="v-dangling",
            name="Spacing/Dangling",
            resolved_type=VariableType.FLOAT,
            variable_collection_id="c-spacing",
            values_by_mode={"m-spacing": VariableAlias(id="v-deleted")},
        )
        document.variables.append(dangling)

        value = AliasResolver(document).resolve(dangling, "m-spacing", "Default")

        assert isinstance(value, AliasValue)
        assert value.alias_name == UNRESOLVED_ALIAS_NAME
        assert value.alias_id == "v-deleted"
        assert value.resolved_value is None

    def test_alias_without_mode_name_is_not_followed(self, document: InMemoryDocument) -> None:
        value = AliasResolver(document).resolve(document.get_variable("v-base"), "m-spacing", None)

        assert isinstance(value, AliasValue)
        assert value.alias_name == "Core/Unit"
        assert value.resolved_value is None

    def test_target_mode_matched_by_name(self, document: InMemoryDocument) -> None:
        document.collections.append(
            VariableCollection(
                id="c-semantic",
                name="Semantic",
                modes=[Mode(mode_id="s-light", name="Light"), Mode(mode_id="s-dark", name="Dark")],
            )
        )
        accent = Variable(
            id="v-accent",
            name="Semantic/Accent",
            resolved_type=VariableType.COLOR,
            variable_collection_id="c-semantic",
            values_by_mode={
                "s-light": VariableAlias(id="v-primary"),
                "s-dark": VariableAlias(id="v-primary"),
            },
        )
        document.variables.append(accent)

        value = AliasResolver(document).resolve(accent, "s-dark", "Dark")

        assert value.resolved_value.hex == "#EEDDCC"

    def test_target_without_matching_mode_uses_default(self, document: InMemoryDocument) -> None:
        # "Default" does not exist in Theme, so its first mode (Light) is used
        pointer = Variable(
            id="v-pointer",
            name="Spacing/Pointer",
            resolved_type=VariableType.COLOR,
            variable_collection_id="c-spacing",
            values_by_mode={"m-spacing": VariableAlias(id="v-primary")},
        )
        document.variables.append(pointer)

        value = AliasResolver(document).resolve(pointer, "m-spacing", "Default")

        assert value.resolved_value.hex == "#112233"

    def test_host_lookup_error_treated_as_missing(self, document: InMemoryDocument) -> None:
        class FlakyDocument(InMemoryDocument):
            def get_variable(self, variable_id: str):
                raise RuntimeError("host gone")

        flaky = FlakyDocument(collections=document.collections, variables=document.variables)

        base = document.get_variable("v-base")
        value = AliasResolver(flaky).resolve(base, "m-spacing", "Default")

        assert isinstance(value, AliasValue)
        assert value.alias_name == UNRESOLVED_ALIAS_NAME


class TestAliasDepth:
    def test_ten_hops_resolve(self) -> None:
        value = _resolve_first(_chain_document(10))

        assert value.alias_name == "Chain/1"
        assert value.resolved_value == NumberValue(value=42)

    def test_limit_hops_resolve(self) -> None:
        value = _resolve_first(_chain_document(MAX_ALIAS_DEPTH + 1))

        assert value.resolved_value == NumberValue(value=42)

    @pytest.mark.parametrize("hops", [MAX_ALIAS_DEPTH + 2, 15])
    def test_too_deep_gives_up(self, hops: int) -> None:
        value = _resolve_first(_chain_document(hops))

        assert isinstance(value, AliasValue)
        assert value.alias_name == "Chain/1"
        assert value.resolved_value is None

    def test_cycle_terminates(self) -> None:
        value = _resolve_first(_chain_document(3, cycle=True))

        assert isinstance(value, AliasValue)
        assert value.resolved_value is None

    def test_self_reference_terminates(self) -> None:
        collection = VariableCollection(id="c", name="C", modes=[Mode(mode_id="m", name="M")])
        loop = Variable(
            id="v",
            name="Loop",
            resolved_type=VariableType.COLOR,
            variable_collection_id="c",
            values_by_mode={"m": VariableAlias(id="v")},
        )
        document = InMemoryDocument(collections=[collection], variables=[loop])

        value = AliasResolver(document).resolve(loop, "m", "M")

        assert value.alias_name == "Loop"
        assert value.resolved_value is None


class TestModeLookup:
    def test_by_name(self, theme_collection: VariableCollection) -> None:
        assert mode_id_for_name(theme_collection, "Dark") == "m-dark"

    def test_falls_back_to_default(self, theme_collection: VariableCollection) -> None:
        assert mode_id_for_name(theme_collection, "Sepia") == "m-light"

    def test_explicit_default_mode(self) -> None:
        collection = VariableCollection(
            id="c",
            name="C",
            modes=[Mode(mode_id="a", name="A"), Mode(mode_id="b", name="B")],
            default_mode_id="b",
        )
        assert mode_id_for_name(collection, "Z") == "b"


def test_color_alpha_is_kept() -> None:
    collection = VariableCollection(id="c", name="C", modes=[Mode(mode_id="m", name="M")])
    overlay = Variable(
        id="v",
        name="Overlay",
        resolved_type=VariableType.COLOR,
        variable_collection_id="c",
        values_by_mode={"m": RGBA(r=0, g=0, b=0, a=0.5)},
    )
    document = InMemoryDocument(collections=[collection], variables=[overlay])

    assert AliasResolver(document).resolve(overlay, "m", "M").a == 0.5
