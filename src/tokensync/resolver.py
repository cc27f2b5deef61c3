"""
Variable value resolution, including alias chains across collections.

A variable's raw value for a mode is either a concrete scalar or an alias
to another variable. Aliases are followed by mode *name*, because the
target usually lives in a different collection whose mode ids differ.
"""

from __future__ import annotations

import logging

from .codec import to_terminal
from .ir.document import Variable, VariableAlias, VariableCollection
from .ir.values import (
    UNRESOLVED_ALIAS_NAME,
    AliasValue,
    ResolvedValue,
    TerminalValue,
    UnresolvedValue,
)
from .source import SourceDocument, find_collection, find_variable

logger = logging.getLogger(__name__)

# Alias hops followed before giving up; also what stops alias cycles.
MAX_ALIAS_DEPTH = 10


class AliasResolver:
    """Resolves variables against a source document. Never mutates it."""

    def __init__(self, source: SourceDocument) -> None:
        self._source = source

    def resolve(
        self, variable: Variable, mode_id: str, mode_name: str | None
    ) -> ResolvedValue | None:
        """Resolve *variable* for one mode of its own collection.

        Args:
            variable: The variable to resolve.
            mode_id: Mode id within the variable's collection.
            mode_name: Display name of that mode, used to pick the matching
                mode in the collection of any alias target. When None the
                alias is reported without a resolved value.

        Returns:
            A terminal value, an alias carrying the target's terminal value,
            an unresolved marker for unexpected shapes, or None when the
            variable has no value for this mode.
        """
        raw = variable.values_by_mode.get(mode_id)
        if raw is None:
            return None

        if isinstance(raw, VariableAlias):
            target = find_variable(self._source, raw.id)
            if target is None:
                return AliasValue(alias_name=UNRESOLVED_ALIAS_NAME, alias_id=raw.id)
            resolved = self.resolve_chain(target, mode_name, 0) if mode_name else None
            return AliasValue(alias_name=target.name, alias_id=target.id, resolved_value=resolved)

        terminal = to_terminal(variable.resolved_type, raw)
        if terminal is not None:
            return terminal
        logger.debug("Variable %s has unsupported value %r", variable.name, raw)
        return UnresolvedValue(value=str(raw))

    def resolve_chain(
        self, variable: Variable, mode_name: str, depth: int = 0
    ) -> TerminalValue | None:
        """Follow aliases from *variable* until a concrete value is found.

        Returns None if the chain breaks, has no value for the mode, or runs
        deeper than MAX_ALIAS_DEPTH.
        """
        if depth > MAX_ALIAS_DEPTH:
            logger.debug("Alias chain through %s exceeded depth %d", variable.name, MAX_ALIAS_DEPTH)
            return None

        collection = find_collection(self._source, variable.variable_collection_id)
        if collection is None:
            return None

        raw = variable.values_by_mode.get(mode_id_for_name(collection, mode_name))
        if raw is None:
            return None

        if isinstance(raw, VariableAlias):
            target = find_variable(self._source, raw.id)
            if target is None:
                return None
            return self.resolve_chain(target, mode_name, depth + 1)

        return to_terminal(variable.resolved_type, raw)

    def resolve_all_modes(self, variable: Variable) -> dict[str, ResolvedValue | None]:
        """Resolve a variable for every mode of its collection, keyed by mode name."""
        collection = find_collection(self._source, variable.variable_collection_id)
        if collection is None:
            return {}
        return {
            mode.name: self.resolve(variable, mode.mode_id, mode.name)
            for mode in collection.modes
        }


def mode_id_for_name(collection: VariableCollection, mode_name: str) -> str | None:
    """Id of the mode called *mode_name*, else the collection's default mode."""
    mode = collection.mode_named(mode_name)
    if mode is not None:
        return mode.mode_id
    return collection.default_mode_id
