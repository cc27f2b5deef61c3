"""
Source-of-truth contract.

The extraction layer and the alias resolver only ever read the document
through :class:`SourceDocument`. A host binding implements it against the
design tool; :class:`InMemoryDocument` implements it over plain models and
is what the CLI and the tests use.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol, TypeVar

from pydantic import ValidationError

from .errors import DocumentLoadError, ErrorContext
from .ir.document import (
    DocumentData,
    EffectStyle,
    GridStyle,
    PaintStyle,
    TextStyle,
    Variable,
    VariableCollection,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SourceDocument(Protocol):
    """Read-only view of the live design document."""

    @property
    def name(self) -> str: ...

    @property
    def supports_variables(self) -> bool: ...

    def local_paint_styles(self) -> Sequence[PaintStyle]: ...

    def local_text_styles(self) -> Sequence[TextStyle]: ...

    def local_effect_styles(self) -> Sequence[EffectStyle]: ...

    def local_grid_styles(self) -> Sequence[GridStyle]: ...

    def local_variable_collections(self) -> Sequence[VariableCollection]: ...

    def local_variables(self) -> Sequence[Variable]: ...

    def get_variable(self, variable_id: str) -> Variable | None: ...

    def get_collection(self, collection_id: str) -> VariableCollection | None: ...


def try_lookup(lookup: Callable[[str], T | None], identity: str) -> T | None:
    """Run a host lookup, treating a host exception the same as not-found."""
    try:
        return lookup(identity)
    except Exception as e:
        logger.debug("Lookup of %s failed: %s", identity, e)
        return None


def find_variable(source: SourceDocument, variable_id: str) -> Variable | None:
    return try_lookup(source.get_variable, variable_id)


def find_collection(source: SourceDocument, collection_id: str) -> VariableCollection | None:
    return try_lookup(source.get_collection, collection_id)


@dataclass
class InMemoryDocument:
    """A complete in-process source document.

    Lists are held by reference, so tests can mutate styles and variables
    in place and the next extraction sees the change.
    """

    name: str = "Untitled"
    paint_styles: list[PaintStyle] = field(default_factory=list)
    text_styles: list[TextStyle] = field(default_factory=list)
    effect_styles: list[EffectStyle] = field(default_factory=list)
    grid_styles: list[GridStyle] = field(default_factory=list)
    collections: list[VariableCollection] = field(default_factory=list)
    variables: list[Variable] = field(default_factory=list)
    supports_variables: bool = True

    @classmethod
    def from_data(cls, data: DocumentData) -> InMemoryDocument:
        return cls(
            name=data.name,
            paint_styles=list(data.paint_styles),
            text_styles=list(data.text_styles),
            effect_styles=list(data.effect_styles),
            grid_styles=list(data.grid_styles),
            collections=list(data.variable_collections or []),
            variables=list(data.variables),
            supports_variables=data.variable_collections is not None,
        )

    def local_paint_styles(self) -> Sequence[PaintStyle]:
        return list(self.paint_styles)

    def local_text_styles(self) -> Sequence[TextStyle]:
        return list(self.text_styles)

    def local_effect_styles(self) -> Sequence[EffectStyle]:
        return list(self.effect_styles)

    def local_grid_styles(self) -> Sequence[GridStyle]:
        return list(self.grid_styles)

    def local_variable_collections(self) -> Sequence[VariableCollection]:
        return list(self.collections)

    def local_variables(self) -> Sequence[Variable]:
        return list(self.variables)

    def get_variable(self, variable_id: str) -> Variable | None:
        for variable in self.variables:
            if variable.id == variable_id:
                return variable
        return None

    def get_collection(self, collection_id: str) -> VariableCollection | None:
        for collection in self.collections:
            if collection.id == collection_id:
                return collection
        return None

    def remove_variable(self, variable_id: str) -> None:
        self.variables = [v for v in self.variables if v.id != variable_id]


def load_document(path: Path) -> InMemoryDocument:
    """Load a document exported as JSON (camelCase host field names).

    Raises:
        DocumentLoadError: If the file is unreadable or does not validate.
    """
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise DocumentLoadError(f"Cannot read document: {e}", ErrorContext(file=path)) from e

    try:
        data = DocumentData.model_validate(raw)
    except ValidationError as e:
        raise DocumentLoadError(f"Invalid document: {e}", ErrorContext(file=path)) from e

    logger.debug(
        "Loaded document %s: %d styles, %d variables",
        data.name,
        len(data.paint_styles) + len(data.text_styles) + len(data.effect_styles) + len(data.grid_styles),
        len(data.variables),
    )
    return InMemoryDocument.from_data(data)
