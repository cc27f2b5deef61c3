"""Shared pydantic configuration for tokensync models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    """Immutable record serialised with camelCase keys."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)

    def to_wire(self) -> dict:
        """Dump as JSON-compatible data with wire names, omitting absent fields."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class DocumentModel(BaseModel):
    """Mutable host-document object; accepts camelCase or snake_case input."""

    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)
