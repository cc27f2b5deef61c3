"""
Messages exchanged with the UI layer.

Inbound commands are parsed from plain dicts into a discriminated union on
``type``; outbound notifications are pydantic models posted through a
:class:`Notifier`.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime
from typing import Annotated, Any, Literal, Protocol

from pydantic import Field, TypeAdapter, ValidationError

from .errors import UnknownCommandError
from .ir.base import WireModel
from .ir.records import (
    EffectStyleRecord,
    ModeRecord,
    PaintStyleRecord,
    StyleSnapshotSet,
    TextStyleRecord,
    VariableRecord,
    VariableSnapshotSet,
)

# =============================================================================
# Outbound
# =============================================================================


class FullData(WireModel):
    styles: StyleSnapshotSet
    variables: VariableSnapshotSet


class AllDataMessage(WireModel):
    type: Literal["all-data"] = "all-data"
    payload: FullData


class DocProgressMessage(WireModel):
    """Documentation generation progress: starting, generating, done."""

    type: Literal["doc-progress"] = "doc-progress"
    status: Literal["starting", "generating", "done"]
    total: int | None = None
    current: int | None = None
    name: str | None = None
    page_count: int | None = None
    is_variable: bool | None = None
    var_count: int | None = None


class LiveSyncStatusMessage(WireModel):
    type: Literal["live-sync-status"] = "live-sync-status"
    active: bool


class LiveSyncUpdateMessage(WireModel):
    """Rows just repaired by a reconciliation pass."""

    type: Literal["live-sync-update"] = "live-sync-update"
    count: int
    timestamp: str = Field(
        default_factory=lambda: datetime.now(UTC).isoformat().replace("+00:00", "Z")
    )


class ToastMessage(WireModel):
    """Short human-readable line shown by the host."""

    type: Literal["notify"] = "notify"
    text: str


class StorageReplyMessage(WireModel):
    """Reply to a storage command; ``payload`` is sent even when null."""

    type: str
    payload: Any = None
    include_payload: bool = Field(default=True, exclude=True)

    def to_wire(self) -> dict:
        data: dict[str, Any] = {"type": self.type}
        if self.include_payload:
            data["payload"] = self.payload
        return data


class Notifier(Protocol):
    def post(self, message: WireModel) -> None: ...


class MemoryNotifier:
    """Collects posted messages in order."""

    def __init__(self) -> None:
        self.messages: list[WireModel] = []

    def post(self, message: WireModel) -> None:
        self.messages.append(message)

    def of_type(self, message_type: str) -> list[Any]:
        return [m for m in self.messages if getattr(m, "type", None) == message_type]

    def clear(self) -> None:
        self.messages.clear()


class CallbackNotifier:
    """Hands each message's wire form to a callback (the UI transport)."""

    def __init__(self, send: Callable[[dict], None]) -> None:
        self._send = send

    def post(self, message: WireModel) -> None:
        self._send(message.to_wire())


def toast_for_update(count: int, noun: str = "item") -> ToastMessage:
    plural = "s" if count > 1 else ""
    return ToastMessage(text=f"Doc updated — {count} {noun}{plural} refreshed")


# =============================================================================
# Inbound
# =============================================================================


class GroupStyles(WireModel):
    text_styles: list[TextStyleRecord] = Field(default_factory=list)
    paint_styles: list[PaintStyleRecord] = Field(default_factory=list)
    effect_styles: list[EffectStyleRecord] = Field(default_factory=list)


class StyleGroup(WireModel):
    """Styles sharing a top-level path segment, documented in one frame."""

    group_name: str
    styles: GroupStyles = Field(default_factory=GroupStyles)

    @property
    def style_count(self) -> int:
        return (
            len(self.styles.text_styles)
            + len(self.styles.paint_styles)
            + len(self.styles.effect_styles)
        )


class VariableGroup(WireModel):
    """Variables documented in one frame.

    ``depth`` is the number of leading path segments shared by the group;
    the next segment names the sub-section a variable is listed under.
    """

    group_name: str
    depth: int = 1
    variables: list[VariableRecord] = Field(default_factory=list)


class StyleDocsPayload(WireModel):
    groups: list[StyleGroup] = Field(default_factory=list)


class VariableDocsPayload(WireModel):
    modes: list[ModeRecord] = Field(default_factory=list)
    groups: list[VariableGroup] = Field(default_factory=list)
    collection_name: str | None = None


class SyncCommand(WireModel):
    type: Literal["sync"] = "sync"


class CloseCommand(WireModel):
    type: Literal["close"] = "close"


class GenerateDocsCommand(WireModel):
    type: Literal["generate-docs"] = "generate-docs"
    payload: StyleDocsPayload


class GenerateVariableDocsCommand(WireModel):
    type: Literal["generate-var-docs"] = "generate-var-docs"
    payload: VariableDocsPayload


class ResizeCommand(WireModel):
    type: Literal["resize-ui"] = "resize-ui"
    width: int
    height: int


StorageCommandType = Literal[
    "bb-get-creds",
    "bb-save-creds",
    "bb-delete-creds",
    "bb-get-reviewers",
    "bb-save-reviewers",
    "bb-get-config",
    "bb-save-config",
]


class StorageCommand(WireModel):
    """Opaque pass-through to the client key-value store."""

    type: StorageCommandType
    payload: Any = None


InboundMessage = Annotated[
    SyncCommand
    | CloseCommand
    | GenerateDocsCommand
    | GenerateVariableDocsCommand
    | ResizeCommand
    | StorageCommand,
    Field(discriminator="type"),
]

_inbound_adapter: TypeAdapter[InboundMessage] = TypeAdapter(InboundMessage)


def parse_command(raw: dict[str, Any]) -> InboundMessage:
    """Parse one inbound UI message.

    Raises:
        UnknownCommandError: If the type is unknown or the payload is invalid.
    """
    try:
        return _inbound_adapter.validate_python(raw)
    except ValidationError as e:
        raise UnknownCommandError(f"Cannot handle message {raw.get('type')!r}: {e}") from e
