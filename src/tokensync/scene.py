"""
Host scene-graph contract and an in-memory implementation.

The sync engine only needs to find nodes by id, walk parents and children,
and move, insert or remove rows. Visual construction is the renderer's
business and goes through the same small surface.
"""

from __future__ import annotations

import asyncio
import itertools
from collections.abc import Iterator, Sequence
from enum import StrEnum
from typing import Protocol


class NodeKind(StrEnum):
    PAGE = "PAGE"
    FRAME = "FRAME"
    TEXT = "TEXT"
    RECTANGLE = "RECTANGLE"


class SceneNode(Protocol):
    id: str
    name: str
    kind: NodeKind
    layout_mode: str | None
    item_spacing: float
    x: float
    y: float
    width: float
    height: float

    @property
    def parent(self) -> SceneNode | None: ...

    @property
    def children(self) -> Sequence[SceneNode]: ...

    def append_child(self, child: SceneNode) -> None: ...

    def insert_child(self, index: int, child: SceneNode) -> None: ...

    def remove(self) -> None: ...

    def resize(self, width: float, height: float) -> None: ...


class Scene(Protocol):
    """The design tool's canvas, as seen by the renderer and the sync engine."""

    @property
    def current_page(self) -> SceneNode: ...

    def get_node(self, node_id: str) -> SceneNode | None: ...

    def create_frame(self, name: str, layout_mode: str | None = "VERTICAL") -> SceneNode: ...

    def create_text(
        self, characters: str, *, font_family: str, font_style: str, font_size: float
    ) -> SceneNode: ...

    def create_rectangle(self, name: str, width: float, height: float) -> SceneNode: ...

    async def load_font(self, family: str, style: str) -> None: ...

    def scroll_into_view(self, nodes: Sequence[SceneNode]) -> None: ...


def index_in_parent(node: SceneNode) -> int:
    """Position of *node* among its siblings, or -1 when detached."""
    parent = node.parent
    if parent is None:
        return -1
    for i, sibling in enumerate(parent.children):
        if sibling.id == node.id:
            return i
    return -1


# =============================================================================
# In-memory scene
# =============================================================================


class MemoryNode:
    """A node in a :class:`MemoryScene`."""

    def __init__(
        self,
        scene: MemoryScene,
        node_id: str,
        name: str,
        kind: NodeKind,
        layout_mode: str | None = None,
    ) -> None:
        self._scene = scene
        self.id = node_id
        self.name = name
        self.kind = kind
        self.layout_mode = layout_mode
        self.item_spacing = 0.0
        self.x = 0.0
        self.y = 0.0
        self.width = 0.0
        self.height = 0.0
        self.characters: str | None = None
        self.font: tuple[str, str, float] | None = None
        self._parent: MemoryNode | None = None
        self._children: list[MemoryNode] = []

    def __repr__(self) -> str:
        return f"MemoryNode({self.id!r}, {self.name!r}, {self.kind.value})"

    @property
    def parent(self) -> MemoryNode | None:
        return self._parent

    @property
    def children(self) -> Sequence[MemoryNode]:
        return tuple(self._children)

    def append_child(self, child: MemoryNode) -> None:
        child._detach()
        child._parent = self
        self._children.append(child)

    def insert_child(self, index: int, child: MemoryNode) -> None:
        child._detach()
        child._parent = self
        self._children.insert(index, child)

    def remove(self) -> None:
        """Detach from the tree and forget this node and its descendants."""
        self._detach()
        for node in self.walk():
            self._scene._forget(node.id)

    def resize(self, width: float, height: float) -> None:
        self.width = width
        self.height = height

    def walk(self) -> Iterator[MemoryNode]:
        """This node and all descendants, depth first."""
        yield self
        for child in self._children:
            yield from child.walk()

    def find_child(self, name: str) -> MemoryNode | None:
        for child in self._children:
            if child.name == name:
                return child
        return None

    def texts(self) -> list[str]:
        """Characters of every text node below this one, in tree order."""
        return [n.characters for n in self.walk() if n.characters is not None]

    def _detach(self) -> None:
        if self._parent is not None:
            self._parent._children.remove(self)
            self._parent = None


class MemoryScene:
    """Complete in-process scene; used by the CLI and the tests.

    ``missing_fonts`` lists families whose load fails, to exercise the
    renderer's fallback font path.
    """

    def __init__(self, missing_fonts: Sequence[str] = ()) -> None:
        self._ids = itertools.count(1)
        self._nodes: dict[str, MemoryNode] = {}
        self._page = MemoryNode(self, "0:1", "Page 1", NodeKind.PAGE)
        self._nodes[self._page.id] = self._page
        self.missing_fonts = set(missing_fonts)
        self.font_loads = 0
        self.viewport: list[str] = []

    @property
    def current_page(self) -> MemoryNode:
        return self._page

    def get_node(self, node_id: str) -> MemoryNode | None:
        return self._nodes.get(node_id)

    def create_frame(self, name: str, layout_mode: str | None = "VERTICAL") -> MemoryNode:
        return self._register(name, NodeKind.FRAME, layout_mode)

    def create_text(
        self, characters: str, *, font_family: str, font_style: str, font_size: float
    ) -> MemoryNode:
        node = self._register(characters[:40], NodeKind.TEXT)
        node.characters = characters
        node.font = (font_family, font_style, font_size)
        return node

    def create_rectangle(self, name: str, width: float, height: float) -> MemoryNode:
        node = self._register(name, NodeKind.RECTANGLE)
        node.resize(width, height)
        return node

    async def load_font(self, family: str, style: str) -> None:
        await asyncio.sleep(0)
        self.font_loads += 1
        if family in self.missing_fonts:
            raise LookupError(f"Font not available: {family} {style}")

    def scroll_into_view(self, nodes: Sequence[SceneNode]) -> None:
        self.viewport = [n.id for n in nodes]

    def _register(self, name: str, kind: NodeKind, layout_mode: str | None = None) -> MemoryNode:
        node = MemoryNode(self, f"1:{next(self._ids)}", name, kind, layout_mode)
        self._nodes[node.id] = node
        return node

    def _forget(self, node_id: str) -> None:
        self._nodes.pop(node_id, None)
