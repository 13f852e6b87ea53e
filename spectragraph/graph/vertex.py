"""Vertex abstraction shared by all traversal and shortest-path algorithms.

A vertex carries its position in the graph, a name, back-references to
its neighbours, and the transient fields algorithms write: the
mark/in-process flags of the traversal state machine, a tentative
distance and a weakly referenced predecessor.
"""

import math
import weakref
from enum import Enum
from typing import Protocol, runtime_checkable


class VertexState(Enum):
    """Observable traversal states of a vertex."""

    INITIAL = "initial"  # unmarked, not in process
    ACTIVE = "active"  # unmarked, in process (cycle/SCC search only)
    READY = "ready"  # marked, not in process


@runtime_checkable
class Vertible(Protocol):
    """Capabilities every vertex type must provide to the graph algorithms."""

    index: int
    name: str
    adjacency: tuple
    marked: bool
    in_process: bool
    distance: float

    @property
    def predecessor(self): ...

    def copy(self): ...

    def mark(self) -> None: ...


class Vertex:
    """A graph vertex.

    Args:
        index: Position in the owning graph's vertex array (-1 if unplaced).
        name: Display name; defaults to the index as a string.
    """

    __slots__ = (
        "index",
        "name",
        "adjacency",
        "_marked",
        "_in_process",
        "distance",
        "_predecessor",
        "__weakref__",
    )

    def __init__(self, index: int = -1, name: str | None = None) -> None:
        self.index = index
        self.name = str(index) if name is None else name
        self.adjacency: tuple["Vertex", ...] = ()
        self._marked = False
        self._in_process = False
        self.distance = math.inf
        self._predecessor: weakref.ref | None = None

    def copy(self) -> "Vertex":
        """Fresh vertex with the same index and name and no neighbours."""
        return type(self)(self.index, self.name)

    # -- traversal flags -------------------------------------------------

    @property
    def marked(self) -> bool:
        return self._marked

    @marked.setter
    def marked(self, value: bool) -> None:
        assert not (value and self._in_process), (
            f"vertex {self.name} cannot be marked while in process"
        )
        self._marked = value

    @property
    def in_process(self) -> bool:
        return self._in_process

    @in_process.setter
    def in_process(self, value: bool) -> None:
        assert not (value and self._marked), (
            f"vertex {self.name} cannot enter process once marked"
        )
        self._in_process = value

    def mark(self) -> None:
        self.marked = True

    def reset(self) -> None:
        """Return to the initial traversal state."""
        self._marked = False
        self._in_process = False

    @property
    def state(self) -> VertexState:
        assert not (self._marked and self._in_process), (
            f"vertex {self.name} is both marked and in process"
        )
        if self._in_process:
            return VertexState.ACTIVE
        if self._marked:
            return VertexState.READY
        return VertexState.INITIAL

    # -- shortest paths --------------------------------------------------

    @property
    def predecessor(self) -> "Vertex | None":
        return None if self._predecessor is None else self._predecessor()

    @predecessor.setter
    def predecessor(self, vertex: "Vertex | None") -> None:
        self._predecessor = None if vertex is None else weakref.ref(vertex)

    def __repr__(self) -> str:
        return f"Vertex({self.index}, {self.name!r})"

    def __str__(self) -> str:
        return self.name
