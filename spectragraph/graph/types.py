"""Graph data records: edges and shortest-path results."""

import math
from dataclasses import dataclass

import numpy as np

from spectragraph.graph.vertex import Vertex


@dataclass(frozen=True, slots=True)
class Edge:
    """An edge between two vertices, optionally weighted.

    Undirected edges are labelled {u,v}, directed ones (u,v); weighted
    edges are labelled by their weight.
    """

    start: Vertex
    end: Vertex
    directed: bool = True
    weight: float | None = None

    @property
    def weighted(self) -> bool:
        return self.weight is not None

    @property
    def label(self) -> str:
        if self.weight is not None:
            return f"{self.weight:g}"
        if self.directed:
            return f"({self.start},{self.end})"
        return f"{{{self.start},{self.end}}}"

    def __str__(self) -> str:
        return self.label


@dataclass(frozen=True)
class SingleSourcePaths:
    """Distances and predecessors from one source vertex.

    Uses frozen=True but omits slots=True since numpy arrays don't
    interact well with __slots__.
    """

    source: int
    distance: np.ndarray  # float array of shape (n,), inf if unreachable
    predecessor: np.ndarray  # int array of shape (n,), -1 for source/unreachable

    def path_to(self, target: int) -> list[int]:
        """Vertex indices from the source to `target`, empty if unreachable."""
        if target == self.source:
            return [self.source]
        if math.isinf(self.distance[target]):
            return []
        route = [target]
        current = target
        while current != self.source:
            current = int(self.predecessor[current])
            if current < 0 or len(route) > len(self.distance):
                return []
            route.append(current)
        route.reverse()
        return route


@dataclass(frozen=True)
class AllPairsPaths:
    """Floyd-Warshall distance matrix and intermediate-vertex table.

    next[u, v] is a vertex lying on a shortest u-v path, or -1 if the
    best known path is the direct edge (or no path exists).
    """

    dist: np.ndarray  # float array of shape (n, n)
    next: np.ndarray  # int array of shape (n, n)

    def path(self, u: int, v: int) -> list[int]:
        """Vertex indices of a shortest u-v path, empty if unreachable."""
        if u == v:
            return [u]
        if math.isinf(self.dist[u, v]):
            return []
        middle = int(self.next[u, v])
        if middle < 0:
            return [u, v]
        return self.path(u, middle)[:-1] + self.path(middle, v)
