"""Weighted graphs and single-source / all-pairs shortest paths.

Missing edges are encoded in the weight matrix by +inf (or 0): the
adjacency is derived as adjacency[i, j] = 1 iff weight[i, j] is neither
0 nor +inf.
"""

import heapq
import logging
from collections.abc import Sequence

import numpy as np

from spectragraph.errors import (
    InvalidGraphStructureError,
    NegativeCycleError,
    NegativeWeightError,
)
from spectragraph.graph.graph import Graph, _read_only
from spectragraph.graph.types import AllPairsPaths, SingleSourcePaths
from spectragraph.graph.validation import validate_weight
from spectragraph.graph.vertex import Vertex

log = logging.getLogger(__name__)


class WeightedGraph(Graph):
    """A directed or undirected graph with real edge weights.

    Args:
        vertices: Vertex objects, one per weight matrix row.
        weight: n x n float matrix; +inf or 0 means "no edge".
        undirected: Declare the graph undirected; requires a symmetric
            weight matrix.

    Raises:
        InvalidGraphStructureError: If the weight matrix is not square,
            contains NaN, does not match the vertex count, or is
            asymmetric for an undirected graph.
    """

    weighted = True

    def __init__(
        self,
        vertices: Sequence[Vertex],
        weight,
        undirected: bool = False,
    ) -> None:
        weight = np.array(weight, dtype=np.float64, copy=True)
        errors = validate_weight(weight, len(vertices), undirected)
        if errors:
            raise InvalidGraphStructureError("; ".join(errors))
        adjacency = ((weight != 0) & (weight != np.inf)).astype(np.int64)
        super().__init__(vertices, adjacency, undirected)
        self.weight = _read_only(weight)

    @classmethod
    def create(cls, weight, undirected: bool = False) -> "WeightedGraph":
        """Build a weighted graph with vertices named "0" .. "n-1"."""
        weight = np.asarray(weight, dtype=np.float64)
        if weight.ndim != 2:
            raise InvalidGraphStructureError(
                f"Weight matrix must be 2-D, got {weight.ndim} dimensions"
            )
        vertices = [Vertex(i) for i in range(weight.shape[0])]
        return cls(vertices, weight, undirected)

    def _edge_arrays(self) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
        tails, heads = np.nonzero(self.adjacency)
        return tails, heads, self.weight[tails, heads]

    def _paths_from_vertices(self, source: int) -> SingleSourcePaths:
        distance = np.array([v.distance for v in self.vertices], dtype=np.float64)
        predecessor = np.array(
            [-1 if v.predecessor is None else v.predecessor.index for v in self.vertices],
            dtype=np.int64,
        )
        return SingleSourcePaths(source=source, distance=distance, predecessor=predecessor)

    def _initialize_single_source(self, s: int) -> None:
        if not 0 <= s < len(self.vertices):
            raise IndexError(f"Source vertex {s} out of range [0, {len(self.vertices)})")
        for v in self.vertices:
            v.distance = np.inf
            v.predecessor = None
        self.vertices[s].distance = 0.0

    # ------------------------------------------------------------------
    # Single source
    # ------------------------------------------------------------------

    def dijkstra(self, s: int) -> SingleSourcePaths:
        """Shortest paths from vertex s with a binary heap.

        Stale heap entries are skipped on extraction instead of being
        decreased in place. Every vertex's distance and predecessor are
        updated as a side effect.

        Raises:
            NegativeWeightError: If any edge has a negative weight.
        """
        tails, heads, weights = self._edge_arrays()
        negative = weights < 0
        if negative.any():
            k = int(np.flatnonzero(negative)[0])
            raise NegativeWeightError(
                f"Dijkstra is not applicable: edge ({tails[k]},{heads[k]}) "
                f"has weight {weights[k]:g}"
            )

        self._initialize_single_source(s)
        done = np.zeros(len(self.vertices), dtype=bool)
        heap = [(0.0, s)]
        while heap:
            d, i = heapq.heappop(heap)
            if done[i]:
                continue
            done[i] = True
            u = self.vertices[i]
            for v in u.adjacency:
                candidate = d + self.weight[i, v.index]
                if candidate < v.distance:
                    v.distance = candidate
                    v.predecessor = u
                    heapq.heappush(heap, (candidate, v.index))

        log.debug("Dijkstra from %d reached %d vertices", s, int(done.sum()))
        return self._paths_from_vertices(s)

    def bellman_ford(self, s: int) -> SingleSourcePaths:
        """Shortest paths from vertex s by |V| - 1 rounds of edge relaxation.

        Stops early once a round changes nothing. Every vertex's distance
        and predecessor are updated as a side effect.

        Raises:
            NegativeCycleError: If a negative cycle is reachable from s.
        """
        self._initialize_single_source(s)
        tails, heads, weights = self._edge_arrays()
        n = len(self.vertices)
        distance = np.full(n, np.inf)
        distance[s] = 0.0
        predecessor = np.full(n, -1, dtype=np.int64)

        for round_ in range(1, n):
            changed = False
            for u, v, w in zip(tails.tolist(), heads.tolist(), weights.tolist()):
                d = distance[u] + w
                if d < distance[v]:
                    distance[v] = d
                    predecessor[v] = u
                    changed = True
            if not changed:
                log.debug("Bellman-Ford from %d converged after %d rounds", s, round_)
                break

        for u, v, w in zip(tails.tolist(), heads.tolist(), weights.tolist()):
            if distance[u] + w < distance[v]:
                raise NegativeCycleError(
                    f"Negative cycle reachable from vertex {s} through edge ({u},{v})"
                )

        for i, vertex in enumerate(self.vertices):
            vertex.distance = float(distance[i])
            vertex.predecessor = None if predecessor[i] < 0 else self.vertices[predecessor[i]]
        return SingleSourcePaths(source=s, distance=distance, predecessor=predecessor)

    # ------------------------------------------------------------------
    # All pairs
    # ------------------------------------------------------------------

    def floyd_warshall(self) -> AllPairsPaths:
        """All-pairs shortest paths.

        dist starts from the edge weights (+inf for missing edges, 0 on
        the diagonal unless a negative self-loop is present). next[u, v]
        records the last intermediate vertex that shortened the u-v
        distance, -1 if the direct edge is best or v is unreachable.
        """
        n = len(self.vertices)
        dist = np.where(self.adjacency == 1, self.weight, np.inf)
        np.fill_diagonal(dist, np.minimum(np.diag(dist), 0.0))
        nxt = np.full((n, n), -1, dtype=np.int64)

        for u in range(n):
            through_u = dist[:, u, None] + dist[None, u, :]
            shorter = through_u < dist
            dist = np.where(shorter, through_u, dist)
            nxt[shorter] = u

        if n and (np.diag(dist) < 0).any():
            log.warning("Floyd-Warshall: graph contains a negative cycle")
        return AllPairsPaths(dist=dist, next=nxt)
