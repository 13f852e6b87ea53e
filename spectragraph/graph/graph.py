"""Adjacency-matrix graph with degree, Laplacian, subgraph and spectral relevance.

A Graph owns its vertex array and a read-only 0/1 adjacency matrix.
Topology is fixed after construction; algorithms only touch per-vertex
transient fields. The non-backtracking (Hashimoto) matrix and the
network relevance of each vertex are computed lazily and cached.
"""

import logging
import time
from collections.abc import Iterable, Sequence

import numpy as np

from spectragraph.clustering.clustering import Clustering
from spectragraph.clustering.detection import ClusterDetection
from spectragraph.errors import InvalidGraphStructureError, VertexNotFoundError
from spectragraph.graph.hashimoto import ModifiableHashimoto, hashimoto_matrix, oriented_edges
from spectragraph.graph.traversal import Traversal
from spectragraph.graph.types import Edge
from spectragraph.graph.validation import validate_adjacency
from spectragraph.graph.vertex import Vertex
from spectragraph.linalg.decomposition import EPSILON
from spectragraph.linalg.eigen import MAX_POWER_ITERATIONS
from spectragraph.linalg.matrix import Matrix

log = logging.getLogger(__name__)


def _read_only(array: np.ndarray) -> np.ndarray:
    array.setflags(write=False)
    return array


class Graph(Traversal, ClusterDetection):
    """A directed or undirected, unweighted graph.

    Args:
        vertices: Vertex objects; their index and adjacency are
            (re)assigned to match their position and the matrix.
        adjacency: n x n matrix with entries in {0, 1}; entry (i, j) is 1
            iff there is an edge from vertex i to vertex j.
        undirected: Declare the graph undirected; requires a symmetric
            adjacency matrix.

    Raises:
        InvalidGraphStructureError: If the matrix is not square or not
            0/1, does not match the vertex count, or is asymmetric for an
            undirected graph.
    """

    weighted = False

    def __init__(
        self,
        vertices: Sequence[Vertex],
        adjacency,
        undirected: bool = False,
    ) -> None:
        # Checked before the int cast, which would truncate 0.5 or 1.5
        raw = np.asarray(adjacency)
        errors = validate_adjacency(raw, len(vertices), undirected)
        if errors:
            raise InvalidGraphStructureError("; ".join(errors))
        adjacency = np.array(raw, dtype=np.int64, copy=True)

        self.undirected = undirected
        self.vertices: tuple[Vertex, ...] = tuple(vertices)
        self.adjacency = _read_only(adjacency)
        self._wire_vertices()
        self.number_of_edges = self.compute_number_of_edges()

        self._hashimoto: ModifiableHashimoto | None = None
        self._relevance: dict[tuple[float, int], np.ndarray] = {}
        self._relevance_key: tuple[float, int] | None = None
        log.debug(
            "Graph built: %d vertices, %d edges, undirected=%s",
            len(self.vertices),
            self.number_of_edges,
            undirected,
        )

    def _wire_vertices(self) -> None:
        for i, vertex in enumerate(self.vertices):
            vertex.index = i
        for i, vertex in enumerate(self.vertices):
            vertex.adjacency = tuple(
                self.vertices[j] for j in np.flatnonzero(self.adjacency[i])
            )

    @classmethod
    def create(cls, adjacency, undirected: bool = False) -> "Graph":
        """Build a graph with vertices named "0" .. "n-1"."""
        adjacency = np.asarray(adjacency)
        if adjacency.ndim != 2:
            raise InvalidGraphStructureError(
                f"Adjacency matrix must be 2-D, got {adjacency.ndim} dimensions"
            )
        vertices = [Vertex(i) for i in range(adjacency.shape[0])]
        return cls(vertices, adjacency, undirected)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self.vertices)

    def get_vertex(self, i: int) -> Vertex | None:
        if 0 <= i < len(self.vertices):
            return self.vertices[i]
        return None

    def compute_number_of_edges(self) -> int:
        """Edge count; undirected graphs count each pair (and loop) once."""
        if self.undirected:
            return int(np.triu(self.adjacency).sum())
        return int(self.adjacency.sum())

    def collect_edges(self) -> list[Edge]:
        """All edges; undirected graphs list each vertex pair once (i <= j)."""
        rows, cols = np.nonzero(
            np.triu(self.adjacency) if self.undirected else self.adjacency
        )
        weight = getattr(self, "weight", None)
        return [
            Edge(
                start=self.vertices[i],
                end=self.vertices[j],
                directed=not self.undirected,
                weight=None if weight is None else float(weight[i, j]),
            )
            for i, j in zip(rows.tolist(), cols.tolist())
        ]

    # ------------------------------------------------------------------
    # Degrees
    # ------------------------------------------------------------------

    def _index_of(self, vertex: int | Vertex) -> int:
        return vertex.index if isinstance(vertex, Vertex) else int(vertex)

    def get_degree(self, vertex: int | Vertex) -> int:
        """Degree of a vertex of an undirected graph.

        Raises:
            InvalidGraphStructureError: If the graph is directed.
        """
        if not self.undirected:
            raise InvalidGraphStructureError(
                "Degree is defined for undirected graphs; use in/out-degrees"
            )
        return int(self.adjacency[self._index_of(vertex)].sum())

    def get_degrees(self) -> np.ndarray:
        if not self.undirected:
            raise InvalidGraphStructureError(
                "Degree is defined for undirected graphs; use in/out-degrees"
            )
        return self.adjacency.sum(axis=1)

    def get_indegree(self, vertex: int | Vertex) -> int:
        return int(self.adjacency[:, self._index_of(vertex)].sum())

    def get_outdegree(self, vertex: int | Vertex) -> int:
        return int(self.adjacency[self._index_of(vertex)].sum())

    def get_indegrees(self) -> np.ndarray:
        return self.adjacency.sum(axis=0)

    def get_outdegrees(self) -> np.ndarray:
        return self.adjacency.sum(axis=1)

    # ------------------------------------------------------------------
    # Matrices derived from the adjacency
    # ------------------------------------------------------------------

    def laplacian(self) -> Matrix:
        """Graph Laplacian.

        Undirected: L[i,i] = deg(i) - a[i,i], L[i,j] = -a[i,j].
        Directed: the symmetrised form L[i,i] = (in(i) + out(i))/2 - a[i,i],
        L[i,j] = -(a[i,j] + a[j,i])/2.
        """
        a = self.adjacency.astype(np.float64)
        if self.undirected:
            degree = a.sum(axis=1)
            lap = -a
        else:
            degree = (a.sum(axis=0) + a.sum(axis=1)) / 2.0
            lap = -(a + a.T) / 2.0
        np.fill_diagonal(lap, degree - np.diag(a))
        return Matrix(lap)

    def subgraph(self, vertices: Iterable[Vertex]) -> "Graph":
        """Induced subgraph on the given vertices.

        The result holds copies of the vertices re-indexed 0..k-1 in the
        order given (sets are taken in increasing index order).

        Raises:
            VertexNotFoundError: If a vertex does not belong to this graph.
        """
        if isinstance(vertices, (set, frozenset)):
            vertices = sorted(vertices, key=lambda v: v.index)
        chosen = list(vertices)
        for v in chosen:
            i = v.index
            if not (0 <= i < len(self.vertices)) or self.vertices[i] is not v:
                raise VertexNotFoundError(f"Vertex not found in graph: {v.name}")
        indices = np.array([v.index for v in chosen], dtype=np.int64)
        sub_adjacency = self.adjacency[np.ix_(indices, indices)]
        copies = [v.copy() for v in chosen]
        return Graph(copies, sub_adjacency, self.undirected)

    # ------------------------------------------------------------------
    # Non-backtracking matrix and network relevance
    # ------------------------------------------------------------------

    def compute_hashimoto(self) -> np.ndarray:
        """Non-backtracking matrix over this graph's oriented edges (O(E^2))."""
        return hashimoto_matrix(oriented_edges(self.adjacency))

    def get_modified_hashimoto(self, i: int) -> np.ndarray:
        """Hashimoto matrix with vertex i virtually removed.

        Any i outside [0, n), such as -1, returns the unmodified matrix.
        """
        if self._hashimoto is None:
            self._hashimoto = ModifiableHashimoto(self.adjacency)
        return self._hashimoto.evaluate(i)

    def compute_relevances(
        self,
        error: float = EPSILON,
        max_iterations: int = MAX_POWER_ITERATIONS,
    ) -> np.ndarray:
        """Network relevance of every vertex.

        relevance[i] = max_j lambda(M(j)) - lambda(M(i)), where lambda is
        the dominant eigenvalue and M(i) the Hashimoto matrix with vertex i
        removed. Requires one dominant-eigenvalue computation on an E x E
        matrix per vertex, sequentially; by far the most expensive
        operation of the graph. Results are cached per
        (error, max_iterations) pair.
        """
        key = (float(error), int(max_iterations))
        cached = self._relevance.get(key)
        if cached is not None:
            self._relevance_key = key
            return cached

        n = len(self.vertices)
        t0 = time.monotonic()
        if self._hashimoto is None:
            self._hashimoto = ModifiableHashimoto(self.adjacency)
        if self._hashimoto.size == 0:
            log.info("Graph has no oriented edges, all relevances are 0")
            relevance = _read_only(np.zeros(n, dtype=np.float64))
        else:
            eigenvalues = np.zeros(n, dtype=np.float64)
            for i in range(n):
                eigenvalues[i] = Matrix(
                    self.get_modified_hashimoto(i)
                ).get_dominant_eigenvalue(error, max_iterations)
            relevance = _read_only(eigenvalues.max() - eigenvalues)
            log.info(
                "Computed relevance of %d vertices over %d oriented edges in %.2fs "
                "(error=%g, max_iterations=%d)",
                n,
                self._hashimoto.size,
                time.monotonic() - t0,
                error,
                max_iterations,
            )
        self._relevance[key] = relevance
        self._relevance_key = key
        return relevance

    def _latest_relevances(self) -> np.ndarray:
        """Most recently computed relevances, or a default-tolerance run."""
        if self._relevance_key is not None:
            return self._relevance[self._relevance_key]
        return self.compute_relevances()

    def get_relevance(self, i: int) -> float:
        """Relevance of vertex i from the latest compute_relevances run."""
        return float(self._latest_relevances()[i])

    def get_relevance_clusters(self, categories: int = 5) -> Clustering:
        """Group vertices into equal-width relevance bands.

        The band from the minimum to the maximum relevance is split into
        `categories` intervals; empty intervals are dropped so cluster ids
        stay contiguous, and the most relevant vertices form the last
        cluster.
        """
        relevance = self._latest_relevances()
        if len(relevance) == 0:
            return Clustering(np.zeros(0, dtype=np.int64))
        low, high = float(relevance.min()), float(relevance.max())
        if high - low < EPSILON:
            return Clustering(np.zeros(len(relevance), dtype=np.int64))
        bands = np.floor((relevance - low) / (high - low) * categories).astype(np.int64)
        bands = np.minimum(bands, categories - 1)
        _, contiguous = np.unique(bands, return_inverse=True)
        return Clustering(contiguous.reshape(-1))

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def __str__(self) -> str:
        names = [v.name for v in self.vertices]
        width = max((len(name) for name in names), default=1)
        header = " " * (width + 1) + " ".join(name.rjust(width) for name in names)
        lines = [header]
        for name, row in zip(names, self.adjacency):
            cells = " ".join(str(int(x)).rjust(width) for x in row)
            lines.append(f"{name.rjust(width)} {cells}")
        return "\n".join(lines)

    def __repr__(self) -> str:
        kind = "undirected" if self.undirected else "directed"
        return (
            f"{type(self).__name__}({len(self.vertices)} vertices, "
            f"{self.number_of_edges} edges, {kind})"
        )
