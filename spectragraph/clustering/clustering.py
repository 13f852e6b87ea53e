"""Partition of a graph's vertices into clusters, scored by modularity."""

from collections.abc import Iterable, Sequence

import numpy as np


class Clustering:
    """A partition of vertices 0..n-1 into clusters 0..k-1.

    Args:
        vertex_distribution: vertex_distribution[i] = j means vertex i is
            in cluster j. Ids must be contiguous: every id in [0, max]
            must be used.

    Raises:
        ValueError: If an id is negative or the ids are not contiguous.
    """

    def __init__(self, vertex_distribution: Sequence[int] | np.ndarray) -> None:
        distribution = np.array(vertex_distribution, dtype=np.int64).reshape(-1)
        if distribution.size and distribution.min() < 0:
            raise ValueError(f"Cluster ids must be >= 0, got {distribution.min()}")
        k = int(distribution.max()) + 1 if distribution.size else 0
        if len(np.unique(distribution)) != k:
            raise ValueError(
                f"Cluster ids must be contiguous in [0, {k}), got "
                f"{sorted(set(distribution.tolist()))}"
            )
        distribution.setflags(write=False)
        self.vertex_distribution = distribution
        self.number_of_clusters = k

    @classmethod
    def from_clusters(cls, clusters: Iterable[Iterable[int]]) -> "Clustering":
        """Build a clustering from disjoint vertex index sets covering 0..n-1."""
        clusters = [sorted(c) for c in clusters]
        n = sum(len(c) for c in clusters)
        distribution = np.full(n, -1, dtype=np.int64)
        for j, cluster in enumerate(clusters):
            for i in cluster:
                if not 0 <= i < n or distribution[i] != -1:
                    raise ValueError(
                        f"Clusters must be disjoint and cover 0..{n - 1}, "
                        f"vertex {i} is invalid"
                    )
                distribution[i] = j
        return cls(distribution)

    def __len__(self) -> int:
        return len(self.vertex_distribution)

    def get(self, k: int) -> list[int]:
        """Vertex indices of cluster k; empty if there is no such cluster."""
        return np.flatnonzero(self.vertex_distribution == k).tolist()

    def get_clusters(self) -> list[list[int]]:
        return [self.get(k) for k in range(self.number_of_clusters)]

    def copy(self) -> "Clustering":
        return Clustering(self.vertex_distribution)

    def modularity(
        self,
        adjacency: np.ndarray,
        edges: int,
        indeg: np.ndarray,
        outdeg: np.ndarray | None = None,
    ) -> float:
        """Newman modularity of this clustering.

        Q = (1/2m) * sum over same-cluster pairs (i, j) of
        (A[i, j] - outdeg[i] * indeg[j] / 2m), with m the number of edges.
        Undirected graphs pass their degrees once as `indeg`.

        Returns:
            Q, or 0.0 for a graph without edges.
        """
        if edges == 0:
            return 0.0
        if outdeg is None:
            outdeg = indeg
        two_m = 2.0 * edges
        a = np.asarray(adjacency, dtype=np.float64)
        expected = np.outer(
            np.asarray(outdeg, dtype=np.float64), np.asarray(indeg, dtype=np.float64)
        )
        d = self.vertex_distribution
        same = d[:, None] == d[None, :]
        return float(np.where(same, a - expected / two_m, 0.0).sum() / two_m)

    def merge(self, i: int, j: int) -> "Clustering":
        """Clustering with clusters i and j merged.

        The higher of the two ids is dissolved into the lower one, and ids
        above it are shifted down by one to stay contiguous.
        """
        low, high = min(i, j), max(i, j)
        d = self.vertex_distribution.copy()
        if low == high:
            return Clustering(d)
        d[d == high] = low
        d[d > high] -= 1
        return Clustering(d)

    def describe(self, vertices: Sequence) -> str:
        """Render the clusters by vertex name, e.g. "{{a, b}, {c}}"."""
        if not len(self):
            return "{}"
        parts = (
            "{" + ", ".join(str(vertices[i].name) for i in cluster) + "}"
            for cluster in self.get_clusters()
        )
        return "{" + ", ".join(parts) + "}"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Clustering):
            return NotImplemented
        return bool(np.array_equal(self.vertex_distribution, other.vertex_distribution))

    __hash__ = None

    def __str__(self) -> str:
        if not len(self):
            return "{}"
        parts = ("{" + ", ".join(map(str, c)) + "}" for c in self.get_clusters())
        return "{" + ", ".join(parts) + "}"

    def __repr__(self) -> str:
        return f"Clustering({self.vertex_distribution.tolist()})"
