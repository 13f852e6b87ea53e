"""Modularity-maximising cluster detection.

Two strategies:
- greedy agglomeration (Brandes et al. 2008): start from singletons,
  repeatedly apply the single merge that yields the highest modularity,
  and keep the best level seen. O(n^5) with dense modularity evaluation.
- exhaustive search over every set partition of the vertices, enumerated
  as restricted growth strings. The number of partitions is the Bell
  number B(n), so this is only practical for a dozen or so vertices;
  callers are responsible for guarding the size.
"""

import logging
from collections.abc import Iterator

import numpy as np

from spectragraph.clustering.clustering import Clustering
from spectragraph.linalg.decomposition import EPSILON

log = logging.getLogger(__name__)


def restricted_growth_strings(n: int) -> Iterator[tuple[int, ...]]:
    """Yield every set partition of n elements in lexicographic order.

    Each partition is a tuple a with a[0] = 0 and
    a[i] <= 1 + max(a[:i]), i.e. a contiguous vertex distribution. The
    first string is all zeros (one cluster), the last is 0, 1, ..., n-1
    (singletons).
    """
    if n == 0:
        yield ()
        return
    a = [0] * n
    prefix_max = [0] * n  # prefix_max[i] = max(a[:i + 1])
    while True:
        yield tuple(a)
        i = n - 1
        while i > 0 and a[i] > prefix_max[i - 1]:
            i -= 1
        if i == 0:
            return
        a[i] += 1
        prefix_max[i] = max(prefix_max[i - 1], a[i])
        for k in range(i + 1, n):
            a[k] = 0
            prefix_max[k] = prefix_max[i]


def greedy_clustering(
    adjacency: np.ndarray,
    edges: int,
    indeg: np.ndarray,
    outdeg: np.ndarray,
) -> tuple[Clustering, float]:
    """Greedy agglomerative modularity clustering.

    Level k holds n - k clusters; on ties the first merge (j, i) with
    j < i in increasing i is kept, and the earliest best level wins.

    Returns:
        (clustering, modularity) of the best level.
    """
    n = len(adjacency)
    if n == 0:
        return Clustering(np.zeros(0, dtype=np.int64)), 0.0

    current = Clustering(np.arange(n))
    best, best_q = current, current.modularity(adjacency, edges, indeg, outdeg)
    for level in range(1, n):
        level_best: Clustering | None = None
        level_q = -np.inf
        for i in range(1, current.number_of_clusters):
            for j in range(i):
                candidate = current.merge(j, i)
                q = candidate.modularity(adjacency, edges, indeg, outdeg)
                if q > level_q:
                    level_best, level_q = candidate, q
        current = level_best
        log.debug("Level %d (%d clusters): Q=%.6f", level, n - level, level_q)
        if level_q > best_q:
            best, best_q = current, level_q
    return best, best_q


def exact_clusterings(
    adjacency: np.ndarray,
    edges: int,
    indeg: np.ndarray,
    outdeg: np.ndarray,
) -> tuple[list[Clustering], float]:
    """All partitions of maximal modularity, by exhaustion.

    Modularities within EPSILON of the best are treated as ties; the list
    keeps restricted-growth order.

    Returns:
        (clusterings, modularity).
    """
    n = len(adjacency)
    best: list[Clustering] = []
    best_q = -np.inf
    counter = 0
    for distribution in restricted_growth_strings(n):
        counter += 1
        candidate = Clustering(distribution)
        q = candidate.modularity(adjacency, edges, indeg, outdeg)
        if q > best_q + EPSILON:
            best, best_q = [candidate], q
        elif abs(q - best_q) <= EPSILON:
            best.append(candidate)
    log.debug("Enumerated %d partitions of %d vertices", counter, n)
    return best, float(best_q)


class ClusterDetection:
    """Modularity clustering for a graph; mixed into Graph.

    Expects adjacency, number_of_edges, undirected and the degree
    accessors of the host class.
    """

    def _modularity_inputs(self):
        if self.undirected:
            degrees = self.get_degrees()
            return self.adjacency, self.number_of_edges, degrees, degrees
        return (
            self.adjacency,
            self.number_of_edges,
            self.get_indegrees(),
            self.get_outdegrees(),
        )

    def modularity(self, clustering: Clustering) -> float:
        return clustering.modularity(*self._modularity_inputs())

    def detect_clusters(self) -> Clustering:
        """Clustering found by greedy modularity agglomeration."""
        clustering, q = greedy_clustering(*self._modularity_inputs())
        log.info(
            "Greedy clustering: %d clusters, Q=%.6f",
            clustering.number_of_clusters,
            q,
        )
        return clustering

    def optimal_clusterings(self) -> list[Clustering]:
        """Every clustering of maximal modularity (exhaustive)."""
        clusterings, q = exact_clusterings(*self._modularity_inputs())
        log.info("Exact clustering: %d optimal partitions, Q=%.6f", len(clusterings), q)
        return clusterings

    def detect_clusters_exactly(self) -> Clustering:
        """First clustering of maximal modularity in restricted-growth order."""
        return self.optimal_clusterings()[0]
