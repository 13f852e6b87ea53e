"""Non-backtracking (Hashimoto) matrices over oriented edges.

The Hashimoto matrix B is indexed by oriented edges: B[k, l] = 1 iff the
head of edge k is the tail of edge l and the walk k -> l does not
immediately return, i.e. tail(k) != head(l). Self-loops are ignored.

For symmetric adjacency matrices the oriented edges are labelled
canonically: edges 0..m-1 run forward (i -> j with i < j, row-major) and
edge k + m is the reverse of edge k. Otherwise every adjacency entry off
the diagonal is one oriented edge, in row-major order.
"""

import logging
from dataclasses import dataclass

import numpy as np

from spectragraph.graph.validation import is_symmetric

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class OrientedEdges:
    """Tail and head vertex index of every oriented edge."""

    tails: np.ndarray  # int array of shape (E,)
    heads: np.ndarray  # int array of shape (E,)

    def __len__(self) -> int:
        return len(self.tails)


def oriented_edges(adjacency: np.ndarray) -> OrientedEdges:
    """Enumerate oriented edges of a graph in the canonical order.

    Args:
        adjacency: 0/1 adjacency matrix of shape (n, n).

    Returns:
        OrientedEdges; for symmetric input edge k and k + m are reverses.
    """
    if is_symmetric(adjacency):
        forward_tails, forward_heads = np.nonzero(np.triu(adjacency, k=1))
        tails = np.concatenate([forward_tails, forward_heads])
        heads = np.concatenate([forward_heads, forward_tails])
    else:
        off_diagonal = adjacency.copy()
        np.fill_diagonal(off_diagonal, 0)
        tails, heads = np.nonzero(off_diagonal)
    return OrientedEdges(
        tails=np.asarray(tails, dtype=np.int64),
        heads=np.asarray(heads, dtype=np.int64),
    )


def hashimoto_matrix(edges: OrientedEdges) -> np.ndarray:
    """Build the non-backtracking matrix for a list of oriented edges.

    Compares every ordered pair of oriented edges: O(E^2) time and memory.

    Returns:
        Int array of shape (E, E) with entries in {0, 1}.
    """
    continues = edges.heads[:, None] == edges.tails[None, :]
    backtracks = edges.tails[:, None] == edges.heads[None, :]
    return (continues & ~backtracks).astype(np.int64)


class ModifiableHashimoto:
    """Hashimoto matrix supporting virtual removal of one vertex.

    Stores the plain matrix B and, per row k, the linking vertex head(k)
    through which every walk k -> l passes. Removing vertex i zeroes the
    entries whose linking vertex is i; any id that is not a vertex
    (e.g. -1) leaves B unchanged.
    """

    def __init__(self, adjacency: np.ndarray) -> None:
        self.edges = oriented_edges(adjacency)
        self.matrix = hashimoto_matrix(self.edges)
        self.matrix.setflags(write=False)
        self.linking_vertices = self.edges.heads
        log.debug(
            "Modifiable Hashimoto matrix built: %d oriented edges, %d links",
            len(self.edges),
            int(self.matrix.sum()),
        )

    @property
    def size(self) -> int:
        return len(self.edges)

    def evaluate(self, removed: int) -> np.ndarray:
        """Hashimoto matrix with vertex `removed` virtually deleted."""
        through_removed = self.linking_vertices == removed
        if not through_removed.any():
            return self.matrix.copy()
        return np.where(through_removed[:, None], 0, self.matrix)
