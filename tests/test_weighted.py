"""Tests for weighted graphs and shortest paths."""

import math

import numpy as np
import pytest
from scipy.sparse.csgraph import shortest_path

from spectragraph.errors import (
    InvalidGraphStructureError,
    NegativeCycleError,
    NegativeWeightError,
)
from spectragraph.graph import WeightedGraph

INF = math.inf


@pytest.fixture
def path_graph() -> WeightedGraph:
    """Directed 0 -> 1 -> 2 with unit weights."""
    return WeightedGraph.create(
        [[0, 1, INF], [INF, 0, 1], [INF, INF, 0]]
    )


def _random_weights(n: int, p: float, seed: int, undirected: bool = False) -> np.ndarray:
    rng = np.random.default_rng(seed)
    w = np.where(rng.random((n, n)) < p, rng.uniform(0.5, 10.0, (n, n)), INF)
    np.fill_diagonal(w, INF)
    if undirected:
        w = np.minimum(w, w.T)
    return w


def _oracle(w: np.ndarray, directed: bool = True) -> np.ndarray:
    dense = np.where(np.isinf(w), 0.0, w)
    return shortest_path(dense, method="FW", directed=directed)


class TestConstruction:
    """Adjacency derived from weights."""

    def test_adjacency_from_weight(self, path_graph: WeightedGraph) -> None:
        np.testing.assert_array_equal(
            path_graph.adjacency, [[0, 1, 0], [0, 0, 1], [0, 0, 0]]
        )
        assert path_graph.weighted
        assert path_graph.number_of_edges == 2

    def test_zero_weight_means_no_edge(self) -> None:
        g = WeightedGraph.create([[0, 0], [2.5, 0]])
        np.testing.assert_array_equal(g.adjacency, [[0, 0], [1, 0]])

    def test_asymmetric_undirected_rejected(self) -> None:
        with pytest.raises(InvalidGraphStructureError, match="symmetric"):
            WeightedGraph.create([[0, 1], [2, 0]], undirected=True)

    def test_nan_rejected(self) -> None:
        with pytest.raises(InvalidGraphStructureError, match="NaN"):
            WeightedGraph.create([[0, math.nan], [1, 0]])

    def test_edges_carry_weights(self, path_graph: WeightedGraph) -> None:
        labels = [e.label for e in path_graph.collect_edges()]
        assert labels == ["1", "1"]


class TestDijkstra:
    """Single source shortest paths with a heap."""

    def test_path_graph_scenario(self, path_graph: WeightedGraph) -> None:
        paths = path_graph.dijkstra(0)
        np.testing.assert_array_equal(paths.distance, [0.0, 1.0, 2.0])
        np.testing.assert_array_equal(paths.predecessor, [-1, 0, 1])
        assert paths.path_to(2) == [0, 1, 2]

    def test_vertex_fields_updated(self, path_graph: WeightedGraph) -> None:
        path_graph.dijkstra(0)
        v = path_graph.vertices
        assert v[2].distance == 2.0
        assert v[2].predecessor is v[1]
        assert v[0].predecessor is None

    def test_unreachable(self, path_graph: WeightedGraph) -> None:
        paths = path_graph.dijkstra(2)
        assert math.isinf(paths.distance[0])
        assert paths.predecessor[0] == -1
        assert paths.path_to(0) == []

    @pytest.mark.parametrize("seed", [0, 1, 2])
    def test_agrees_with_scipy(self, seed: int) -> None:
        w = _random_weights(10, 0.3, seed)
        g = WeightedGraph.create(w)
        expected = _oracle(w)
        for s in range(10):
            np.testing.assert_allclose(g.dijkstra(s).distance, expected[s])

    def test_negative_weight_rejected(self) -> None:
        g = WeightedGraph.create([[0, -1], [INF, 0]])
        with pytest.raises(NegativeWeightError):
            g.dijkstra(0)


class TestBellmanFord:
    """Relaxation rounds and negative cycle detection."""

    def test_path_graph(self, path_graph: WeightedGraph) -> None:
        paths = path_graph.bellman_ford(0)
        np.testing.assert_array_equal(paths.distance, [0.0, 1.0, 2.0])
        np.testing.assert_array_equal(paths.predecessor, [-1, 0, 1])

    def test_negative_edge_without_cycle(self) -> None:
        w = [[0, 4, 2], [INF, 0, INF], [INF, -3, 0]]
        paths = WeightedGraph.create(w).bellman_ford(0)
        np.testing.assert_array_equal(paths.distance, [0.0, -1.0, 2.0])
        assert paths.path_to(1) == [0, 2, 1]

    def test_negative_cycle_detected(self) -> None:
        w = [[0, 1, INF], [INF, 0, -2], [INF, 1, 0]]
        with pytest.raises(NegativeCycleError):
            WeightedGraph.create(w).bellman_ford(0)

    @pytest.mark.parametrize("seed", [3, 4])
    def test_agrees_with_dijkstra(self, seed: int) -> None:
        g = WeightedGraph.create(_random_weights(9, 0.35, seed))
        for s in range(9):
            np.testing.assert_allclose(g.bellman_ford(s).distance, g.dijkstra(s).distance)


class TestFloydWarshall:
    """All pairs distances and intermediate-vertex table."""

    def test_path_graph_scenario(self, path_graph: WeightedGraph) -> None:
        result = path_graph.floyd_warshall()
        assert result.dist[0, 2] == 2.0
        assert result.next[0, 2] == 1
        assert result.next[0, 1] == -1
        assert result.path(0, 2) == [0, 1, 2]
        assert result.path(2, 0) == []

    @pytest.mark.parametrize("seed", [5, 6])
    def test_agrees_with_scipy(self, seed: int) -> None:
        w = _random_weights(10, 0.25, seed, undirected=True)
        g = WeightedGraph.create(w, undirected=True)
        np.testing.assert_allclose(g.floyd_warshall().dist, _oracle(w, directed=False))

    def test_paths_have_reported_length(self) -> None:
        w = _random_weights(8, 0.4, seed=7)
        result = WeightedGraph.create(w).floyd_warshall()
        for u in range(8):
            for v in range(8):
                route = result.path(u, v)
                if not route or u == v:
                    continue
                length = sum(w[a, b] for a, b in zip(route, route[1:]))
                assert length == pytest.approx(result.dist[u, v])
