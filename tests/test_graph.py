"""Tests for graph construction, degrees, Laplacian, subgraphs and vertices."""

import numpy as np
import pytest

from spectragraph.errors import InvalidGraphStructureError, VertexNotFoundError
from spectragraph.graph import Edge, Graph, Vertex, VertexState, Vertible

TRIANGLE = [[0, 1, 1], [1, 0, 1], [1, 1, 0]]


@pytest.fixture
def triangle() -> Graph:
    return Graph.create(TRIANGLE, undirected=True)


@pytest.fixture
def star() -> Graph:
    """Undirected star: vertex 0 joined to 1, 2, 3."""
    a = np.zeros((4, 4), dtype=int)
    a[0, 1:] = a[1:, 0] = 1
    return Graph.create(a, undirected=True)


class TestConstruction:
    """Validation of adjacency matrices and vertex wiring."""

    def test_triangle_scenario(self, triangle: Graph) -> None:
        assert triangle.number_of_edges == 3
        np.testing.assert_array_equal(triangle.get_degrees(), [2, 2, 2])
        assert not triangle.weighted

    def test_vertex_adjacency_matches_matrix(self, star: Graph) -> None:
        for i, vertex in enumerate(star.vertices):
            assert vertex.index == i
            expected = [star.vertices[j] for j in np.flatnonzero(star.adjacency[i])]
            assert list(vertex.adjacency) == expected

    def test_non_square_rejected(self) -> None:
        with pytest.raises(InvalidGraphStructureError, match="not a square"):
            Graph([Vertex(), Vertex()], np.zeros((2, 3)))

    def test_vertex_count_mismatch_rejected(self) -> None:
        with pytest.raises(InvalidGraphStructureError, match="inconsistent"):
            Graph([Vertex()], np.zeros((2, 2)))

    def test_non_binary_rejected(self) -> None:
        with pytest.raises(InvalidGraphStructureError, match="0 or 1"):
            Graph.create([[0, 2], [0, 0]])

    @pytest.mark.parametrize(
        "adjacency,undirected",
        [
            ([[0, 1.5], [0, 0]], False),
            ([[0, 0.5], [0.5, 0]], True),
        ],
    )
    def test_fractional_entries_rejected(self, adjacency, undirected: bool) -> None:
        with pytest.raises(InvalidGraphStructureError, match="0 or 1"):
            Graph.create(adjacency, undirected=undirected)

    def test_float_zero_one_accepted(self) -> None:
        g = Graph.create([[0.0, 1.0], [1.0, 0.0]], undirected=True)
        assert g.adjacency.dtype == np.int64
        assert g.number_of_edges == 1

    def test_asymmetric_undirected_rejected(self) -> None:
        with pytest.raises(InvalidGraphStructureError, match="symmetric"):
            Graph.create([[0, 1], [0, 0]], undirected=True)

    def test_adjacency_is_read_only(self, triangle: Graph) -> None:
        with pytest.raises(ValueError):
            triangle.adjacency[0, 0] = 1

    def test_names_kept(self) -> None:
        vertices = [Vertex(name="a"), Vertex(name="b")]
        g = Graph(vertices, [[0, 1], [0, 0]])
        assert [v.name for v in g.vertices] == ["a", "b"]
        assert g.get_vertex(1) is vertices[1]
        assert g.get_vertex(5) is None


class TestDegrees:
    """Degree arrays and edge counts."""

    def test_degree_sum_is_twice_edges(self, star: Graph) -> None:
        assert star.get_degrees().sum() == 2 * star.number_of_edges

    def test_directed_edge_count_uses_full_matrix(self) -> None:
        g = Graph.create([[0, 1, 0], [0, 0, 1], [1, 1, 0]])
        assert g.number_of_edges == 4
        np.testing.assert_array_equal(g.get_indegrees(), [1, 2, 1])
        np.testing.assert_array_equal(g.get_outdegrees(), [1, 1, 2])
        assert g.get_indegree(1) == 2
        assert g.get_outdegree(g.vertices[2]) == 2

    def test_degree_of_directed_graph_raises(self) -> None:
        g = Graph.create([[0, 1], [0, 0]])
        with pytest.raises(InvalidGraphStructureError):
            g.get_degree(0)
        with pytest.raises(InvalidGraphStructureError):
            g.get_degrees()

    def test_self_loop_counted_once_undirected(self) -> None:
        g = Graph.create([[1, 1], [1, 0]], undirected=True)
        assert g.number_of_edges == 2

    def test_collect_edges(self, triangle: Graph) -> None:
        edges = triangle.collect_edges()
        assert len(edges) == 3
        assert all(isinstance(e, Edge) and not e.directed for e in edges)
        assert {e.label for e in edges} == {"{0,1}", "{0,2}", "{1,2}"}


class TestLaplacian:
    """Undirected and symmetrised directed Laplacians."""

    def test_undirected_laplacian(self, star: Graph) -> None:
        lap = star.laplacian().to_array()
        expected = np.diag(star.get_degrees()) - star.adjacency
        np.testing.assert_allclose(lap, expected)
        np.testing.assert_allclose(lap.sum(axis=1), 0.0)

    def test_directed_laplacian(self) -> None:
        g = Graph.create([[0, 1], [0, 0]])
        np.testing.assert_allclose(
            g.laplacian().to_array(), [[0.5, -0.5], [-0.5, 0.5]]
        )

    def test_laplacian_is_positive_semidefinite(self, triangle: Graph) -> None:
        eigenvalues = triangle.laplacian().get_real_eigenvalues()
        assert eigenvalues.min() > -1e-9


class TestSubgraph:
    """Induced subgraphs hold re-indexed copies."""

    def test_subgraph_in_requested_order(self, star: Graph) -> None:
        chosen = [star.vertices[2], star.vertices[0]]
        sub = star.subgraph(chosen)
        assert [v.name for v in sub.vertices] == ["2", "0"]
        assert [v.index for v in sub.vertices] == [0, 1]
        np.testing.assert_array_equal(sub.adjacency, [[0, 1], [1, 0]])
        assert sub.vertices[0] is not star.vertices[2]

    def test_original_untouched(self, star: Graph) -> None:
        star.subgraph([star.vertices[1], star.vertices[3]])
        assert star.vertices[3].index == 3
        assert len(star.vertices[0].adjacency) == 3

    def test_foreign_vertex_rejected(self, star: Graph, triangle: Graph) -> None:
        with pytest.raises(VertexNotFoundError):
            star.subgraph([triangle.vertices[0]])


class TestVertex:
    """Traversal flags and the three-state machine."""

    def test_state_transitions(self) -> None:
        v = Vertex(0)
        assert v.state is VertexState.INITIAL
        v.in_process = True
        assert v.state is VertexState.ACTIVE
        v.in_process = False
        v.mark()
        assert v.state is VertexState.READY
        v.reset()
        assert v.state is VertexState.INITIAL

    def test_marked_and_in_process_forbidden(self) -> None:
        v = Vertex(0)
        v.mark()
        with pytest.raises(AssertionError):
            v.in_process = True

    def test_predecessor_is_weak(self) -> None:
        v, w = Vertex(0), Vertex(1)
        v.predecessor = w
        assert v.predecessor is w
        del w
        assert v.predecessor is None

    def test_protocol(self) -> None:
        assert isinstance(Vertex(3, "c"), Vertible)

    def test_string_rendering(self, triangle: Graph) -> None:
        lines = str(triangle).splitlines()
        assert lines[0].split() == ["0", "1", "2"]
        assert lines[1].split() == ["0", "0", "1", "1"]
        assert "3 edges" in repr(triangle)
