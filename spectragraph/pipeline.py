"""Graph analysis pipeline: load a graph document, run every configured stage.

Stages, in order: structure summary (edges, degrees), topological order,
strongly connected components, network relevance, modularity clustering
and, for weighted graphs, single-source shortest paths. The exact
clustering stage degrades to greedy above a configured vertex count.
"""

import logging
import math
import time
from dataclasses import asdict, dataclass, field
from typing import Any

import numpy as np

from spectragraph.config.analysis import AnalysisConfig
from spectragraph.config.defaults import DEFAULT_CONFIG
from spectragraph.config.hashing import analysis_hash
from spectragraph.errors import NegativeWeightError
from spectragraph.graph.graph import Graph
from spectragraph.graph.vertex import Vertex
from spectragraph.graph.weighted import WeightedGraph

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnalysisReport:
    """Everything analyze_graph computed, in JSON-friendly Python types.

    Vertex references are by index into the analysed graph; names are
    listed once in `names`. Unreachable distances are None.
    """

    config_hash: str
    names: list[str]
    undirected: bool
    weighted: bool
    number_of_edges: int
    indegrees: list[int]
    outdegrees: list[int]
    topological_order: list[int] | None
    components: list[list[int]]
    relevance: list[float] | None = None
    relevance_clusters: list[list[int]] | None = None
    clustering_method: str | None = None
    clusters: list[list[int]] | None = None
    modularity: float | None = None
    shortest_paths: dict[str, Any] | None = None
    timings: dict[str, float] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def load_graph(data: dict[str, Any]) -> Graph:
    """Build a graph from a JSON-style mapping.

    Keys:
        adjacency: n x n 0/1 matrix (unweighted graph), or
        weight: n x n matrix; null entries mean +inf (weighted graph).
        names: optional list of n vertex names.
        undirected: optional bool, default False.

    Raises:
        ValueError: If neither or both of adjacency/weight are given, or
            the names do not match the matrix size.
        InvalidGraphStructureError: If the matrix is structurally invalid.
    """
    has_adjacency = "adjacency" in data
    has_weight = "weight" in data
    if has_adjacency == has_weight:
        raise ValueError("Graph document needs exactly one of 'adjacency' or 'weight'")
    unknown = set(data) - {"adjacency", "weight", "names", "undirected"}
    if unknown:
        raise ValueError(f"Unknown graph document keys: {sorted(unknown)}")

    undirected = bool(data.get("undirected", False))
    rows = data["weight"] if has_weight else data["adjacency"]
    n = len(rows)
    names = data.get("names")
    if names is None:
        names = [str(i) for i in range(n)]
    if len(names) != n:
        raise ValueError(f"Got {len(names)} names for {n} vertices")
    vertices = [Vertex(i, str(name)) for i, name in enumerate(names)]

    if has_weight:
        weight = np.array(
            [[math.inf if x is None else float(x) for x in row] for row in rows],
            dtype=np.float64,
        )
        return WeightedGraph(vertices, weight.reshape(n, -1), undirected)
    adjacency = np.asarray(rows)
    return Graph(vertices, adjacency.reshape(n, -1), undirected)


def _finite_or_none(values: np.ndarray) -> list[float | None]:
    return [float(x) if math.isfinite(x) else None for x in values.tolist()]


def _shortest_paths(graph: WeightedGraph, source: int) -> dict[str, Any]:
    try:
        paths = graph.dijkstra(source)
        algorithm = "dijkstra"
    except NegativeWeightError as exc:
        log.warning("%s; falling back to Bellman-Ford", exc)
        paths = graph.bellman_ford(source)
        algorithm = "bellman_ford"
    return {
        "algorithm": algorithm,
        "source": source,
        "distance": _finite_or_none(paths.distance),
        "predecessor": paths.predecessor.tolist(),
    }


def analyze_graph(graph: Graph, config: AnalysisConfig = DEFAULT_CONFIG) -> AnalysisReport:
    """Run every analysis stage enabled in `config` on `graph`.

    Args:
        graph: Graph or WeightedGraph to analyse.
        config: Analysis configuration.

    Returns:
        AnalysisReport with one entry per stage (None for skipped stages).

    Raises:
        NegativeCycleError: If shortest paths are requested from a source
            that reaches a negative cycle.
    """
    timings: dict[str, float] = {}
    n = len(graph.vertices)

    t0 = time.monotonic()
    sigma = graph.topological_sort()
    topological_order = None
    if len(sigma) == n:
        topological_order = [int(i) for i in np.argsort(sigma, kind="stable")]
    components: list[list[int]] = []
    if n:
        labels = graph.get_component_labels()
        components = [np.flatnonzero(labels == k).tolist() for k in range(int(labels.max()) + 1)]
    timings["structure"] = time.monotonic() - t0
    log.info(
        "Structure: %d vertices, %d edges, %d strongly connected components, %s",
        n,
        graph.number_of_edges,
        len(components),
        "acyclic" if topological_order is not None else "cyclic",
    )

    relevance = relevance_clusters = None
    if config.relevance.enabled:
        t0 = time.monotonic()
        relevance = graph.compute_relevances(
            config.numerics.eigenvalue_error, config.numerics.max_power_iterations
        ).tolist()
        relevance_clusters = graph.get_relevance_clusters(
            config.relevance.categories
        ).get_clusters()
        timings["relevance"] = time.monotonic() - t0

    clustering_method = clusters = modularity = None
    if config.clustering.enabled:
        t0 = time.monotonic()
        clustering_method = config.clustering.method
        if clustering_method == "exact" and n > config.clustering.exact_max_vertices:
            log.warning(
                "Exact clustering skipped: %d vertices exceed exact_max_vertices=%d, "
                "using greedy",
                n,
                config.clustering.exact_max_vertices,
            )
            clustering_method = "greedy"
        if clustering_method == "exact":
            clustering = graph.detect_clusters_exactly()
        else:
            clustering = graph.detect_clusters()
        clusters = clustering.get_clusters()
        modularity = graph.modularity(clustering)
        timings["clustering"] = time.monotonic() - t0

    shortest_paths = None
    source = config.shortest_paths_source
    if isinstance(graph, WeightedGraph) and source is not None:
        if source < n:
            t0 = time.monotonic()
            shortest_paths = _shortest_paths(graph, source)
            timings["shortest_paths"] = time.monotonic() - t0
        else:
            log.warning("Shortest paths skipped: source %d not in graph of %d vertices", source, n)

    return AnalysisReport(
        config_hash=analysis_hash(config),
        names=[v.name for v in graph.vertices],
        undirected=graph.undirected,
        weighted=graph.weighted,
        number_of_edges=graph.number_of_edges,
        indegrees=graph.get_indegrees().tolist(),
        outdegrees=graph.get_outdegrees().tolist(),
        topological_order=topological_order,
        components=components,
        relevance=relevance,
        relevance_clusters=relevance_clusters,
        clustering_method=clustering_method,
        clusters=clusters,
        modularity=modularity,
        shortest_paths=shortest_paths,
        timings=timings,
    )
