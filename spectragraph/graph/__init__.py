"""Graph core: vertices, adjacency/weight graphs, traversal and Hashimoto matrices."""

from spectragraph.graph.graph import Graph
from spectragraph.graph.hashimoto import (
    ModifiableHashimoto,
    OrientedEdges,
    hashimoto_matrix,
    oriented_edges,
)
from spectragraph.graph.types import AllPairsPaths, Edge, SingleSourcePaths
from spectragraph.graph.validation import is_symmetric, validate_adjacency, validate_weight
from spectragraph.graph.vertex import Vertex, VertexState, Vertible
from spectragraph.graph.weighted import WeightedGraph

__all__ = [
    "AllPairsPaths",
    "Edge",
    "Graph",
    "ModifiableHashimoto",
    "OrientedEdges",
    "SingleSourcePaths",
    "Vertex",
    "VertexState",
    "Vertible",
    "WeightedGraph",
    "hashimoto_matrix",
    "is_symmetric",
    "oriented_edges",
    "validate_adjacency",
    "validate_weight",
]
