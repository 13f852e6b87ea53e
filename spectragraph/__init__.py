"""Spectral graph analysis: dense linear algebra, graph algorithms and clustering."""

from spectragraph.clustering import Clustering
from spectragraph.config import DEFAULT_CONFIG, AnalysisConfig
from spectragraph.errors import SpectragraphError
from spectragraph.graph import Graph, Vertex, WeightedGraph
from spectragraph.linalg import Matrix
from spectragraph.pipeline import AnalysisReport, analyze_graph, load_graph

__all__ = [
    "AnalysisConfig",
    "AnalysisReport",
    "Clustering",
    "DEFAULT_CONFIG",
    "Graph",
    "Matrix",
    "SpectragraphError",
    "Vertex",
    "WeightedGraph",
    "analyze_graph",
    "load_graph",
]
