"""Modularity clustering: partition model plus greedy and exhaustive detection."""

from spectragraph.clustering.clustering import Clustering
from spectragraph.clustering.detection import (
    ClusterDetection,
    exact_clusterings,
    greedy_clustering,
    restricted_growth_strings,
)

__all__ = [
    "ClusterDetection",
    "Clustering",
    "exact_clusterings",
    "greedy_clustering",
    "restricted_growth_strings",
]
