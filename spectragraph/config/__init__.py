"""Analysis configuration system with frozen, hashable, serializable dataclasses."""

from spectragraph.config.analysis import (
    CLUSTERING_METHODS,
    AnalysisConfig,
    ClusteringConfig,
    NumericsConfig,
    RelevanceConfig,
)
from spectragraph.config.defaults import DEFAULT_CONFIG
from spectragraph.config.hashing import analysis_hash, config_hash
from spectragraph.config.serialization import (
    config_from_dict,
    config_from_json,
    config_to_dict,
    config_to_json,
    load_config,
    save_config,
)

__all__ = [
    "AnalysisConfig",
    "CLUSTERING_METHODS",
    "ClusteringConfig",
    "DEFAULT_CONFIG",
    "NumericsConfig",
    "RelevanceConfig",
    "analysis_hash",
    "config_from_dict",
    "config_from_json",
    "config_hash",
    "config_to_dict",
    "config_to_json",
    "load_config",
    "save_config",
]
