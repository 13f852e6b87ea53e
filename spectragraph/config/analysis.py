"""Analysis configuration dataclasses, all frozen and slotted for immutability."""

from dataclasses import dataclass, field

CLUSTERING_METHODS: tuple[str, ...] = ("greedy", "exact")


@dataclass(frozen=True, slots=True)
class NumericsConfig:
    """Tolerances for the dense matrix kernel."""

    eigenvalue_error: float = 1e-10  # power iteration convergence threshold
    max_power_iterations: int = 20


@dataclass(frozen=True, slots=True)
class RelevanceConfig:
    """Network relevance scoring via node-removed Hashimoto matrices."""

    enabled: bool = True
    categories: int = 5  # relevance bands for get_relevance_clusters


@dataclass(frozen=True, slots=True)
class ClusteringConfig:
    """Modularity clustering parameters."""

    enabled: bool = True
    method: str = "greedy"  # "greedy" or "exact"
    exact_max_vertices: int = 12  # Bell(12) ~ 4.2M partitions


@dataclass(frozen=True, slots=True)
class AnalysisConfig:
    """Top-level analysis configuration composing all sub-configs.

    Cross-parameter validation runs in __post_init__ to reject invalid
    configurations before any graph work starts.
    """

    numerics: NumericsConfig = field(default_factory=NumericsConfig)
    relevance: RelevanceConfig = field(default_factory=RelevanceConfig)
    clustering: ClusteringConfig = field(default_factory=ClusteringConfig)
    shortest_paths_source: int | None = 0
    description: str = ""
    tags: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if self.numerics.eigenvalue_error <= 0:
            raise ValueError(
                f"eigenvalue_error ({self.numerics.eigenvalue_error}) "
                f"must be positive"
            )
        if self.numerics.max_power_iterations < 1:
            raise ValueError(
                f"max_power_iterations ({self.numerics.max_power_iterations}) "
                f"must be >= 1"
            )
        if self.relevance.categories < 1:
            raise ValueError(
                f"relevance categories ({self.relevance.categories}) must be >= 1"
            )
        if self.clustering.method not in CLUSTERING_METHODS:
            raise ValueError(
                f"clustering method must be one of {CLUSTERING_METHODS}, "
                f"got {self.clustering.method!r}"
            )
        if self.clustering.exact_max_vertices < 0:
            raise ValueError(
                f"exact_max_vertices ({self.clustering.exact_max_vertices}) "
                f"must be >= 0"
            )
        if self.shortest_paths_source is not None and self.shortest_paths_source < 0:
            raise ValueError(
                f"shortest_paths_source ({self.shortest_paths_source}) "
                f"must be a vertex index or None"
            )
