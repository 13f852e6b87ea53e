"""Default configuration: single source of truth for analysis parameters."""

from spectragraph.config.analysis import AnalysisConfig

# All-default values: eigenvalue_error=1e-10, 20 power iterations,
# 5 relevance bands, greedy clustering, exact search capped at 12 vertices.
DEFAULT_CONFIG = AnalysisConfig()
