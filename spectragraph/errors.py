"""Error taxonomy shared by the matrix kernel, graph core and clustering."""


class SpectragraphError(Exception):
    """Base class for all errors raised by spectragraph."""


class NotSquareError(SpectragraphError):
    """Raised when an operation requiring a square matrix receives a non-square one."""


class SingularMatrixError(SpectragraphError):
    """Raised when an LU pivot falls below EPSILON during det/inverse/solve."""


class DimensionMismatchError(SpectragraphError):
    """Raised when matrix or vector shapes are incompatible for an operation."""


class InvalidGraphStructureError(SpectragraphError):
    """Raised for malformed adjacency/weight matrices or vertex sets."""


class VertexNotFoundError(SpectragraphError):
    """Raised when a vertex does not belong to the graph it is used with."""


class NegativeWeightError(SpectragraphError):
    """Raised when Dijkstra's algorithm meets a negative edge weight."""


class NegativeCycleError(SpectragraphError):
    """Raised when Bellman-Ford detects a negative cycle reachable from the source."""
