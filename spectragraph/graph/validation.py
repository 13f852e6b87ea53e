"""Structural validation of adjacency and weight matrices.

Each check returns a list of error strings (empty = valid), cheapest
checks first, so callers can report every problem at once.
"""

import numpy as np


def is_symmetric(matrix: np.ndarray) -> bool:
    """Exact symmetry test for a square matrix (inf == inf counts as equal)."""
    return matrix.shape[0] == matrix.shape[1] and bool(np.array_equal(matrix, matrix.T))


def _check_shape(matrix: np.ndarray, kind: str, n_vertices: int | None) -> list[str]:
    errors: list[str] = []
    if matrix.ndim != 2:
        errors.append(f"{kind} matrix must be 2-D, got {matrix.ndim} dimensions")
        return errors
    rows, cols = matrix.shape
    if rows != cols:
        errors.append(f"{kind} matrix is not a square matrix: ({rows}x{cols})")
    if n_vertices is not None and (rows != n_vertices or cols != n_vertices):
        errors.append(
            f"Vertex set ({n_vertices}) and {kind.lower()} matrix "
            f"({rows}x{cols}) of the graph are inconsistent"
        )
    return errors


def validate_adjacency(
    adjacency: np.ndarray,
    n_vertices: int | None,
    undirected: bool,
) -> list[str]:
    """Validate an adjacency matrix.

    Checks (cheapest first):
    1. 2-D and square
    2. Dimension matches the vertex count
    3. Entries are 0 or 1
    4. Symmetric if the graph is undirected

    Args:
        adjacency: Candidate adjacency matrix.
        n_vertices: Number of supplied vertices, or None to skip check 2.
        undirected: Whether the graph is declared undirected.

    Returns:
        List of error strings (empty = valid adjacency).
    """
    errors = _check_shape(adjacency, "Adjacency", n_vertices)
    if errors:
        return errors

    if adjacency.size and not np.isin(adjacency, (0, 1)).all():
        errors.append("Adjacency matrix entries must be 0 or 1")

    if undirected and not is_symmetric(adjacency):
        errors.append("Adjacency matrix of this undirected graph must be symmetric")

    return errors


def validate_weight(
    weight: np.ndarray,
    n_vertices: int | None,
    undirected: bool,
) -> list[str]:
    """Validate a weight matrix (missing edges encoded as +inf or 0).

    Returns:
        List of error strings (empty = valid weight matrix).
    """
    errors = _check_shape(weight, "Weight", n_vertices)
    if errors:
        return errors

    if np.isnan(weight).any():
        errors.append("Weight matrix contains NaN entries")

    if undirected and not is_symmetric(weight):
        errors.append("Weight matrix of this undirected graph must be symmetric")

    return errors
