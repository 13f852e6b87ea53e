"""Dense linear algebra kernel: LU, QR, eigen routines and the Matrix type."""

from spectragraph.linalg.decomposition import (
    EPSILON,
    householder_qr,
    lu_back_substitute,
    lu_decompose,
    lu_determinant,
)
from spectragraph.linalg.eigen import (
    MAX_POWER_ITERATIONS,
    DominantEigenpair,
    EigenvalueDecomposition,
    eigen_decompose,
    power_iteration,
)
from spectragraph.linalg.formatting import format_matrix, format_number, matrix_to_html
from spectragraph.linalg.matrix import Matrix

__all__ = [
    "DominantEigenpair",
    "EPSILON",
    "EigenvalueDecomposition",
    "MAX_POWER_ITERATIONS",
    "Matrix",
    "eigen_decompose",
    "format_matrix",
    "format_number",
    "householder_qr",
    "lu_back_substitute",
    "lu_decompose",
    "lu_determinant",
    "matrix_to_html",
    "power_iteration",
]
