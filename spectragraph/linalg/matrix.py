"""Dense real matrix with LU/QR-based algebra and cached spectral data.

Matrices are values: every operation returns a fresh Matrix. The only
in-place mutations are item assignment and transpose_in_place(); both
bump a version counter, and the eigen caches are only trusted while
their recorded version matches the current one.
"""

import logging
from collections.abc import Sequence

import numpy as np

from spectragraph.errors import (
    DimensionMismatchError,
    NotSquareError,
    SingularMatrixError,
)
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
from spectragraph.linalg.formatting import format_matrix, matrix_to_html

log = logging.getLogger(__name__)


class Matrix:
    """A rows x columns matrix of float64 values.

    Args:
        data: Nested sequence or array. A 1-D input becomes a 1 x n row
            vector. The data is copied.
    """

    __hash__ = None  # equality is tolerance based

    def __init__(self, data) -> None:
        array = np.array(data, dtype=np.float64, copy=True)
        if array.ndim == 1:
            array = array.reshape(1, -1)
        if array.ndim != 2:
            raise DimensionMismatchError(
                f"Matrix data must be 1-D or 2-D, got {array.ndim} dimensions"
            )
        self._data = array
        self._version = 0
        self._dominant: tuple[int, DominantEigenpair] | None = None
        self._decomposition: tuple[int, EigenvalueDecomposition] | None = None

    # ------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------

    @classmethod
    def create_zero(cls, rows: int, columns: int) -> "Matrix":
        return cls(np.zeros((rows, columns)))

    @classmethod
    def create_identity(cls, n: int) -> "Matrix":
        return cls(np.eye(n))

    def copy(self) -> "Matrix":
        return Matrix(self._data)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def rows(self) -> int:
        return self._data.shape[0]

    @property
    def columns(self) -> int:
        return self._data.shape[1]

    @property
    def shape(self) -> tuple[int, int]:
        return self._data.shape

    @property
    def version(self) -> int:
        """Number of in-place mutations applied so far."""
        return self._version

    def to_array(self) -> np.ndarray:
        """Return a copy of the underlying data."""
        return self._data.copy()

    def row(self, i: int) -> np.ndarray:
        return self._data[i].copy()

    def column(self, j: int) -> np.ndarray:
        return self._data[:, j].copy()

    def __getitem__(self, key):
        value = self._data[key]
        return value.copy() if isinstance(value, np.ndarray) else float(value)

    def __setitem__(self, key, value) -> None:
        self._data[key] = value
        self._version += 1

    def is_square(self) -> bool:
        return self.rows == self.columns

    def is_symmetric(self) -> bool:
        """True if square and equal to its transpose within EPSILON."""
        if not self.is_square():
            return False
        return bool(np.all(np.abs(self._data - self._data.T) <= EPSILON))

    def equals(self, other) -> bool:
        """Entry-wise comparison within EPSILON against a Matrix or array."""
        other_data = other._data if isinstance(other, Matrix) else np.asarray(
            other, dtype=np.float64
        )
        if other_data.ndim == 1:
            other_data = other_data.reshape(1, -1)
        if other_data.shape != self._data.shape:
            return False
        return bool(np.all(np.abs(self._data - other_data) <= EPSILON))

    def __eq__(self, other) -> bool:
        if not isinstance(other, (Matrix, np.ndarray, list, tuple)):
            return NotImplemented
        return self.equals(other)

    def _require_square(self) -> None:
        if not self.is_square():
            raise NotSquareError(
                f"Not a square matrix: ({self.rows}x{self.columns})"
            )

    # ------------------------------------------------------------------
    # Arithmetic
    # ------------------------------------------------------------------

    def _require_same_shape(self, other: "Matrix", op: str) -> None:
        if self.shape != other.shape:
            raise DimensionMismatchError(
                f"Cannot {op} matrices of shapes {self.shape} and {other.shape}"
            )

    def plus(self, other: "Matrix") -> "Matrix":
        self._require_same_shape(other, "add")
        return Matrix(self._data + other._data)

    add = plus

    def minus(self, other: "Matrix") -> "Matrix":
        self._require_same_shape(other, "subtract")
        return Matrix(self._data - other._data)

    def negative(self) -> "Matrix":
        return Matrix(-self._data)

    def times(self, other):
        """Matrix product with a Matrix (returns Matrix) or a vector (returns array)."""
        if isinstance(other, Matrix):
            if self.columns != other.rows:
                raise DimensionMismatchError(
                    "Column and row numbers not appropriate for multiplication: "
                    f"{self.columns} != {other.rows}"
                )
            return Matrix(self._data @ other._data)
        vector = np.asarray(other, dtype=np.float64)
        if vector.ndim != 1 or vector.shape[0] != self.columns:
            raise DimensionMismatchError(
                "Vector length not appropriate for multiplication: "
                f"{self.columns} != {vector.shape}"
            )
        return self._data @ vector

    def scale(self, factor: float) -> "Matrix":
        return Matrix(factor * self._data)

    def __add__(self, other: "Matrix") -> "Matrix":
        return self.plus(other)

    def __sub__(self, other: "Matrix") -> "Matrix":
        return self.minus(other)

    def __neg__(self) -> "Matrix":
        return self.negative()

    def __matmul__(self, other):
        return self.times(other)

    def __mul__(self, factor: float) -> "Matrix":
        if not isinstance(factor, (int, float, np.number)):
            return NotImplemented
        return self.scale(float(factor))

    __rmul__ = __mul__

    @staticmethod
    def tensor(matrices: Sequence["Matrix"]) -> "Matrix":
        """Kronecker product of an ordered sequence of matrices.

        Raises:
            DimensionMismatchError: If the sequence or any matrix is empty.
        """
        if len(matrices) == 0:
            raise DimensionMismatchError("Empty sequence of matrices")
        for m in matrices:
            if m.rows == 0 or m.columns == 0:
                raise DimensionMismatchError("Empty matrix")
        result = matrices[0]._data
        for m in matrices[1:]:
            result = np.kron(result, m._data)
        return Matrix(result)

    # ------------------------------------------------------------------
    # LU based operations
    # ------------------------------------------------------------------

    def det(self) -> float:
        """Determinant via Crout LU; singular matrices give 0.0."""
        self._require_square()
        return lu_determinant(self._data)

    def inverse(self) -> "Matrix":
        """Inverse via LU, solving A X = I column by column.

        Raises:
            NotSquareError: If the matrix is not square.
            SingularMatrixError: If an LU pivot is below EPSILON.
        """
        self._require_square()
        lu, index, _ = lu_decompose(self._data)
        n = self.rows
        inv = np.zeros((n, n), dtype=np.float64)
        unit = np.zeros(n, dtype=np.float64)
        for j in range(n):
            unit[:] = 0.0
            unit[j] = 1.0
            inv[:, j] = lu_back_substitute(lu, index, unit)
        return Matrix(inv)

    def solve(self, b: "Matrix") -> "Matrix":
        """Solve A x = b for an n x 1 column vector b.

        Raises:
            DimensionMismatchError: If b is not a column with n rows.
            SingularMatrixError: If an LU pivot is below EPSILON.
        """
        self._require_square()
        if b.columns != 1:
            raise DimensionMismatchError(
                f"b is not a column vector: columns={b.columns}"
            )
        if b.rows != self.rows:
            raise DimensionMismatchError(
                f"b is not an n-dimensional vector: rows={b.rows}"
            )
        lu, index, _ = lu_decompose(self._data)
        x = lu_back_substitute(lu, index, b._data[:, 0])
        return Matrix(x.reshape(-1, 1))

    def pow(self, n: int) -> "Matrix":
        """Integer matrix power; negative powers use the inverse.

        Raises:
            NotSquareError: If the matrix is not square.
            SingularMatrixError: If n < 0 and |det| < EPSILON.
        """
        self._require_square()
        if n < 0 and abs(self.det()) < EPSILON:
            raise SingularMatrixError(
                f"Negative power of a non-invertible matrix: {n}"
            )
        base = self.inverse() if n < 0 else self
        power = Matrix.create_identity(self.rows)
        for _ in range(abs(n)):
            power = power.times(base)
        return power

    def cofactor(self, i: int, j: int) -> float:
        """Signed minor (-1)^(i+j) * det(A without row i and column j)."""
        self._require_square()
        minor = np.delete(np.delete(self._data, i, axis=0), j, axis=1)
        sign = -1.0 if (i + j) % 2 else 1.0
        return sign * lu_determinant(minor)

    def adjugate(self) -> "Matrix":
        """Transpose of the cofactor matrix."""
        self._require_square()
        n = self.rows
        adj = np.zeros((n, n), dtype=np.float64)
        for i in range(n):
            for j in range(n):
                adj[i, j] = self.cofactor(j, i)
        return Matrix(adj)

    # ------------------------------------------------------------------
    # Structural operations
    # ------------------------------------------------------------------

    def transpose(self) -> "Matrix":
        return Matrix(self._data.T)

    def transpose_in_place(self) -> None:
        """Transpose a square matrix in place, invalidating cached spectra."""
        self._require_square()
        self._data = np.ascontiguousarray(self._data.T)
        self._version += 1

    def trace(self) -> float:
        self._require_square()
        return float(np.trace(self._data))

    def decompose_qr(self) -> tuple["Matrix", "Matrix"]:
        """Householder QR decomposition; requires rows >= columns.

        Returns:
            (Q, R) with Q.times(R) equal to this matrix.
        """
        q, r = householder_qr(self._data)
        return Matrix(q), Matrix(r)

    # ------------------------------------------------------------------
    # SVD based norms
    # ------------------------------------------------------------------

    def _singular_values(self) -> np.ndarray:
        return np.linalg.svd(self._data, compute_uv=False)

    def norm2(self) -> float:
        """Two-norm: the largest singular value."""
        s = self._singular_values()
        return float(s[0]) if s.size else 0.0

    def rank(self) -> int:
        """Effective numerical rank from the singular values."""
        s = self._singular_values()
        if s.size == 0:
            return 0
        tol = max(self.rows, self.columns) * s[0] * np.finfo(np.float64).eps
        return int(np.sum(s > tol))

    def cond(self) -> float:
        """Two-norm condition number: ratio of extreme singular values.

        0.0 for an empty matrix, inf when the smallest singular value is 0.
        """
        s = self._singular_values()
        if s.size == 0:
            return 0.0
        smallest = s[min(self.rows, self.columns) - 1]
        if smallest == 0.0:
            return float("inf")
        return float(s[0] / smallest)

    # ------------------------------------------------------------------
    # Spectral data (memoised per version)
    # ------------------------------------------------------------------

    def _eigen(self) -> EigenvalueDecomposition:
        self._require_square()
        if self._decomposition is None or self._decomposition[0] != self._version:
            self._decomposition = (self._version, eigen_decompose(self._data))
        return self._decomposition[1]

    def get_real_eigenvalues(self) -> np.ndarray:
        return self._eigen().real_eigenvalues.copy()

    def get_imag_eigenvalues(self) -> np.ndarray:
        return self._eigen().imag_eigenvalues.copy()

    def get_eigenvectors(self) -> "Matrix":
        return Matrix(self._eigen().eigenvectors)

    def _dominant_pair(
        self, error: float, max_iterations: int
    ) -> DominantEigenpair:
        self._require_square()
        if self._dominant is None or self._dominant[0] != self._version:
            if self.rows == 0:
                pair = DominantEigenpair(
                    eigenvalue=0.0,
                    eigenvector=np.zeros(0),
                    iterations=0,
                    converged=True,
                )
            else:
                pair = power_iteration(self._data, error, max_iterations)
            self._dominant = (self._version, pair)
        return self._dominant[1]

    def get_dominant_eigenvalue(
        self, error: float = EPSILON, max_iterations: int = MAX_POWER_ITERATIONS
    ) -> float:
        """Dominant eigenvalue by power iteration with eigensolver fallback.

        The first result is cached until the matrix is mutated; later calls
        return it regardless of `error`.
        """
        return self._dominant_pair(error, max_iterations).eigenvalue

    def get_dominant_eigenvector(
        self, error: float = EPSILON, max_iterations: int = MAX_POWER_ITERATIONS
    ) -> np.ndarray:
        return self._dominant_pair(error, max_iterations).eigenvector.copy()

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def to_html(
        self, align: str = "center", show_zeros: bool = True, precision: int = 3
    ) -> str:
        return matrix_to_html(self._data, align, show_zeros, precision)

    def __str__(self) -> str:
        return format_matrix(self._data)

    def __repr__(self) -> str:
        return f"Matrix({self._data.tolist()!r})"
