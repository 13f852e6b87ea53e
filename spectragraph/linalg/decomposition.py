"""LU (Crout, implicit partial pivoting) and Householder QR decompositions.

Operates on plain float64 arrays. The LU routines follow the classic
Crout reduction with implicit row scaling: the array is overwritten with
the unit-lower and upper factors and a permutation record is returned
alongside the pivot parity.
"""

import logging

import numpy as np

from spectragraph.errors import DimensionMismatchError, SingularMatrixError

log = logging.getLogger(__name__)

EPSILON = 1e-10  # pivot, symmetry and display threshold for the whole kernel


def lu_decompose(a: np.ndarray) -> tuple[np.ndarray, np.ndarray, int]:
    """Decompose a square matrix into L and U factors in place of a copy.

    Args:
        a: Square float array of shape (n, n). Not modified.

    Returns:
        (lu, index, parity) where lu holds L below the diagonal (unit
        diagonal implied) and U on and above it, index[j] records the row
        swapped with row j, and parity is +1 or -1 depending on whether
        the number of row interchanges was even or odd.

    Raises:
        SingularMatrixError: If a row is entirely below EPSILON or a pivot
            magnitude falls below EPSILON.
    """
    lu = np.array(a, dtype=np.float64, copy=True)
    n = lu.shape[0]
    index = np.zeros(n, dtype=np.int64)
    parity = 1

    # Implicit scaling of each row
    big = np.abs(lu).max(axis=1) if n > 0 else np.zeros(0)
    if np.any(big < EPSILON):
        raise SingularMatrixError("Singular matrix: zero row")
    scale = 1.0 / big

    for j in range(n):
        for i in range(j):
            lu[i, j] -= lu[i, :i] @ lu[:i, j]

        # Search for the largest scaled pivot in column j
        imax = j
        best = 0.0
        for i in range(j, n):
            lu[i, j] -= lu[i, :j] @ lu[:j, j]
            merit = scale[i] * abs(lu[i, j])
            if merit > best:
                best = merit
                imax = i

        if imax != j:
            lu[[imax, j]] = lu[[j, imax]]
            parity = -parity
            scale[imax] = scale[j]
        index[j] = imax

        if abs(lu[j, j]) < EPSILON:
            raise SingularMatrixError(
                f"Singular matrix: pivot {lu[j, j]:.3e} in column {j}"
            )
        lu[j + 1 :, j] /= lu[j, j]

    return lu, index, parity


def lu_back_substitute(
    lu: np.ndarray, index: np.ndarray, b: np.ndarray
) -> np.ndarray:
    """Solve A x = b given the output of lu_decompose.

    Args:
        lu: Combined LU factors from lu_decompose.
        index: Row permutation record from lu_decompose.
        b: Right-hand side vector of length n. Not modified.

    Returns:
        Solution vector x of length n.
    """
    x = np.array(b, dtype=np.float64, copy=True)
    n = lu.shape[0]
    first = -1  # first nonzero entry of b, skips leading zeros

    # Forward substitution, unscrambling the permutation on the way
    for i in range(n):
        ip = index[i]
        total = x[ip]
        x[ip] = x[i]
        if first != -1:
            total -= lu[i, first:i] @ x[first:i]
        elif total != 0:
            first = i
        x[i] = total

    for i in range(n - 1, -1, -1):
        x[i] = (x[i] - lu[i, i + 1 :] @ x[i + 1 :]) / lu[i, i]
    return x


def lu_determinant(a: np.ndarray) -> float:
    """Determinant from the LU diagonal times the pivot parity.

    A matrix whose LU reduction hits a pivot below EPSILON is singular
    and reported with determinant 0.0.
    """
    try:
        lu, _, parity = lu_decompose(a)
    except SingularMatrixError:
        log.debug("LU reduction singular, determinant reported as 0")
        return 0.0
    return float(parity * np.prod(np.diag(lu)))


def householder_qr(a: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """Householder QR decomposition of an m x n matrix with m >= n.

    Args:
        a: Float array of shape (m, n), m >= n. Not modified.

    Returns:
        (Q, R) with Q of shape (m, n) having orthonormal columns and R of
        shape (n, n) upper triangular, so that Q @ R reproduces a.

    Raises:
        DimensionMismatchError: If m < n.
    """
    qr = np.array(a, dtype=np.float64, copy=True)
    m, n = qr.shape
    if m < n:
        raise DimensionMismatchError(
            f"QR decomposition needs rows >= columns: {m} rows < {n} columns"
        )
    r_diag = np.zeros(n, dtype=np.float64)

    for k in range(n):
        norm = float(np.linalg.norm(qr[k:, k]))
        if norm != 0.0:
            # Form the k-th Householder vector
            if qr[k, k] < 0:
                norm = -norm
            qr[k:, k] /= norm
            qr[k, k] += 1.0
            # Apply the transformation to the remaining columns
            for j in range(k + 1, n):
                s = -(qr[k:, k] @ qr[k:, j]) / qr[k, k]
                qr[k:, j] += s * qr[k:, k]
        r_diag[k] = -norm

    r = np.triu(qr[:n, :n], k=1)
    r[np.diag_indices(n)] = r_diag

    q = np.zeros((m, n), dtype=np.float64)
    for k in range(n - 1, -1, -1):
        q[k, k] = 1.0
        if qr[k, k] == 0:
            continue
        for j in range(k, n):
            s = -(qr[k:, k] @ q[k:, j]) / qr[k, k]
            q[k:, j] += s * qr[k:, k]

    return q, r
