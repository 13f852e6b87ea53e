"""Eigenvalue routines: full decomposition and dominant-eigenpair power iteration.

The general real eigenproblem is delegated to LAPACK through
scipy.linalg.eig. Its output is repacked into the real-valued layout
the rest of the kernel works with: real parts, imaginary parts, and an
eigenvector matrix in which a complex-conjugate pair occupies two
adjacent columns holding the real and imaginary parts of the first
vector of the pair.
"""

import logging
from dataclasses import dataclass

import numpy as np
import scipy.linalg

log = logging.getLogger(__name__)

MAX_POWER_ITERATIONS = 20


@dataclass(frozen=True)
class EigenvalueDecomposition:
    """Eigenvalues and eigenvectors of a square real matrix.

    Entry k of real_eigenvalues/imag_eigenvalues belongs to column k of
    eigenvectors. Omits slots=True since numpy arrays don't interact well
    with __slots__.
    """

    real_eigenvalues: np.ndarray  # float array of shape (n,)
    imag_eigenvalues: np.ndarray  # float array of shape (n,)
    eigenvectors: np.ndarray  # float array of shape (n, n)


@dataclass(frozen=True)
class DominantEigenpair:
    """Result of a dominant-eigenvalue computation."""

    eigenvalue: float
    eigenvector: np.ndarray  # float array of shape (n,)
    iterations: int
    converged: bool  # False when the full decomposition supplied the result


def eigen_decompose(a: np.ndarray) -> EigenvalueDecomposition:
    """Compute all eigenvalues and eigenvectors of a square real matrix.

    Args:
        a: Square float array of shape (n, n).

    Returns:
        EigenvalueDecomposition with consistently ordered parts.
    """
    values, vectors = scipy.linalg.eig(a, check_finite=True)
    real = np.real(values).astype(np.float64)
    imag = np.imag(values).astype(np.float64)

    packed = np.real(vectors).astype(np.float64)
    k = 0
    n = len(values)
    while k < n:
        if imag[k] != 0.0 and k + 1 < n:
            # Conjugate pair: columns k, k+1 carry Re and Im of vector k
            packed[:, k] = np.real(vectors[:, k])
            packed[:, k + 1] = np.imag(vectors[:, k])
            k += 2
        else:
            k += 1

    return EigenvalueDecomposition(
        real_eigenvalues=real,
        imag_eigenvalues=imag,
        eigenvectors=packed,
    )


def power_iteration(
    a: np.ndarray,
    error: float,
    max_iterations: int = MAX_POWER_ITERATIONS,
) -> DominantEigenpair:
    """Approximate the dominant eigenvalue of a square matrix.

    Starts from the all-ones vector and normalises by the Euclidean norm
    at each step; the norm of the iterate is the eigenvalue estimate.
    Iteration stops once successive estimates differ by at most `error`
    or after `max_iterations` steps. If it has not converged by then, the
    full decomposition is computed and the eigenvalue with maximum real
    part (and its eigenvector) is returned instead.

    Args:
        a: Square float array of shape (n, n).
        error: Convergence threshold on successive estimates.
        max_iterations: Upper bound on power-iteration steps.

    Returns:
        DominantEigenpair. A matrix mapping the start vector to zero
        yields eigenvalue 0.0 with the zero vector.
    """
    n = a.shape[0]
    vector = np.ones(n, dtype=np.float64)
    lam = 0.0
    lam_old = 0.0
    iterations = 0

    while True:
        lam_old = lam
        tmp = a @ vector
        lam = float(np.sqrt(tmp @ tmp))
        iterations += 1
        if lam == 0.0:
            return DominantEigenpair(
                eigenvalue=0.0, eigenvector=tmp, iterations=iterations, converged=True
            )
        vector = tmp / lam
        if abs(lam - lam_old) <= error or iterations >= max_iterations:
            break

    if abs(lam - lam_old) <= error:
        return DominantEigenpair(
            eigenvalue=lam, eigenvector=vector, iterations=iterations, converged=True
        )

    log.debug(
        "Power iteration did not converge after %d steps (delta=%.3e), "
        "using full decomposition",
        iterations,
        abs(lam - lam_old),
    )
    decomposition = eigen_decompose(a)
    pivot = int(np.argmax(decomposition.real_eigenvalues))
    return DominantEigenpair(
        eigenvalue=float(decomposition.real_eigenvalues[pivot]),
        eigenvector=decomposition.eigenvectors[:, pivot].copy(),
        iterations=iterations,
        converged=False,
    )
