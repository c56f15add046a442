"""
Stabilized singular value decomposition.

The raw SVD routines are treated as external primitives with a deliberately
weak contract::

    primitive(A, epsilon) -> (U, s, V)   with   U @ diag(s) @ V.T ≈ A

A primitive is only trusted on matrices at least as tall as they are wide,
is not trusted to return singular values in descending order, and may on
occasion return garbage. ``stabilized_svd`` hides all three defects:

1. Wide matrices are decomposed through their transpose, and the factors
   swapped back.
2. Singular values are sorted by descending magnitude, with the columns of
   both factor matrices permuted identically.
3. Optionally, the factorization is checked for non-finite values and
   reconstructed against the input; any deviation above the tolerance is
   fatal.

Any callable honouring the primitive contract can be passed as ``solver``.
"""

import logging
import math
import sys
from typing import Callable, Dict, Tuple, Union

import numpy as np
from scipy import linalg
from scipy.sparse.linalg import svds

from ..exceptions import DecompositionIntegrityError

logger = logging.getLogger(__name__)

SVDPrimitive = Callable[[np.ndarray, float], Tuple[np.ndarray, np.ndarray, np.ndarray]]


# =============================================================================
# PRIMITIVES
# =============================================================================

def lapack_svd(A: np.ndarray, epsilon: float = 0.0) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Thin SVD through LAPACK.

    LAPACK always iterates to machine precision, so ``epsilon`` is accepted
    for contract compatibility only.
    """
    U, s, Vt = linalg.svd(A, full_matrices=False)
    return U, s, Vt.T


def arpack_svd(A: np.ndarray, epsilon: float = 0.0) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Truncated SVD through ARPACK, keeping min(shape) - 1 triplets.

    The dropped triplet is the smallest one. For an MCA residual matrix the
    square roots of the row masses span a left null space, so at least one
    singular value is zero and nothing of substance is lost. ARPACK returns
    singular values in ascending order. ``epsilon`` is the ARPACK convergence
    tolerance (0 means machine precision).
    """
    k = min(A.shape) - 1
    if k < 1:
        return lapack_svd(A, epsilon)
    U, s, Vt = svds(A, k=k, tol=epsilon, random_state=0)
    return U, s, Vt.T


SVD_SOLVERS: Dict[str, SVDPrimitive] = {
    "lapack": lapack_svd,
    "arpack": arpack_svd,
}


# =============================================================================
# STABILIZATION STEPS
# =============================================================================

def oriented_svd(A: np.ndarray, epsilon: float,
                 primitive: SVDPrimitive) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Call the primitive on a matrix that is never wider than it is tall.

    If A is wide, decompose A.T = U s V.T and read the factorization of
    A = V s U.T off the result.
    """
    n_rows, n_cols = A.shape
    if n_cols <= n_rows:
        return primitive(A, epsilon)
    logger.debug(f"Decomposing transpose of wide {n_rows}x{n_cols} matrix")
    U, s, V = primitive(A.T, epsilon)
    return V, s, U


def is_sorted_descending(s: np.ndarray) -> bool:
    """True if singular values are non-increasing in absolute value."""
    magnitudes = np.abs(np.asarray(s))
    return bool(np.all(magnitudes[:-1] >= magnitudes[1:]))


def sort_decomposition(P: np.ndarray, s: np.ndarray,
                       Q: np.ndarray) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Sort singular values by descending magnitude, permuting P and Q identically."""
    order = np.argsort(-np.abs(s), kind='stable')
    return P[:, order], s[order], Q[:, order]


def format_matrix(M: np.ndarray, tolerance: float) -> str:
    """Render a matrix with as many decimals as the tolerance resolves."""
    precision = max(0, -math.ceil(math.log10(tolerance)))
    return np.array2string(
        np.asarray(M), precision=precision, floatmode='fixed',
        separator=', ', threshold=sys.maxsize, max_line_width=200,
    )


def check_decomposition(expected: np.ndarray, P: np.ndarray, s: np.ndarray,
                        Q: np.ndarray, tolerance: float) -> None:
    """
    Verify that P @ diag(s) @ Q.T reproduces the decomposed matrix.

    Raises:
        DecompositionIntegrityError: On any non-finite value in P, s or Q, or
            any reconstruction error above the tolerance
    """
    for name, factor in (("P", P), ("s", s), ("Q", Q)):
        if not np.all(np.isfinite(factor)):
            raise DecompositionIntegrityError(
                f"SVD computation failed: non-finite values in {name}",
                expected=expected, actual=None, tolerance=tolerance,
            )

    actual = (P * s) @ Q.T
    error = np.abs(expected - actual)
    if error.size and error.max() > tolerance:
        i, j = np.unravel_index(np.argmax(error), error.shape)
        logger.error(
            f"Catastrophic failure in SVD primitive.\n"
            f"Expected Z=\n{format_matrix(expected, tolerance)}\n"
            f"Actual P*s*Q=\n{format_matrix(actual, tolerance)}"
        )
        raise DecompositionIntegrityError(
            f"SVD computation failed. Expected {expected[i, j]}, got {actual[i, j]} "
            f"for entry {i}, {j} (tolerance {tolerance}).\n"
            f"Expected Z=\n{format_matrix(expected, tolerance)}\n"
            f"Actual P*s*Q=\n{format_matrix(actual, tolerance)}",
            expected=expected, actual=actual, tolerance=tolerance,
        )


# =============================================================================
# PUBLIC ENTRY POINT
# =============================================================================

def stabilized_svd(A: np.ndarray, epsilon: float = 0.0, check_tolerance: float = 0.0,
                   solver: Union[str, SVDPrimitive] = "lapack") -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Decompose A with a possibly unreliable primitive.

    Args:
        A: (n_rows, n_cols) matrix to decompose
        epsilon: Convergence parameter forwarded to the primitive
        check_tolerance: If > 0, verify the result against A with this tolerance
        solver: Name in SVD_SOLVERS, or a primitive callable

    Returns:
        Tuple of (P, s, Q) where:
        - P: (n_rows, k) left factor
        - s: (k,) singular values, descending by absolute value
        - Q: (n_cols, k) right factor

    Raises:
        DecompositionIntegrityError: If the check is enabled and fails
        KeyError: If ``solver`` names no known primitive
    """
    primitive = SVD_SOLVERS[solver] if isinstance(solver, str) else solver
    A = np.asarray(A, dtype=float)

    P, s, Q = oriented_svd(A, epsilon, primitive)
    P, s, Q = np.asarray(P), np.asarray(s), np.asarray(Q)

    if not is_sorted_descending(s):
        logger.debug("Primitive returned unsorted singular values, reordering")
        P, s, Q = sort_decomposition(P, s, Q)

    if check_tolerance > 0:
        check_decomposition(A, P, s, Q, check_tolerance)

    return P, s, Q
