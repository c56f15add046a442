"""
Tests for the stabilized SVD wrapper.

Defective primitives are simulated with small wrappers around the LAPACK
primitive that shuffle, corrupt or record what they are given.
"""

import numpy as np
import pytest

from mca_analysis.exceptions import DecompositionIntegrityError
from mca_analysis.models.indicator import normalize_residuals
from mca_analysis.models.svd import (
    arpack_svd,
    format_matrix,
    is_sorted_descending,
    lapack_svd,
    sort_decomposition,
    stabilized_svd,
)


@pytest.fixture
def tall_matrix():
    rng = np.random.default_rng(7)
    return rng.normal(size=(6, 4))


def reconstruct(P, s, Q):
    return P @ np.diag(s) @ Q.T


class TestStabilizedSVD:
    """Orientation, ordering and reconstruction."""

    def test_tall_matrix_reconstructs(self, tall_matrix):
        P, s, Q = stabilized_svd(tall_matrix)

        assert P.shape == (6, 4)
        assert Q.shape == (4, 4)
        assert is_sorted_descending(s)
        np.testing.assert_allclose(reconstruct(P, s, Q), tall_matrix, atol=1e-10)

    def test_wide_matrix_reconstructs(self, tall_matrix):
        wide = tall_matrix.T
        P, s, Q = stabilized_svd(wide, check_tolerance=1e-8)

        assert P.shape == (4, 4)
        assert Q.shape == (6, 4)
        np.testing.assert_allclose(reconstruct(P, s, Q), wide, atol=1e-10)

    def test_primitive_only_sees_tall_matrices(self, tall_matrix):
        shapes = []

        def recording(A, epsilon):
            shapes.append(A.shape)
            return lapack_svd(A, epsilon)

        stabilized_svd(tall_matrix, solver=recording)
        stabilized_svd(tall_matrix.T, solver=recording)

        assert shapes == [(6, 4), (6, 4)]

    def test_epsilon_forwarded_to_primitive(self, tall_matrix):
        seen = []

        def recording(A, epsilon):
            seen.append(epsilon)
            return lapack_svd(A, epsilon)

        stabilized_svd(tall_matrix, epsilon=1e-5, solver=recording)
        assert seen == [1e-5]

    def test_unsorted_primitive_output_is_reordered(self, tall_matrix):
        def shuffled(A, epsilon):
            U, s, V = lapack_svd(A, epsilon)
            order = [3, 1, 0, 2]
            return U[:, order], s[order], V[:, order]

        P, s, Q = stabilized_svd(tall_matrix, solver=shuffled, check_tolerance=1e-8)
        reference = np.linalg.svd(tall_matrix, compute_uv=False)

        np.testing.assert_allclose(s, reference, atol=1e-12)
        np.testing.assert_allclose(reconstruct(P, s, Q), tall_matrix, atol=1e-10)

    def test_unknown_solver_rejected(self, tall_matrix):
        with pytest.raises(KeyError):
            stabilized_svd(tall_matrix, solver="magic")

    def test_arpack_matches_lapack_on_residuals(self, wine_rows, wine_categories):
        residuals = normalize_residuals(wine_rows, wine_categories)['residuals']

        _, s_dense, _ = stabilized_svd(residuals, solver="lapack")
        P, s_sparse, Q = stabilized_svd(residuals, solver="arpack", check_tolerance=1e-6)

        assert len(s_sparse) == len(s_dense) - 1
        assert is_sorted_descending(s_sparse)
        # Directions with (numerically) zero singular value are arbitrary
        significant = int(np.sum(s_dense > 1e-6))
        np.testing.assert_allclose(s_sparse[:significant], s_dense[:significant], atol=1e-8)

    def test_arpack_falls_back_on_single_column(self):
        A = np.array([[1.0], [2.0], [2.0]])
        U, s, V = arpack_svd(A)
        assert s == pytest.approx([3.0])


class TestSorting:

    def test_descending_by_magnitude(self):
        assert is_sorted_descending(np.array([3.0, -2.0, 1.0]))
        assert is_sorted_descending(np.array([1.0]))
        assert not is_sorted_descending(np.array([1.0, 2.0]))

    def test_factors_permuted_consistently(self):
        s = np.array([1.0, -3.0, 2.0])
        P = np.array([[10.0, 30.0, 20.0]])
        Q = np.array([[100.0, 300.0, 200.0], [1.0, 3.0, 2.0]])

        P_sorted, s_sorted, Q_sorted = sort_decomposition(P, s, Q)

        np.testing.assert_array_equal(s_sorted, [-3.0, 2.0, 1.0])
        np.testing.assert_array_equal(P_sorted, [[30.0, 20.0, 10.0]])
        np.testing.assert_array_equal(Q_sorted, [[300.0, 200.0, 100.0], [3.0, 2.0, 1.0]])


class TestSelfCheck:
    """Integrity failures are fatal only when the check is enabled."""

    def test_non_finite_output_rejected(self, tall_matrix):
        def broken(A, epsilon):
            U, s, V = lapack_svd(A, epsilon)
            s = s.copy()
            s[-1] = np.nan
            return U, s, V

        with pytest.raises(DecompositionIntegrityError, match="non-finite"):
            stabilized_svd(tall_matrix, solver=broken, check_tolerance=1e-6)

    def test_check_disabled_lets_garbage_through(self, tall_matrix):
        def broken(A, epsilon):
            U, s, V = lapack_svd(A, epsilon)
            return U, s * 2, V

        _, s, _ = stabilized_svd(tall_matrix, solver=broken)
        assert np.all(np.isfinite(s))

    def test_reconstruction_error_rejected(self, tall_matrix):
        def broken(A, epsilon):
            U, s, V = lapack_svd(A, epsilon)
            return U, s * 2, V

        with pytest.raises(DecompositionIntegrityError) as excinfo:
            stabilized_svd(tall_matrix, solver=broken, check_tolerance=1e-4)

        error = excinfo.value
        assert error.tolerance == 1e-4
        assert error.actual.shape == tall_matrix.shape
        np.testing.assert_array_equal(error.expected, tall_matrix)
        assert "Expected Z=" in str(error)
        assert "Actual P*s*Q=" in str(error)

    def test_failure_logged(self, tall_matrix, caplog):
        def broken(A, epsilon):
            U, s, V = lapack_svd(A, epsilon)
            return U, s + 1, V

        with pytest.raises(DecompositionIntegrityError):
            stabilized_svd(tall_matrix, solver=broken, check_tolerance=1e-4)
        assert "Catastrophic failure" in caplog.text


class TestFormatMatrix:

    def test_precision_follows_tolerance(self):
        text = format_matrix(np.array([[0.123456, 1.0]]), 1e-3)
        assert "0.123" in text
        assert "0.1235" not in text

    def test_coarse_tolerance_has_no_decimals(self):
        text = format_matrix(np.array([[2.4]]), 10.0)
        assert "2.4" not in text
