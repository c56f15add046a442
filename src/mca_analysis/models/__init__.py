"""
Model fitting functions for Multiple Correspondence Analysis.

The pipeline is split into three stages, one module each:
- Indicator/normalization (indicator.py): categorical rows to residual matrix
- Stabilized decomposition (svd.py): defensive wrapper around SVD primitives
- Factor-space projection (mca.py): eigenvalue correction, trimming, scores
"""

from .indicator import (
    active_variables,
    build_indicator_matrix,
    inv_sqrt,
    normalize_residuals,
    same_category,
)

from .svd import (
    SVD_SOLVERS,
    arpack_svd,
    check_decomposition,
    is_sorted_descending,
    lapack_svd,
    oriented_svd,
    sort_decomposition,
    stabilized_svd,
)

from .mca import (
    correct_eigenvalues,
    decompose_category_weights,
    fit_mca,
    fit_mca_frame,
    greenacre_inertia,
    project_columns,
    project_rows,
    trim_rank,
)

__all__ = [
    # Indicator / normalization
    'active_variables',
    'build_indicator_matrix',
    'inv_sqrt',
    'normalize_residuals',
    'same_category',
    # Decomposition
    'SVD_SOLVERS',
    'arpack_svd',
    'check_decomposition',
    'is_sorted_descending',
    'lapack_svd',
    'oriented_svd',
    'sort_decomposition',
    'stabilized_svd',
    # Projection
    'correct_eigenvalues',
    'decompose_category_weights',
    'fit_mca',
    'fit_mca_frame',
    'greenacre_inertia',
    'project_columns',
    'project_rows',
    'trim_rank',
]
