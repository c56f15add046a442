"""
Multiple Correspondence Analysis (MCA) for categorical observation tables.

MCA is the extension of Principal Component Analysis (PCA) to categorical data.
It places observations (rows) and categories (columns) in one low-dimensional
factor space, where proximity indicates association.

The method works by:
1. Creating an indicator matrix from the categorical rows
2. Normalizing it into a standardized residual matrix
3. Decomposing that matrix with a stabilized SVD
4. Correcting the eigenvalues (Benzécri) and the total inertia (Greenacre)
5. Trimming to the significant components
6. Projecting rows and columns, and attributing each component back to
   named categories

Raw MCA eigenvalues are inflated by the indicator coding and badly
understate the variance explained by the leading axes. With K variables,
the Benzécri correction maps each eigenvalue λ to

    (K/(K-1) * (λ - 1/K))²    if λ >= 1/K, else 0

and Greenacre's adjustment replaces the total inertia by

    K/(K-1) * (Σ λ² - (J-K)/K²)

where J is the number of categories that received any mass. With missing
values the adjustment can undershoot the retained eigenvalues; the sum of
the retained eigenvalues is used instead.

References:
    Abdi, H., & Valentin, D. (2007). Multiple Correspondence Analysis.
    Greenacre, M. (2017). Correspondence analysis in practice (3rd ed.).
"""

import logging
from collections.abc import Mapping
from typing import Any, Dict, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from ..schemas import MCAOptions, resolve_options
from ..utils import infer_categories, rows_from_frame
from .indicator import MASS_EPSILON, normalize_residuals
from .svd import stabilized_svd

logger = logging.getLogger(__name__)


# =============================================================================
# EIGENVALUES AND RANK
# =============================================================================

def correct_eigenvalues(singular_values: np.ndarray, n_variables: int,
                        benzecri: bool = True) -> np.ndarray:
    """
    Turn singular values into (optionally Benzécri-corrected) eigenvalues.

    Args:
        singular_values: Singular values of the residual matrix, descending
        n_variables: K, the number of active variables (must be >= 2 to correct)
        benzecri: Whether to apply the correction

    Returns:
        Eigenvalues in the order of the singular values
    """
    eigenvalues = np.asarray(singular_values, dtype=float) ** 2
    if not benzecri:
        return eigenvalues

    K = n_variables
    corrected = (K / (K - 1) * (eigenvalues - 1 / K)) ** 2
    return np.where(eigenvalues < 1 / K, 0.0, corrected)


def trim_rank(eigenvalues: np.ndarray, tolerance: float,
              n_components: Optional[int] = None) -> Tuple[int, float]:
    """
    Count the leading eigenvalues worth keeping.

    Walks the eigenvalues in order and stops at the first one that does not
    exceed ``tolerance`` or when the cap is reached. Retention never resumes
    after the first failure. A zero rank falls back to keeping everything up
    to the cap.

    Returns:
        Tuple of (rank, inertia) where inertia is the sum of the retained
        eigenvalues
    """
    cap = len(eigenvalues) if n_components is None else min(n_components, len(eigenvalues))

    rank = 0
    inertia = 0.0
    while rank < cap and eigenvalues[rank] > tolerance:
        inertia += float(eigenvalues[rank])
        rank += 1

    if rank == 0:
        rank = cap
        inertia = float(np.sum(eigenvalues[:rank]))

    return rank, inertia


def greenacre_inertia(singular_values: np.ndarray, n_variables: int, n_columns: int) -> float:
    """Greenacre's adjusted total inertia, K/(K-1) * (Σ s⁴ - (J-K)/K²)."""
    K = n_variables
    J = n_columns
    return K / (K - 1) * (float(np.sum(np.asarray(singular_values) ** 4)) - (J - K) / K ** 2)


# =============================================================================
# PROJECTION
# =============================================================================

def project_rows(P: np.ndarray, scaling: np.ndarray, row_scale: np.ndarray) -> np.ndarray:
    """Row factor scores: row_scale[i] * scaling[j] * P[i, j]."""
    rank = len(scaling)
    return row_scale[:, np.newaxis] * P[:, :rank] * scaling[np.newaxis, :]


def project_columns(Q: np.ndarray, scaling: np.ndarray, column_inv_sqrt: np.ndarray) -> np.ndarray:
    """Column coordinates: column_inv_sqrt[c] * scaling[i] * Q[c, i], shape (n_columns, rank)."""
    rank = len(scaling)
    return column_inv_sqrt[:, np.newaxis] * Q[:, :rank] * scaling[np.newaxis, :]


def decompose_category_weights(column_coordinates: np.ndarray,
                               variables: List[Any],
                               levels: List[List[Any]],
                               tolerance: float) -> List[Dict[Any, Dict[Any, float]]]:
    """
    Attribute each component back to named categories.

    For every component, the column coordinates are split by variable block.
    Categories whose |weight| does not exceed ``tolerance`` are dropped, and a
    variable is kept only if its retained |weights| sum above ``tolerance``.

    Returns:
        One mapping per component of {variable: {category: weight}}
    """
    components = []
    for weights in column_coordinates.T:
        component = {}
        offset = 0
        for name, cats in zip(variables, levels):
            block = weights[offset:offset + len(cats)]
            offset += len(cats)
            kept = {cat: float(w) for cat, w in zip(cats, block) if abs(w) > tolerance}
            if sum(abs(w) for w in kept.values()) > tolerance:
                component[name] = kept
        components.append(component)
    return components


# =============================================================================
# PUBLIC ENTRY POINTS
# =============================================================================

def fit_mca(rows: Sequence[Mapping], categories: Mapping,
            options: Optional[MCAOptions] = None, **overrides: Any) -> Dict:
    """
    Fit Multiple Correspondence Analysis.

    Args:
        rows: Observation rows. Each row maps variable names to a category
              value; omitted variables count as missing. Keys outside the
              schema are ignored.
        categories: Mapping of variable name to its allowed categories.
                    Variables without categories are skipped.
        options: Analysis options. Defaults come from the environment settings.
        **overrides: Individual option overrides, e.g. ``n_components=2``

    Returns:
        Dictionary with:
        - explained_variance: (rank,) share of inertia per retained component
        - row_factors: (n_rows, rank) observation coordinates
        - column_coordinates: (n_columns, rank) category coordinates, or None
        - column_factors: per component {variable: {category: weight}}, or None
        - eigenvalues: (rank,) retained (corrected) eigenvalues
        - singular_values: all singular values, descending
        - rank: number of retained components
        - inertia: denominator used for explained_variance
        - n_variables: K, the number of active variables
        - variables: active variable names
        - category_labels: (variable, category) pair per column
        - row_masses / column_masses: marginal weights

    Raises:
        MalformedSchemaError: If no variable has a category
        MalformedInputError: If there are no rows, or a row is not a mapping
        DecompositionIntegrityError: If the SVD self-check is enabled and fails
    """
    options = resolve_options(options, **overrides)

    table = normalize_residuals(rows, categories)
    K = table['n_variables']
    n_columns = table['residuals'].shape[1]
    logger.info(
        f"Fitting MCA on {table['residuals'].shape[0]} rows, "
        f"{K} variables, {n_columns} categories"
    )

    P, s, Q = stabilized_svd(
        table['residuals'],
        epsilon=options.epsilon,
        check_tolerance=options.svd_tolerance,
        solver=options.svd_solver,
    )

    # The correction divides by K - 1
    benzecri = options.benzecri
    if benzecri and K < 2:
        logger.warning("Benzécri correction needs at least two variables, using raw eigenvalues")
        benzecri = False

    eigenvalues = correct_eigenvalues(s, K, benzecri=benzecri)
    rank, inertia = trim_rank(eigenvalues, options.tolerance, options.n_components)
    retained = eigenvalues[:rank]

    if benzecri and options.greenacre:
        # Categories without mass carry no inertia
        n_observed = int(np.sum(table['column_masses'] > MASS_EPSILON))
        adjusted = greenacre_inertia(s, K, n_observed)
        total = float(np.sum(retained))
        if adjusted > 0 and total <= adjusted * (1 + 1e-9):
            inertia = max(adjusted, total)
        else:
            logger.warning(
                f"Greenacre inertia {adjusted:.4g} does not cover the retained eigenvalues "
                f"({total:.4g}), using their sum as the denominator"
            )
    if inertia > 0:
        explained_variance = retained / inertia
    else:
        explained_variance = np.zeros(rank)

    scaling = -np.sqrt(retained) if benzecri else retained

    if options.row_scaling == "mass":
        row_scale = table['row_masses']
    else:
        row_scale = table['row_inv_sqrt']
    row_factors = project_rows(P, scaling, row_scale)

    column_coordinates = None
    column_factors = None
    if options.column_factors:
        column_coordinates = project_columns(Q, scaling, table['column_inv_sqrt'])
        column_factors = decompose_category_weights(
            column_coordinates, table['variables'], table['levels'], options.tolerance
        )

    logger.info(
        f"MCA retained {rank} of {len(eigenvalues)} components, "
        f"explaining {float(np.sum(explained_variance)):.1%} of inertia"
    )

    return {
        'explained_variance': explained_variance,
        'row_factors': row_factors,
        'column_coordinates': column_coordinates,
        'column_factors': column_factors,
        'eigenvalues': retained,
        'singular_values': s,
        'rank': rank,
        'inertia': inertia,
        'n_variables': K,
        'variables': table['variables'],
        'category_labels': [
            (name, cat) for name, cats in zip(table['variables'], table['levels']) for cat in cats
        ],
        'row_masses': table['row_masses'],
        'column_masses': table['column_masses'],
    }


def fit_mca_frame(df: pd.DataFrame, columns: Optional[List[str]] = None,
                  categories: Optional[Mapping] = None,
                  options: Optional[MCAOptions] = None, **overrides: Any) -> Dict:
    """
    Fit MCA on a DataFrame of categorical columns.

    Null cells count as missing values. When ``categories`` is not given,
    the allowed categories of each column are the distinct values observed.

    Args:
        df: One row per observation
        columns: Columns to analyse (default: all, or the keys of ``categories``)
        categories: Optional explicit category schema
        options: Analysis options
        **overrides: Individual option overrides

    Returns:
        The ``fit_mca`` dictionary, with ``row_factors`` as a DataFrame
        indexed like ``df`` (columns "Dim 1", "Dim 2", ...)
    """
    if columns is None:
        columns = list(categories.keys()) if categories is not None else list(df.columns)
    if categories is None:
        categories = infer_categories(df, columns)

    result = fit_mca(rows_from_frame(df, columns), categories, options, **overrides)
    result['row_factors'] = pd.DataFrame(
        result['row_factors'],
        index=df.index,
        columns=[f"Dim {i + 1}" for i in range(result['rank'])],
    )
    return result
