"""
Indicator matrix construction and normalization for MCA.

Each categorical variable is unpacked into one column per allowed category
(complete disjunctive coding). A row that omits a variable, or gives it a
value outside the allowed categories, spreads a uniform 1/|categories| over
that variable's column block instead of failing. Either way every variable
block sums to exactly 1 per row.

The indicator matrix is then scaled by the total number of
(row, variable) assignments, and re-centred by the outer product of its
row and column margins, weighted by the inverse square roots of the margins.
The result is the standardized residual matrix that gets decomposed.

References:
    Abdi, H., & Valentin, D. (2007). Multiple Correspondence Analysis.
    https://en.wikipedia.org/wiki/Multiple_correspondence_analysis#Details
"""

import logging
from collections.abc import Mapping
from typing import Any, Dict, List, Sequence, Tuple

import numpy as np

from ..exceptions import MalformedInputError, MalformedSchemaError

logger = logging.getLogger(__name__)

# Margins at or below this are treated as empty (no observed mass)
MASS_EPSILON = 1e-6


def _is_bool(value: Any) -> bool:
    return isinstance(value, (bool, np.bool_))


def same_category(category: Any, value: Any) -> bool:
    """
    Exact category match.

    Plain ``==`` is not enough in Python since ``True == 1``; booleans only
    match booleans.
    """
    if _is_bool(category) != _is_bool(value):
        return False
    try:
        return bool(category == value)
    except (TypeError, ValueError):
        return False


def active_variables(categories: Mapping) -> Tuple[List[Any], List[List[Any]]]:
    """
    Drop variables without categories, keeping schema order.

    Returns:
        Tuple of (variable names, category lists)

    Raises:
        MalformedSchemaError: If no variable has at least one category
    """
    variables = []
    levels = []
    for name, cats in categories.items():
        cats = list(cats) if cats is not None else []
        if len(cats) > 0:
            variables.append(name)
            levels.append(cats)
    if not variables:
        raise MalformedSchemaError(
            "Category schema has no variable with at least one category"
        )
    return variables, levels


def inv_sqrt(x: np.ndarray) -> np.ndarray:
    """Elementwise 1/sqrt(x), with 0 wherever x <= MASS_EPSILON."""
    x = np.asarray(x, dtype=float)
    safe = np.where(x > MASS_EPSILON, x, 1.0)
    return np.where(x > MASS_EPSILON, 1.0 / np.sqrt(safe), 0.0)


def build_indicator_matrix(rows: Sequence[Mapping],
                           variables: List[Any],
                           levels: List[List[Any]]) -> Tuple[np.ndarray, int]:
    """
    Build the (unscaled) indicator matrix.

    Args:
        rows: Observation rows (mappings from variable name to value)
        variables: Active variable names, in column-block order
        levels: Category list per active variable

    Returns:
        Tuple of (Z, total_count) where Z is (n_rows, n_columns) and
        total_count is the number of (row, variable) assignments.
    """
    n_columns = sum(len(cats) for cats in levels)
    Z = np.zeros((len(rows), n_columns))
    known = set(variables)
    total_count = 0
    unmatched = 0
    ignored_keys = set()

    for i, row in enumerate(rows):
        if not isinstance(row, Mapping):
            raise MalformedInputError(
                f"Row {i} is a {type(row).__name__}, expected a mapping of variable to category"
            )
        ignored_keys.update(k for k in row if k not in known)

        offset = 0
        for name, cats in zip(variables, levels):
            width = len(cats)
            hit = None
            if name in row:
                value = row[name]
                hit = next((j for j, c in enumerate(cats) if same_category(c, value)), None)
                if hit is None:
                    unmatched += 1
            if hit is None:
                # Missing or unmatched: uniform fractional assignment
                Z[i, offset:offset + width] = 1.0 / width
            else:
                Z[i, offset + hit] = 1.0
            total_count += 1
            offset += width

    if unmatched:
        logger.warning(
            f"{unmatched} value(s) matched no allowed category and were treated as missing"
        )
    if ignored_keys:
        logger.debug(f"Ignoring keys not in the category schema: {sorted(map(str, ignored_keys))}")

    return Z, total_count


def normalize_residuals(rows: Sequence[Mapping], categories: Mapping) -> Dict:
    """
    Turn categorical rows into the normalized residual matrix.

    Args:
        rows: Observation rows
        categories: Mapping of variable name to allowed categories

    Returns:
        Dictionary with:
        - residuals: (n_rows, n_columns) standardized residual matrix
        - indicator: unscaled indicator matrix (blocks sum to 1 per row)
        - row_masses / column_masses: D_r and D_c (each sums to 1)
        - row_inv_sqrt / column_inv_sqrt: inverse square roots of the masses
        - variables: active variable names
        - levels: category list per active variable
        - n_variables: K, the number of active variables
        - total_count: number of (row, variable) assignments

    Raises:
        MalformedSchemaError: If no variable has a category
        MalformedInputError: If there are no rows, or a row is not a mapping
    """
    variables, levels = active_variables(categories)
    rows = list(rows)
    if len(rows) == 0:
        raise MalformedInputError("At least one observation row is required")

    indicator, total_count = build_indicator_matrix(rows, variables, levels)

    # Normalize to a correspondence matrix and take its margins
    Z = indicator / total_count
    row_masses = Z.sum(axis=1)
    column_masses = Z.sum(axis=0)

    row_inv_sqrt = inv_sqrt(row_masses)
    column_inv_sqrt = inv_sqrt(column_masses)
    residuals = np.outer(row_inv_sqrt, column_inv_sqrt) * (Z - np.outer(row_masses, column_masses))

    return {
        'residuals': residuals,
        'indicator': indicator,
        'row_masses': row_masses,
        'column_masses': column_masses,
        'row_inv_sqrt': row_inv_sqrt,
        'column_inv_sqrt': column_inv_sqrt,
        'variables': variables,
        'levels': levels,
        'n_variables': len(variables),
        'total_count': total_count,
    }
