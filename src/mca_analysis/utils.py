"""
Utility functions for the MCA package.

This module provides helper functions for:
- Converting DataFrames into category schemas and observation rows
- Tabular (DataFrame) views of analysis results
- Interpreting a component through its strongest categories
- JSON-friendly rendering of results for the API

These utilities only deal with data layout; all numerical work lives in
the ``models`` subpackage.
"""

from typing import Any, Dict, List, Optional

import numpy as np
import pandas as pd


# =============================================================================
# DATAFRAME ADAPTERS
# =============================================================================

def _native(value: Any) -> Any:
    """Unwrap numpy scalars so category values compare and serialize like Python values."""
    if isinstance(value, np.generic):
        return value.item()
    return value


def infer_categories(df: pd.DataFrame, columns: Optional[List[str]] = None) -> Dict[str, list]:
    """
    Build a category schema from the values observed in a DataFrame.

    Args:
        df: One row per observation
        columns: Columns to include (default: all)

    Returns:
        Mapping of column name to its distinct non-null values, in order of
        first appearance
    """
    columns = list(df.columns) if columns is None else columns
    return {
        col: [_native(v) for v in pd.unique(df[col].dropna())]
        for col in columns
    }


def rows_from_frame(df: pd.DataFrame, columns: Optional[List[str]] = None) -> List[dict]:
    """Convert a DataFrame into observation rows, leaving null cells out (missing)."""
    columns = list(df.columns) if columns is None else columns
    return [
        {key: _native(value) for key, value in record.items() if not pd.isna(value)}
        for record in df[columns].to_dict(orient='records')
    ]


# =============================================================================
# RESULT VIEWS
# =============================================================================

def results_to_frames(result: Dict, index: Optional[pd.Index] = None) -> Dict[str, pd.DataFrame]:
    """
    Tabular views of a ``fit_mca`` result.

    Returns:
        Dictionary with:
        - 'variance': Eigenvalue, Explained Variance and Cumulative Explained
          Variance per component
        - 'row_factors': observation coordinates, one column per component
        - 'category_weights': long table (Component, Variable, Category, Weight);
          empty when column factors were not computed
    """
    dims = [f"Dim {i + 1}" for i in range(result['rank'])]
    explained = np.asarray(result['explained_variance'])

    variance = pd.DataFrame({
        'Eigenvalue': np.asarray(result['eigenvalues']),
        'Explained Variance': explained,
        'Cumulative Explained Variance': np.cumsum(explained),
    }, index=dims)

    row_factors = result['row_factors']
    if not isinstance(row_factors, pd.DataFrame):
        row_factors = pd.DataFrame(row_factors, index=index, columns=dims)

    records = []
    for i, component in enumerate(result['column_factors'] or []):
        for variable, weights in component.items():
            for category, weight in weights.items():
                records.append({
                    'Component': dims[i],
                    'Variable': variable,
                    'Category': category,
                    'Weight': weight,
                })
    category_weights = pd.DataFrame(records, columns=['Component', 'Variable', 'Category', 'Weight'])

    return {
        'variance': variance,
        'row_factors': row_factors,
        'category_weights': category_weights,
    }


def interpret_dimension(result: Dict, dimension: int = 0, top_n: int = 5) -> Dict:
    """
    Interpret a component by the categories that weigh most on it.

    Categories with large weights (in absolute value) are the best markers of
    what the component separates; the sign tells which side of the axis the
    category sits on.

    Args:
        result: ``fit_mca`` result computed with column factors
        dimension: Which component to interpret (0-indexed)
        top_n: How many categories to return

    Returns:
        Dictionary with lists of top categories (as (variable, category)
        pairs) and their weights
    """
    component = result['column_factors'][dimension]
    ranked = sorted(
        ((variable, category, weight)
         for variable, weights in component.items()
         for category, weight in weights.items()),
        key=lambda item: abs(item[2]),
        reverse=True,
    )[:top_n]

    return {
        'top_categories': [(variable, category) for variable, category, _ in ranked],
        'top_weights': [weight for _, _, weight in ranked],
    }


def to_response_payload(result: Dict) -> Dict:
    """Render a ``fit_mca`` result with lists and string category keys."""
    row_factors = result['row_factors']
    if isinstance(row_factors, pd.DataFrame):
        row_factors = row_factors.to_numpy()

    column_factors = None
    if result['column_factors'] is not None:
        column_factors = [
            {str(variable): {str(category): weight for category, weight in weights.items()}
             for variable, weights in component.items()}
            for component in result['column_factors']
        ]

    return {
        'explained_variance': np.asarray(result['explained_variance']).tolist(),
        'eigenvalues': np.asarray(result['eigenvalues']).tolist(),
        'singular_values': np.asarray(result['singular_values']).tolist(),
        'rank': int(result['rank']),
        'n_variables': int(result['n_variables']),
        'variables': [str(v) for v in result['variables']],
        'row_factors': np.asarray(row_factors).tolist(),
        'column_factors': column_factors,
    }
