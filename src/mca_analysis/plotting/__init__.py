"""
Plotting utilities for MCA results.

All functions return Plotly Figure objects.
"""

from .core import plot_eigenvalue_correction, plot_variance_explained
from .model_plots import plot_biplot, plot_category_weights

__all__ = [
    'plot_variance_explained',
    'plot_eigenvalue_correction',
    'plot_biplot',
    'plot_category_weights',
]
