"""
General plotting functions for MCA results: how much of the inertia each
component carries, and what the eigenvalue correction does to it.

All functions return Plotly Figure objects.
"""

from typing import Optional

import numpy as np
import plotly.graph_objects as go
from plotly.subplots import make_subplots

from ..models.mca import correct_eigenvalues


def plot_variance_explained(explained_variance: np.ndarray,
                            model_name: str = "MCA",
                            basis: Optional[str] = None) -> go.Figure:
    """
    Plot the share of inertia per retained component, with a running total.

    Args:
        explained_variance: Share of inertia per component, as fractions
        model_name: Name of the model (for the plot title)
        basis: Optional note on the denominator (e.g. "Greenacre"), shown in
            the title

    Returns:
        Plotly Figure with component bars and a cumulative line on a
        secondary axis
    """
    shares = 100 * np.asarray(explained_variance, dtype=float)
    dims = [f"Dim {k}" for k in range(1, len(shares) + 1)]

    fig = make_subplots(specs=[[{"secondary_y": True}]])
    fig.add_trace(
        go.Bar(x=dims, y=shares, name='Per component', marker_color='steelblue',
               hovertemplate='%{x}: %{y:.1f}%<extra></extra>'),
        secondary_y=False,
    )
    fig.add_trace(
        go.Scatter(x=dims, y=np.cumsum(shares), name='Cumulative', mode='lines+markers',
                   line=dict(color='coral', width=2)),
        secondary_y=True,
    )

    title = f'{model_name} - Variance Explained'
    if basis:
        title += f' ({basis} inertia)'
    fig.update_layout(title=title, height=350, bargap=0.3)
    fig.update_yaxes(title_text="Share of inertia (%)", secondary_y=False)
    fig.update_yaxes(title_text="Cumulative (%)", range=[0, 105], secondary_y=True)
    return fig


def plot_eigenvalue_correction(singular_values: np.ndarray, n_variables: int) -> go.Figure:
    """
    Compare raw and Benzécri-corrected eigenvalues.

    Raw eigenvalues below 1/K (dotted line) carry no structure beyond the
    indicator coding and are corrected to zero.

    Args:
        singular_values: All singular values of the residual matrix
        n_variables: K, the number of active variables (at least 2)

    Returns:
        Plotly Figure with grouped bars per component
    """
    if n_variables < 2:
        raise ValueError("Eigenvalue correction needs at least two variables")

    raw = correct_eigenvalues(singular_values, n_variables, benzecri=False)
    corrected = correct_eigenvalues(singular_values, n_variables, benzecri=True)
    dims = [f"Dim {k}" for k in range(1, len(raw) + 1)]

    fig = go.Figure()
    fig.add_trace(go.Bar(x=dims, y=raw, name='Raw', marker_color='lightgray'))
    fig.add_trace(go.Bar(x=dims, y=corrected, name='Benzécri', marker_color='steelblue'))
    fig.add_hline(y=1 / n_variables, line_dash="dot", line_color="gray",
                  annotation_text="1/K", annotation_position="top right")

    fig.update_layout(
        title='Eigenvalues before and after correction',
        barmode='group',
        yaxis_title='Eigenvalue',
        height=350,
    )
    return fig
