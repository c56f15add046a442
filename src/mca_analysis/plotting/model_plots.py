"""
MCA-specific visualizations: the category/observation biplot and
per-component category weights.
"""

from typing import Dict, Optional

import numpy as np
import plotly.graph_objects as go
from plotly.subplots import make_subplots


def plot_biplot(result: Dict,
                dim_x: int = 0,
                dim_y: int = 1,
                title: str = "MCA Biplot",
                show_rows: bool = True,
                max_rows: int = 1000,
                seed: int = 42) -> go.Figure:
    """
    Create a biplot showing categories and observations in factor space.

    Categories are drawn as labelled points, one colour per variable, and
    observations (optionally) as small grey background points. Categories
    close together tend to co-occur; categories near the origin are
    average and not distinctive.

    Args:
        result: ``fit_mca`` result computed with column factors
        dim_x: Which component to plot on the x-axis (0-indexed)
        dim_y: Which component to plot on the y-axis (0-indexed)
        title: Plot title
        show_rows: Whether to show observation points
        max_rows: Maximum number of observations to plot (for performance)
        seed: Seed for the observation subsample

    Returns:
        Plotly Figure with the biplot
    """
    coords = result['column_coordinates']
    if coords is None:
        raise ValueError("Biplot needs column coordinates, fit with column_factors=True")
    rank = coords.shape[1]
    if max(dim_x, dim_y) >= rank:
        raise ValueError(f"Requested dimension {max(dim_x, dim_y) + 1} but only {rank} retained")

    fig = go.Figure()

    colors = ['#636EFA', '#EF553B', '#00CC96', '#AB63FA', '#FFA15A',
              '#19D3F3', '#FF6692', '#B6E880', '#FF97FF', '#FECB52']

    # Observations first (as background)
    if show_rows:
        rows = np.asarray(result['row_factors'])
        if len(rows) > max_rows:
            rng = np.random.default_rng(seed)
            rows = rows[rng.choice(len(rows), max_rows, replace=False)]

        fig.add_trace(go.Scatter(
            x=rows[:, dim_x],
            y=rows[:, dim_y],
            mode='markers',
            marker=dict(size=4, color='lightgray', opacity=0.5),
            name='Observations',
            hoverinfo='skip'
        ))

    labels = result['category_labels']
    for c, variable in enumerate(result['variables']):
        idx = [i for i, (name, _) in enumerate(labels) if name == variable]
        fig.add_trace(go.Scatter(
            x=coords[idx, dim_x],
            y=coords[idx, dim_y],
            mode='markers+text',
            marker=dict(size=10, color=colors[c % len(colors)]),
            text=[f"{variable}={labels[i][1]}" for i in idx],
            textposition='top center',
            textfont=dict(size=10),
            name=str(variable),
            hovertemplate='%{text}<br>Dim ' + str(dim_x+1) + ': %{x:.3f}<br>Dim ' + str(dim_y+1) + ': %{y:.3f}<extra></extra>'
        ))

    explained = result['explained_variance']
    fig.update_layout(
        title=title,
        xaxis_title=f"Dimension {dim_x+1} ({explained[dim_x] * 100:.1f}%)",
        yaxis_title=f"Dimension {dim_y+1} ({explained[dim_y] * 100:.1f}%)",
        height=600,
        showlegend=True
    )

    # Crosshairs at origin
    fig.add_hline(y=0, line_dash="dash", line_color="gray", opacity=0.5)
    fig.add_vline(x=0, line_dash="dash", line_color="gray", opacity=0.5)

    return fig


def plot_category_weights(result: Dict, n_dims: int = 3,
                          top_n: Optional[int] = 10) -> go.Figure:
    """
    Plot the category weights that define each component.

    Only categories that survived weight trimming appear. Bars are sorted by
    absolute weight; the sign shows which end of the axis a category pulls
    towards.

    Args:
        result: ``fit_mca`` result computed with column factors
        n_dims: Number of components to show
        top_n: Categories per component (None for all)

    Returns:
        Plotly Figure with one horizontal bar chart per component
    """
    components = result['column_factors']
    if components is None:
        raise ValueError("Category weights need column factors, fit with column_factors=True")
    n_dims = max(1, min(n_dims, len(components)))

    fig = make_subplots(
        rows=1,
        cols=n_dims,
        subplot_titles=[f'Dimension {i+1}' for i in range(n_dims)]
    )

    colors = ['#636EFA', '#EF553B', '#00CC96', '#AB63FA', '#FFA15A']

    for d, component in enumerate(components[:n_dims]):
        entries = sorted(
            ((f"{variable}={category}", weight)
             for variable, weights in component.items()
             for category, weight in weights.items()),
            key=lambda item: abs(item[1]),
            reverse=True,
        )[:top_n]

        fig.add_trace(
            go.Bar(
                y=[label for label, _ in entries],
                x=[weight for _, weight in entries],
                orientation='h',
                marker_color=colors[d % len(colors)],
                showlegend=False
            ),
            row=1, col=d+1
        )

    fig.update_layout(
        height=400,
        title='Category Weights per MCA Dimension'
    )

    return fig
