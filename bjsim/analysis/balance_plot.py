"""Interactive Plotly chart of balance trajectories.

Two public functions:

    build_balance_figure(result)
        — One line per player: balance after each round, with a dashed
          reference line at the starting balance.
    save_balance_html(fig, path)
        — Export the figure to a self-contained HTML file.

Hover over any point to see the round number and balance.
"""

from __future__ import annotations

import numpy as np
import plotly.graph_objects as go

from bjsim.analysis.simulator import SimulationResult


def build_balance_figure(result: SimulationResult, title: str | None = None) -> go.Figure:
    """Return a line chart of every player's balance by round.

    Args:
        result: SimulationResult from run_simulation().
        title:  Figure title; defaults to a summary of the run.

    Returns:
        go.Figure with one Scatter trace per player.
    """
    rounds = np.arange(result.history.shape[0])
    fig = go.Figure()
    for index, pid in enumerate(result.player_ids):
        fig.add_trace(
            go.Scatter(
                x=rounds,
                y=result.history[:, index],
                mode="lines",
                name=pid,
                hovertemplate=f"<b>{pid}</b><br>Round %{{x}}<br>Balance %{{y:.2f}}<extra></extra>",
            )
        )

    if result.history.size:
        fig.add_hline(
            y=float(result.history[0].max()),
            line_dash="dash",
            line_color="#888888",
            annotation_text="start",
        )

    fig.update_layout(
        title=title or f"Balance over {result.n_rounds:,} rounds ({result.stop_reason})",
        xaxis_title="Round",
        yaxis_title="Balance",
        hovermode="x unified",
    )
    return fig


def save_balance_html(fig: go.Figure, path: str) -> None:
    """Write fig to path as a standalone HTML file (plotly.js inlined)."""
    fig.write_html(path, include_plotlyjs=True, full_html=True)
