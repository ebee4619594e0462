"""Plotly figures for the summary tables and forecasts."""

from typing import Sequence

import numpy as np
import pandas as pd
import plotly.graph_objects as go


PALETTE = ["#1d4ed8", "#ef4444", "#10b981", "#f59e0b", "#a855f7", "#64748b"]
INTERVAL_FILL = "rgba(59, 130, 246, 0.15)"


def _numeric(frame: pd.DataFrame, column: str) -> np.ndarray:
    """Counts as float, <NA> as NaN."""
    return frame[column].to_numpy(dtype="float64", na_value=np.nan)


def _layout(fig: go.Figure, title: str, x_title: str, y_title: str) -> go.Figure:
    fig.update_layout(
        height=420,
        margin=dict(l=40, r=20, t=50, b=40),
        title=dict(text=title, x=0),
        xaxis=dict(title=x_title, showgrid=True, gridcolor="#e2e8f0"),
        yaxis=dict(title=y_title, showgrid=True, gridcolor="#e2e8f0"),
        plot_bgcolor="white",
        legend=dict(orientation="h", yanchor="bottom", y=1.02, xanchor="right", x=1),
        hovermode="x unified",
    )
    return fig


def line_chart(
    frame: pd.DataFrame,
    columns: Sequence[str],
    title: str,
    x: str = "date",
    y_title: str = "Cumulative count",
) -> go.Figure:
    """One line per column against the x column."""
    fig = go.Figure()
    for i, column in enumerate(columns):
        fig.add_trace(go.Scatter(
            x=frame[x], y=_numeric(frame, column),
            mode="lines", line=dict(color=PALETTE[i % len(PALETTE)], width=2),
            name=column,
        ))
    return _layout(fig, title, x.capitalize(), y_title)


def scatter_chart(frame: pd.DataFrame, x: str, y: str, title: str, label: str | None = None) -> go.Figure:
    """Markers of y against x, optionally labelled per point on hover."""
    fig = go.Figure(go.Scatter(
        x=_numeric(frame, x), y=_numeric(frame, y),
        mode="markers", marker=dict(color=PALETTE[0], size=8, opacity=0.7),
        text=frame[label] if label else None,
        name=y,
    ))
    fig = _layout(fig, title, x.capitalize(), y.capitalize())
    fig.update_layout(hovermode="closest")
    return fig


def bar_chart(frame: pd.DataFrame, x: str, y: str, title: str) -> go.Figure:
    """Bars in the frame's row order."""
    fig = go.Figure(go.Bar(
        x=frame[x], y=_numeric(frame, y),
        marker_color=PALETTE[0],
        name=y,
    ))
    return _layout(fig, title, x.capitalize(), y.capitalize())


def forecast_chart(history: pd.DataFrame, forecast: pd.DataFrame, title: str) -> go.Figure:
    """
    Observed points, the predicted line and its uncertainty band.

    history has ds/y columns, forecast has date/yhat/yhat_lower/yhat_upper.
    """
    fig = go.Figure()

    # Band drawn as upper line then lower line filled up to it
    fig.add_trace(go.Scatter(
        x=forecast["date"], y=forecast["yhat_upper"],
        mode="lines", line=dict(width=0),
        hoverinfo="skip", showlegend=False,
    ))
    fig.add_trace(go.Scatter(
        x=forecast["date"], y=forecast["yhat_lower"],
        mode="lines", line=dict(width=0),
        fill="tonexty", fillcolor=INTERVAL_FILL,
        name="Uncertainty interval",
    ))
    fig.add_trace(go.Scatter(
        x=forecast["date"], y=forecast["yhat"],
        mode="lines", line=dict(color=PALETTE[0], width=2),
        name="Forecast",
    ))
    fig.add_trace(go.Scatter(
        x=history["ds"], y=history["y"],
        mode="markers", marker=dict(color="#0f172a", size=3),
        name="Observed",
    ))

    if not history.empty:
        fig.add_vline(x=history["ds"].max(), line_dash="dot", line_color="#475569", line_width=1)

    return _layout(fig, title, "Date", "Cumulative count")
