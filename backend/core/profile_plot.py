from __future__ import annotations

from typing import Any, Sequence

import pandas as pd
import plotly.graph_objects as go

from core.constants import PROFILE_MAX_POINTS
from core.formatting import format_elapsed


def downsample(df: pd.DataFrame, max_points: int = PROFILE_MAX_POINTS) -> pd.DataFrame:
    """Garde un point sur n pour rester sous max_points (dernier point conserve)."""

    if len(df) <= max_points or max_points <= 0:
        return df
    step = -(-len(df) // max_points)
    out = df.iloc[::step]
    if out.index[-1] != df.index[-1]:
        out = pd.concat([out, df.iloc[[-1]]])
    return out


def build_profile_plot(df_track: pd.DataFrame, markers: Sequence[dict[str, Any]] | None = None) -> go.Figure:
    """
    Profil altimetrique (altitude vs distance) avec temps predit au survol et points de passage.
    """
    df_plot = downsample(df_track)
    x_km = df_plot["distance_m"] / 1000.0
    if "predicted_time_s" in df_plot:
        time_display = df_plot["predicted_time_s"].apply(lambda v: format_elapsed(v) if v == v else "-")
    else:
        time_display = pd.Series(["-"] * len(df_plot), index=df_plot.index)

    fig = go.Figure()
    fig.add_trace(
        go.Scatter(
            x=x_km,
            y=df_plot["elevation_m"],
            mode="lines",
            name="Altitude (m)",
            line=dict(color="#82ca9d"),
            fill="tozeroy",
            fillcolor="rgba(130,202,157,0.35)",
            customdata=time_display,
            hovertemplate="Distance: %{x:.2f} km<br>Altitude: %{y:.0f} m<br>Temps: %{customdata}<extra></extra>",
        )
    )

    if markers:
        fig.add_trace(
            go.Scatter(
                x=[m["distance_km"] for m in markers],
                y=[m["elevation_m"] for m in markers],
                mode="markers+text",
                marker=dict(color="red", size=10),
                text=[m["label"] for m in markers],
                textposition="top center",
                showlegend=False,
                hoverinfo="text",
            )
        )

    fig.update_layout(
        xaxis=dict(
            title="Distance (km)",
            showspikes=True,
            spikemode="across",
            spikesnap="cursor",
            spikethickness=1,
            spikecolor="#999",
        ),
        yaxis=dict(title="Altitude (m)"),
        legend=dict(orientation="h", y=-0.2),
        margin=dict(t=40, b=40),
    )
    return fig
