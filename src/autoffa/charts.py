# (c) 2026 (KriaetvAspie / AspieTheBard)
# Licensed under the Polyform Noncommercial License 1.0.0
"""
charts.py — Plotly figures for the live dashboard.

Every builder takes the decoded dashboard_data.json dict and returns a
go.Figure, so the figures can be built and inspected without Streamlit.
"""

import numpy as np
import plotly.graph_objects as go

# Up to 10 distinct team / participant colours
TEAM_COLORS = [
    '#FF4B4B', '#FFB347', '#FAFF66', '#66FF99',
    '#66ECFF', '#6699FF', '#CC66FF', '#FF66C0',
    '#FFFFFF', '#AAAAAA',
]

# war / neutral / alliance, matching dashboard_bridge.DIPLOMACY_CODE
_DIPLOMACY_SCALE = [
    [0.0, '#b22222'],
    [0.5, '#555566'],
    [1.0, '#2e8b57'],
]

_DARK_LAYOUT = dict(
    paper_bgcolor='#0e1117',
    plot_bgcolor='#111827',
    font=dict(color='white'),
    legend=dict(bgcolor='rgba(0,0,0,0)', font=dict(color='white', size=11)),
    margin=dict(l=50, r=30, t=40, b=50),
)


def _title(text: str) -> dict:
    return dict(text=text, font=dict(color='#dddddd', size=13), x=0.0)


# ══════════════════════════════════════════════════════════════════════════
# Power over time
# ══════════════════════════════════════════════════════════════════════════

def build_power_chart(data: dict, top: int = 6) -> go.Figure:
    """Line chart: power points over time for the currently strongest participants."""
    history = data.get('power_history', [])
    latest  = history[-1]['power'] if history else {}
    leaders = sorted(latest, key=latest.get, reverse=True)[:top]

    fig = go.Figure()
    for idx, name in enumerate(leaders):
        ticks_ = [h['tick']          for h in history if name in h['power']]
        power_ = [h['power'][name]   for h in history if name in h['power']]
        fig.add_trace(go.Scatter(
            x=ticks_, y=power_,
            mode='lines',
            line=dict(color=TEAM_COLORS[idx % len(TEAM_COLORS)], width=2),
            name=name,
            hovertemplate=f'<b>{name}</b>: %{{y:.0f}}<br>Tick %{{x}}<extra></extra>',
        ))

    fig.update_layout(
        title=_title('Power Points Over Time'),
        xaxis=dict(title='Tick', gridcolor='#1e2233', zeroline=False),
        yaxis=dict(title='Power', gridcolor='#1e2233'),
        height=320,
        **_DARK_LAYOUT,
    )
    return fig


# ══════════════════════════════════════════════════════════════════════════
# Team sizes
# ══════════════════════════════════════════════════════════════════════════

def build_team_size_chart(data: dict) -> go.Figure:
    """Bar chart: members per team, coloured by team rank."""
    teams  = data.get('teams', [])
    labels = [t['leader'] or f"team {t['id']}" for t in teams]
    sizes  = [t['size'] for t in teams]
    colors = [TEAM_COLORS[i % len(TEAM_COLORS)] for i in range(len(teams))]

    fig = go.Figure(go.Bar(
        x=labels, y=sizes,
        marker=dict(color=colors),
        customdata=[t['power'] for t in teams],
        hovertemplate='<b>%{x}</b><br>Members: %{y}<br>Power: %{customdata:.0f}<extra></extra>',
    ))
    fig.update_layout(
        title=_title('Team Sizes'),
        xaxis=dict(tickangle=-30),
        yaxis=dict(title='Members', gridcolor='#1e2233', dtick=1),
        height=300,
        showlegend=False,
        **_DARK_LAYOUT,
    )
    return fig


# ══════════════════════════════════════════════════════════════════════════
# Diplomacy heat map
# ══════════════════════════════════════════════════════════════════════════

def diplomacy_array(data: dict) -> np.ndarray:
    """Diplomacy matrix as an int8 array (-1 war, 0 neutral, 1 alliance)."""
    matrix = data.get('diplomacy', [])
    if not matrix:
        return np.zeros((0, 0), dtype=np.int8)
    return np.asarray(matrix, dtype=np.int8)


def build_diplomacy_heatmap(data: dict) -> go.Figure:
    grid  = diplomacy_array(data)
    names = data.get('names', [])[:grid.shape[0]]
    text  = np.where(grid < 0, 'war', np.where(grid > 0, 'alliance', 'neutral'))

    fig = go.Figure(go.Heatmap(
        z=grid, x=names, y=names,
        zmin=-1, zmax=1,
        colorscale=_DIPLOMACY_SCALE,
        showscale=False,
        text=text,
        hovertemplate='%{y} ↔ %{x}: %{text}<extra></extra>',
    ))
    fig.update_layout(
        title=_title('Diplomacy'),
        yaxis=dict(autorange='reversed'),
        height=360,
        **_DARK_LAYOUT,
    )
    return fig
