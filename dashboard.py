"""
dashboard.py — Streamlit live dashboard for an Auto FFA match.

Launch:
    streamlit run dashboard.py

Reads only dashboard_data.json (written by the match driver); figures come
from autoffa.charts.  Auto-refreshes at 1 FPS via streamlit-autorefresh
(falls back to a manual Refresh button when the package is not installed).
"""

import json
import pathlib

import streamlit as st

from autoffa.charts import (TEAM_COLORS, build_diplomacy_heatmap, build_power_chart,
                            build_team_size_chart)

# ── Optional: streamlit-autorefresh for 1-FPS polling ────────────────────
try:
    from streamlit_autorefresh import st_autorefresh as _st_autorefresh
    _HAS_AUTOREFRESH = True
except ImportError:
    _HAS_AUTOREFRESH = False

DATA_PATH = pathlib.Path("dashboard_data.json")


# ══════════════════════════════════════════════════════════════════════════
# Data loading, TTL-cached per file mtime
# ══════════════════════════════════════════════════════════════════════════

@st.cache_data(ttl=2)
def _read_json(mtime: float) -> dict | None:          # mtime is the cache-bust key
    try:
        return json.loads(DATA_PATH.read_text(encoding='utf-8'))
    except (FileNotFoundError, json.JSONDecodeError):
        return None


def load_data() -> dict | None:
    try:
        mtime = DATA_PATH.stat().st_mtime
    except FileNotFoundError:
        return None
    return _read_json(mtime)


# ══════════════════════════════════════════════════════════════════════════
# Page config (first Streamlit call)
# ══════════════════════════════════════════════════════════════════════════

st.set_page_config(
    page_title='Auto FFA — Live Dashboard',
    page_icon='🏰',
    layout='wide',
    initial_sidebar_state='expanded',
)

st.markdown("""
<style>
[data-testid="stTextArea"] textarea {
    font-family: 'Courier New', monospace;
    font-size: 11px;
    background: #0a0e17;
    color: #a8c8a8;
    border: 1px solid #2a3040;
}
[data-testid="metric-container"] {
    background: #111827;
    border-radius: 8px;
    padding: 10px 16px;
    margin-bottom: 6px;
}
</style>
""", unsafe_allow_html=True)

if _HAS_AUTOREFRESH:
    _st_autorefresh(interval=1000, key='ffa_autorefresh')

data = load_data()

# ══════════════════════════════════════════════════════════════════════════
# Sidebar
# ══════════════════════════════════════════════════════════════════════════

with st.sidebar:
    st.title('🏰 Auto FFA')
    st.caption('Vassalage free-for-all · Live Monitor')

    if not _HAS_AUTOREFRESH:
        if st.button('⟳  Refresh', use_container_width=True):
            st.cache_data.clear()
            st.rerun()
        st.caption('Auto-refresh unavailable.\n`pip install streamlit-autorefresh`')

    st.divider()

    if data is None:
        st.warning(
            '**Waiting for match data…**\n\n'
            'Start a match first:\n\n```\npython -m autoffa\n```\n\n'
            'The dashboard file is written once per cycle.'
        )
    else:
        teams_ = data.get('teams', [])
        st.metric('⏱  Tick',        f'{data["tick"]:,}')
        st.metric('⚡ Tick Rate',    f'{data["tick_rate"]:.0f} t/s')
        st.metric('🛡  Teams',       str(len(teams_)))
        st.metric('🎯 Bounty',       data.get('bounty') or '—')
        if data.get('finished'):
            st.success(f'Winner: **{data.get("winner")}**')

        st.divider()
        st.subheader('Teams')
        for idx, t in enumerate(teams_[:10]):
            color = TEAM_COLORS[idx % len(TEAM_COLORS)]
            truce = f' · 🕊 {t["truce_left"]}' if t['truce_left'] else ''
            rival = f' · vs {t["rival"]}' if t.get('rival') else ''
            st.markdown(
                f'<span style="color:{color}">●</span> '
                f'**{t["leader"]}**{truce}  \n'
                f'&nbsp;&nbsp;&nbsp;{t["size"]} members · {t["power"]:.0f} pts{rival}',
                unsafe_allow_html=True,
            )

# ══════════════════════════════════════════════════════════════════════════
# Main panel
# ══════════════════════════════════════════════════════════════════════════

if data is None:
    st.info(
        '**dashboard_data.json** not found yet.  \n'
        'Start a match (`python -m autoffa`) and the first snapshot '
        'appears after one cycle.'
    )
    st.stop()

st.markdown(
    f'### Tick **{data["tick"]:,}** &nbsp;·&nbsp; '
    f'{len(data.get("teams", []))} teams &nbsp;·&nbsp; '
    f'{sum(1 for p in data.get("participants", []) if p["truce_left"])} under truce',
    unsafe_allow_html=True,
)

col_left, col_right = st.columns([3, 2], gap='medium')

with col_left:
    st.plotly_chart(
        build_power_chart(data),
        use_container_width=True,
        key='power_chart',
        config={'displayModeBar': False},
    )
    st.plotly_chart(
        build_diplomacy_heatmap(data),
        use_container_width=True,
        key='diplomacy_heatmap',
        config={'displayModeBar': False},
    )

with col_right:
    st.plotly_chart(
        build_team_size_chart(data),
        use_container_width=True,
        key='team_sizes',
        config={'displayModeBar': False},
    )

    st.subheader('Event Feed')
    events    = list(reversed(data.get('event_tail', [])))
    event_txt = '\n'.join(events[:30])
    st.text_area(
        label='Events',
        value=event_txt,
        height=240,
        disabled=True,
        key='event_feed',
        label_visibility='collapsed',
    )
