# dashboard/components/disaster_types_tab.py

"""
Disaster Types by Year page.

- Year slider + sort select drive a single ChartView kept in session state
- Widget callbacks dispatch YearChanged / SortChanged; the script body only draws
- Animated passes play once in the embedded plotly chart
"""

from __future__ import annotations
import os
from typing import List, Optional

import pandas as pd
import streamlit as st
import streamlit.components.v1 as components

from disaster_bars.chart_view import ChartView, RenderPass, SORT_MODES, SORT_NONE
from disaster_bars.data_pipeline.aggregate_types import load_metric_table
from disaster_bars.data_pipeline.preprocess_disasters import YEAR_COL
from disaster_bars.utils.plot_utils import HEIGHT, build_figure, figure_html

# =========================
# CONFIG / PATHS (portable)
# =========================
DATA_ENV_VAR = "DISASTER_CSV"

DATA_PATHS = [
    "data/df_subset.csv",          # run from project root
    "../data/df_subset.csv",       # run from dashboard/
    "../../data/df_subset.csv",    # run from dashboard/components/
    "data/processed/df_subset.csv",
]

# None = most recent year in the data
DEFAULT_YEAR: Optional[int] = None
DEFAULT_SORT = SORT_NONE
SHOW_SKIPPED = True

VIEW_KEY = "__types_chart_view__"
PASS_KEY = "__types_chart_pass__"
SOURCE_KEY = "__types_chart_source__"
YEAR_KEY = "__year_slider__"
SORT_KEY = "__sort_select__"

# =========================
# RENDERING HELPERS
# =========================
def _anchor(id_: str):
    st.markdown(f'<div id="{id_}"></div>', unsafe_allow_html=True)

def section_title(text: str):
    st.markdown(f'<div class="gv-section-title">{text}</div>', unsafe_allow_html=True)

def story_context(text: str):
    st.markdown(f'<div class="gv-context">{text}</div>', unsafe_allow_html=True)

# =========================
# DATA LOADING
# =========================
def _first_existing_path(paths: List[str]) -> Optional[str]:
    for p in paths:
        if p and os.path.exists(p):
            return p
    return None

def data_path() -> Optional[str]:
    env = os.environ.get(DATA_ENV_VAR)
    return _first_existing_path(([env] if env else []) + DATA_PATHS)

@st.cache_data(show_spinner=False)
def load_types_table(path: str):
    return load_metric_table(path)

# =========================
# EVENTS (widget callbacks)
# =========================
def _on_year_change():
    view = st.session_state.get(VIEW_KEY)
    if view is not None:
        st.session_state[PASS_KEY] = view.on_year_change(st.session_state[YEAR_KEY])

def _on_sort_change():
    view = st.session_state.get(VIEW_KEY)
    if view is not None:
        st.session_state[PASS_KEY] = view.on_sort_change(st.session_state[SORT_KEY])

def _current_pass(metric: pd.DataFrame, categories: List[str], path: str) -> RenderPass:
    """Pending pass from a callback, a fresh view for new data, or a static redraw."""
    view = st.session_state.get(VIEW_KEY)
    if view is None or st.session_state.get(SOURCE_KEY) != path:
        view = ChartView()
        st.session_state[VIEW_KEY] = view
        st.session_state[SOURCE_KEY] = path
        st.session_state.pop(PASS_KEY, None)
        return view.initialize(metric, categories, st.session_state[YEAR_KEY], st.session_state[SORT_KEY])

    pending = st.session_state.pop(PASS_KEY, None)
    if pending is not None:
        return pending
    return view.render(animated=False)

# =========================
# PAGE RENDER
# =========================
def render():
    path = data_path()
    if not path:
        st.error(
            "Could not find df_subset.csv in:\n"
            f"- ${DATA_ENV_VAR}\n- data/\n- ../data/\n- ../../data/\n- data/processed/\n"
        )
        st.stop()

    try:
        metric, categories, skipped = load_types_table(path)
    except (OSError, ValueError, pd.errors.ParserError) as e:
        st.error(f"Failed to load disaster data from `{path}`: {e}")
        st.stop()

    if metric.empty:
        st.info("No valid disaster records (type + year) in the dataset.")
        st.stop()

    min_year = int(metric[YEAR_COL].min())
    max_year = int(metric[YEAR_COL].max())
    if min_year == max_year:
        max_year += 1
    start_year = DEFAULT_YEAR if DEFAULT_YEAR is not None else int(metric[YEAR_COL].max())
    start_year = min(max(start_year, min_year), max_year)

    _anchor("sec-types-by-year")
    section_title("Disasters by Type")

    c_year, c_sort = st.columns([3, 1], gap="large")
    with c_year:
        st.slider(
            "Year", min_value=min_year, max_value=max_year, value=start_year, step=1,
            key=YEAR_KEY, on_change=_on_year_change,
        )
    with c_sort:
        sort_options = list(SORT_MODES.keys())
        st.selectbox(
            "Sort", options=sort_options, index=sort_options.index(DEFAULT_SORT),
            format_func=SORT_MODES.get, key=SORT_KEY, on_change=_on_sort_change,
        )

    render_pass = _current_pass(metric, categories, path)
    n_visible = len(render_pass.end_bars()) - len(render_pass.exiting)
    year = render_pass.state.year
    story_context(
        f"{n_visible} disaster types recorded in {year}."
        if n_visible else f"No disasters recorded for {year}."
    )

    fig = build_figure(render_pass)
    components.html(figure_html(fig, render_pass.animated), height=HEIGHT + 20, scrolling=True)

    if SHOW_SKIPPED and not skipped.empty:
        with st.expander(f"Skipped rows ({int(skipped.sum())})"):
            st.dataframe(skipped.rename_axis("Reason").reset_index())

    st.caption("Source: EM-DAT – Centre for Research on the Epidemiology of Disasters (CRED).")
