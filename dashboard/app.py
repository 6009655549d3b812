# app.py
import sys
from pathlib import Path
import streamlit as st

# --- sys.path so imports work no matter how you run the app ---
ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.append(str(ROOT))

from dashboard.components import disaster_types_tab
from disaster_bars.utils import style_config

# ----------------------------
# PAGE CONFIG + BASE STYLE
# ----------------------------
st.set_page_config(page_title="Disaster Types by Year", page_icon=None, layout="wide")
style_config.apply_streamlit_style()

css = style_config.load_css(str(ROOT / "assets" / "style.css"))
if css:
    st.markdown(css, unsafe_allow_html=True)
else:
    st.warning("assets/style.css not found — styles may not render as designed.")

# ----------------------------
# THEME PICKER (Gray by default)
# ----------------------------
st.sidebar.header("Display")
theme_name = st.sidebar.selectbox("Theme", list(style_config.THEMES.keys()), index=0)
st.markdown(style_config.theme_css(style_config.THEMES[theme_name]), unsafe_allow_html=True)

# ----------------------------
# BANNER
# ----------------------------
st.markdown(
    """
<div class="gv">
  <div class="gv-banner">
    <div class="gv-banner__inner">
      <div class="gv-banner__title">Global Natural Disasters by Type</div>
      <div class="gv-banner__subtitle">Yearly counts of recorded disasters per disaster type</div>
    </div>
  </div>
""",
    unsafe_allow_html=True,
)

# ----------------------------
# CONTENT
# ----------------------------
disaster_types_tab.render()

# ----------------------------
# FOOTER + close wrapper
# ----------------------------
st.markdown(
    '<div class="gv-separator"></div><div class="gv-footer">Move the slider to change the year; bars animate between years.</div></div>',
    unsafe_allow_html=True,
)
