"""
style_config.py
---------------
Centralizes dashboard color palette, fonts, and theme configuration.
"""
import os
from typing import Dict, List, Optional, Sequence

from plotly.colors import sample_colorscale, sequential

COLOR_SCHEME = {
    "background": "#F8F9FA",
    "primary": "#0056B3",
    "text": "#212529",
}

FONTS = {
    "header": "Helvetica, Arial, sans-serif",
    "body": "Open Sans, sans-serif",
}

# One distinct hue per disaster type, spread evenly over the scale
CATEGORY_COLORSCALE = sequential.Rainbow

THEMES = {
    "Gray (default)": {"900": "#1f2937", "800": "#374151", "700": "#4b5563", "600": "#6b7280", "050": "#f3f4f6"},
    "Blue":           {"900": "#0f3e6b", "800": "#134d88", "700": "#185aa3", "600": "#1b66b9", "050": "#eef5fc"},
    "Dark":           {"900": "#e5e7eb", "800": "#d1d5db", "700": "#9ca3af", "600": "#6b7280", "050": "#111827"},
}


def category_colors(categories: Sequence[str], colorscale=CATEGORY_COLORSCALE) -> Dict[str, str]:
    """
    Map each category to a color sampled evenly from `colorscale`.

    The mapping only depends on the (sorted) category list, so the same
    category keeps its color for the whole session.
    """
    n = len(categories)
    if n == 0:
        return {}
    points: List[float] = [0.0] if n == 1 else [i / (n - 1) for i in range(n)]
    colors = sample_colorscale(colorscale, points)
    return dict(zip(categories, colors))


def apply_streamlit_style():
    """
    Injects custom CSS into Streamlit app to apply global style theme.
    """
    import streamlit as st

    custom_css = f"""
        <style>
            body {{
                background-color: {COLOR_SCHEME['background']};
                color: {COLOR_SCHEME['text']};
                font-family: {FONTS['body']};
            }}

            h1, h2, h3 {{
                color: {COLOR_SCHEME['primary']};
                font-family: {FONTS['header']};
            }}
        </style>
    """

    st.markdown(custom_css, unsafe_allow_html=True)


def theme_css(theme: Dict[str, str]) -> str:
    """CSS custom properties for the selected theme."""
    return f"""
    <style>
    :root {{
      --brand-900:{theme['900']};
      --brand-800:{theme['800']};
      --brand-700:{theme['700']};
      --brand-600:{theme['600']};
      --brand-050:{theme['050']};
    }}
    .gv {{
      --brand-900:{theme['900']};
      --brand-800:{theme['800']};
      --brand-700:{theme['700']};
      --brand-600:{theme['600']};
      --brand-050:{theme['050']};
    }}
    </style>
    """


def load_css(path: str) -> Optional[str]:
    """`<style>` block with the stylesheet at `path`, or None if the file is missing."""
    if not os.path.exists(path):
        return None
    with open(path, encoding="utf-8") as f:
        return f"<style>{f.read()}</style>"
