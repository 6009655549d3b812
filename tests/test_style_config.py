import re
from pathlib import Path

import pytest

from disaster_bars.utils.style_config import THEMES, load_css, theme_css

ROOT = Path(__file__).resolve().parent.parent
STYLESHEET = ROOT / "assets" / "style.css"
BRAND_VARS = ["--brand-900", "--brand-800", "--brand-700", "--brand-600", "--brand-050"]


def _markup_classes():
    classes = set()
    for source in [ROOT / "dashboard" / "app.py", ROOT / "dashboard" / "components" / "disaster_types_tab.py"]:
        for attr in re.findall(r'class="([^"]+)"', source.read_text(encoding="utf-8")):
            classes.update(attr.split())
    return classes


def test_stylesheet_reads_every_brand_variable():
    css = STYLESHEET.read_text(encoding="utf-8")
    for var in BRAND_VARS:
        assert f"var({var})" in css


def test_stylesheet_styles_every_class_in_the_markup():
    css = STYLESHEET.read_text(encoding="utf-8")
    classes = _markup_classes() - {"gv"}
    assert {"gv-banner", "gv-section-title", "gv-separator", "gv-footer", "gv-context"} <= classes
    for cls in classes:
        assert f".{cls}" in css, cls


@pytest.mark.parametrize("name", list(THEMES))
def test_theme_css_sets_every_brand_variable(name):
    css = theme_css(THEMES[name])
    for key, var in zip(["900", "800", "700", "600", "050"], BRAND_VARS):
        assert f"{var}:{THEMES[name][key]}" in css


def test_load_css_wraps_file(tmp_path):
    path = tmp_path / "style.css"
    path.write_text(".gv-footer { color: red; }")
    assert load_css(str(path)) == "<style>.gv-footer { color: red; }</style>"


def test_load_css_missing_file(tmp_path):
    assert load_css(str(tmp_path / "nope.css")) is None
