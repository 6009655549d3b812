from pathlib import Path

import pytest
from streamlit.testing.v1 import AppTest

APP = str(Path(__file__).resolve().parent.parent / "dashboard" / "app.py")
VIEW_KEY = "__types_chart_view__"


@pytest.fixture
def dataset(tmp_path, monkeypatch):
    path = tmp_path / "df_subset.csv"
    path.write_text(
        "Disaster.Type,Start.Year\n"
        "Flood,2000\n"
        "Flood,2001\n"
        "Drought,2000\n"
        "Storm,abc\n"
    )
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("DISASTER_CSV", str(path))
    return path


def test_missing_dataset_shows_error(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("DISASTER_CSV", str(tmp_path / "missing.csv"))

    at = AppTest.from_file(APP).run(timeout=30)

    assert not at.exception
    assert len(at.error) == 1
    assert "Could not find df_subset.csv" in at.error[0].value


def test_dataset_without_required_columns_shows_error(tmp_path, monkeypatch):
    path = tmp_path / "broken.csv"
    path.write_text("Type,Year\nFlood,2000\n")
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("DISASTER_CSV", str(path))

    at = AppTest.from_file(APP).run(timeout=30)

    assert len(at.error) == 1
    assert "missing columns" in at.error[0].value


def test_initial_render_uses_latest_year(dataset):
    at = AppTest.from_file(APP).run(timeout=30)

    assert not at.exception
    assert at.slider(key="__year_slider__").value == 2001
    view = at.session_state[VIEW_KEY]
    assert view.state.year == 2001
    assert set(view.bars) == {"Flood"}


def test_year_change_dispatches_to_view(dataset):
    at = AppTest.from_file(APP).run(timeout=30)
    at.slider(key="__year_slider__").set_value(2000).run(timeout=30)

    assert not at.exception
    view = at.session_state[VIEW_KEY]
    assert view.state.year == 2000
    assert set(view.bars) == {"Drought", "Flood"}


def test_sort_change_dispatches_to_view(dataset):
    at = AppTest.from_file(APP).run(timeout=30)
    at.selectbox(key="__sort_select__").set_value("cntDesc").run(timeout=30)

    assert not at.exception
    assert at.session_state[VIEW_KEY].state.sort_mode == "cntDesc"


def test_stylesheet_loaded_and_theme_applied(dataset):
    at = AppTest.from_file(APP).run(timeout=30)
    assert len(at.warning) == 0
    assert any(".gv-section-title" in md.value for md in at.markdown)

    at.sidebar.selectbox[0].set_value("Blue").run(timeout=30)
    assert not at.exception
    assert any("--brand-900:#0f3e6b" in md.value for md in at.markdown)
