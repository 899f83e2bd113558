"""Tests for the Streamlit page, run headless with streamlit's AppTest."""

from pathlib import Path

import pandas as pd
import pytest
from streamlit.testing.v1 import AppTest

from pricetrends.filters import FilterCriteria

APP_PATH = str(Path(__file__).resolve().parents[1] / "app.py")


def _run_app() -> AppTest:
    at = AppTest.from_file(APP_PATH, default_timeout=30)
    at.run()
    assert not at.exception
    return at


@pytest.fixture
def price_sources(monkeypatch, tmp_path, write_workbook):
    write_workbook("Bread.xlsx", {"data": pd.DataFrame({"Year": [1960, 2000, 2020], "Average": [0.20, 0.99, 3.50]})})
    write_workbook("Milk.xlsx", {"Data": pd.DataFrame({"Year": [1961, 2020], "Average": [0.50, 3.60]})})
    monkeypatch.setenv("PRICE_TRENDS_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("PRICE_TRENDS_SOURCES", "Bread.xlsx,Milk.xlsx")


def test_missing_sources_show_error(monkeypatch, tmp_path):
    monkeypatch.setenv("PRICE_TRENDS_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("PRICE_TRENDS_SOURCES", "Bread.xlsx,Milk.xlsx")
    at = _run_app()
    assert len(at.error) == 1
    assert "Every file failed to load" in at.error[0].value


def test_sheets_without_rows_show_error(monkeypatch, tmp_path, write_workbook):
    write_workbook("Bread.xlsx", {"data": pd.DataFrame({"Year": ["n/a"], "Average": ["--"]})})
    monkeypatch.setenv("PRICE_TRENDS_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("PRICE_TRENDS_SOURCES", "Bread.xlsx")
    at = _run_app()
    assert "no usable Year/Average rows" in at.error[0].value


def test_initial_page_shows_full_year_span(price_sources):
    at = _run_app()
    assert not at.error
    assert at.multiselect(key="item_select").options == ["Bread", "Milk"]
    assert at.number_input(key="year_start").value == 1960
    assert at.number_input(key="year_end").value == 2020
    assert at.session_state["app_state"].applied.is_empty()


def test_search_select_apply_toggle_reset(price_sources):
    at = _run_app()

    at.text_input(key="item_search").input("mi").run()
    assert at.multiselect(key="item_select").options == ["Milk"]

    at.multiselect(key="item_select").set_value(["Milk"]).run()
    at.button(key="apply_filters").click().run()
    state = at.session_state["app_state"]
    assert state.applied == FilterCriteria(selected_items=["Milk"], year_start=1960, year_end=2020)
    assert state.applied_inflation is False

    at.checkbox(key="adjust_inflation").check().run()
    state = at.session_state["app_state"]
    assert state.applied_inflation is True
    assert state.applied.selected_items == ["Milk"]

    at.button(key="reset_filters").click().run()
    state = at.session_state["app_state"]
    assert state.applied.is_empty()
    assert state.applied_inflation is False
    assert at.text_input(key="item_search").value == ""
    assert at.multiselect(key="item_select").value == []
    assert not at.exception


def test_select_all_and_clear_items(price_sources):
    at = _run_app()
    at.button(key="select_all").click().run()
    assert at.multiselect(key="item_select").value == ["Bread", "Milk"]
    at.button(key="clear_selection").click().run()
    assert at.multiselect(key="item_select").value == []
