"""Shared pytest fixtures for price record tests."""

from pathlib import Path
from typing import Callable, Dict

import pandas as pd
import pytest

from pricetrends.data import _load_dashboard_data_cached
from pricetrends.presidencies import annotate_presidencies


@pytest.fixture
def raw_records():
    """Small year/item/price frame in load order, with a gap for Milk in 2001."""
    return pd.DataFrame(
        {
            "year": [1960, 1961, 2000, 2001, 2020, 1961, 2000, 2020],
            "item": ["Bread", "Bread", "Bread", "Bread", "Bread", "Milk", "Milk", "Milk"],
            "price": [0.20, 0.21, 0.99, 1.01, 3.50, 0.50, 2.78, 3.60],
        }
    )


@pytest.fixture
def records(raw_records):
    return annotate_presidencies(raw_records)


@pytest.fixture
def write_workbook(tmp_path) -> Callable[..., Path]:
    """Write an .xlsx with the given sheets into tmp_path and return its path."""

    def _write(name: str, sheets: Dict[str, pd.DataFrame]) -> Path:
        path = tmp_path / name
        with pd.ExcelWriter(path, engine="openpyxl") as writer:
            for sheet_name, frame in sheets.items():
                frame.to_excel(writer, sheet_name=sheet_name, index=False)
        return path

    return _write


@pytest.fixture(autouse=True)
def clear_dashboard_cache():
    _load_dashboard_data_cached.cache_clear()
    yield
    _load_dashboard_data_cached.cache_clear()
