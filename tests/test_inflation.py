"""Tests for the price index and inflation adjustment."""

import pandas as pd
import pytest

from pricetrends.config import Settings
from pricetrends.inflation import CPI_U_ANNUAL, PriceIndex, adjust_for_inflation, load_price_index


def test_adjust_scales_to_latest_index():
    records = pd.DataFrame({"year": [2000], "item": ["Milk"], "price": [1.00]})
    index = PriceIndex({2000: 100.0, 2024: 200.0})

    out = adjust_for_inflation(records, index)

    assert out.loc[0, "price"] == pytest.approx(2.00)
    assert records.loc[0, "price"] == 1.00


def test_years_without_index_pass_through():
    records = pd.DataFrame({"year": [1900, 2000], "item": ["Milk", "Milk"], "price": [0.10, 1.00]})
    out = adjust_for_inflation(records, PriceIndex({2000: 50.0, 2010: 100.0}))
    assert out["price"].tolist() == pytest.approx([0.10, 2.00])
    assert len(out) == 2


def test_zero_index_value_treated_as_unknown():
    index = PriceIndex({2000: 0.0, 2010: 100.0})
    assert index.get(2000) is None
    out = adjust_for_inflation(pd.DataFrame({"year": [2000], "item": ["Eggs"], "price": [1.5]}), index)
    assert out["price"].tolist() == [1.5]


def test_empty_index_leaves_prices_alone(records):
    out = adjust_for_inflation(records, PriceIndex())
    pd.testing.assert_frame_equal(out, records)


def test_applying_twice_double_adjusts():
    records = pd.DataFrame({"year": [2000], "item": ["Milk"], "price": [1.00]})
    index = PriceIndex({2000: 100.0, 2024: 200.0})
    twice = adjust_for_inflation(adjust_for_inflation(records, index), index)
    assert twice.loc[0, "price"] == pytest.approx(4.00)


def test_default_index_covers_presidency_table():
    index = PriceIndex.default()
    assert min(index.values) == 1953
    assert index.latest == CPI_U_ANNUAL[2024]
    assert index.get(1980) == pytest.approx(82.4)


def test_from_csv(tmp_path):
    path = tmp_path / "cpi.csv"
    path.write_text("Year,CPI\n1990,130.7\n2000,172.2\nbad,1\n")
    index = PriceIndex.from_csv(path)
    assert index.values == {1990: 130.7, 2000: 172.2}
    assert index.latest == 172.2


def test_from_csv_requires_year_and_value(tmp_path):
    path = tmp_path / "cpi.csv"
    path.write_text("when,amount\n1990,1\n")
    with pytest.raises(ValueError):
        PriceIndex.from_csv(path)


def test_load_price_index_uses_configured_csv(tmp_path):
    path = tmp_path / "index.csv"
    path.write_text("year,value\n2000,1\n2001,2\n")
    index = load_price_index(Settings(cpi_csv=path))
    assert index.latest == 2
    assert load_price_index(Settings()).values == CPI_U_ANNUAL
