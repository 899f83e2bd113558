"""Tests for series building and the chart payload."""

import math

import pandas as pd

from pricetrends.presidencies import PRESIDENCIES
from pricetrends.series import PALETTE, ChartSeries, SeriesStyle, build_series, series_frame, to_chart_payload


def test_years_sorted_and_distinct(raw_records):
    chart_series = build_series(raw_records)
    assert chart_series.years == [1960, 1961, 2000, 2001, 2020]
    assert len(chart_series.years) == raw_records["year"].nunique()


def test_items_keep_first_seen_order():
    records = pd.DataFrame({"year": [2000, 2000, 2001], "item": ["Milk", "Bread", "Apples"], "price": [1.0, 2.0, 3.0]})
    assert build_series(records).items == ["Milk", "Bread", "Apples"]


def test_present_pairs_hold_price_absent_pairs_are_gaps(raw_records):
    chart_series = build_series(raw_records)
    years = chart_series.years
    for item, year, price in zip(raw_records["item"], raw_records["year"], raw_records["price"]):
        assert chart_series.series[item][years.index(year)] == price
    milk = chart_series.series["Milk"]
    assert milk[years.index(1960)] is None
    assert milk[years.index(2001)] is None


def test_duplicate_pair_first_record_wins():
    records = pd.DataFrame({"year": [2000, 2000], "item": ["Milk", "Milk"], "price": [1.0, 9.0]})
    assert build_series(records).series == {"Milk": [1.0]}


def test_empty_records():
    chart_series = build_series(pd.DataFrame({"year": [], "item": [], "price": []}))
    assert chart_series.is_empty
    assert chart_series.items == []


def test_series_frame_keeps_gaps():
    df = series_frame(ChartSeries(years=[2000, 2001], series={"Milk": [1.0, None]}))
    assert df["year"].tolist() == [2000, 2001]
    assert df["price"].iloc[0] == 1.0
    assert math.isnan(df["price"].iloc[1])
    assert series_frame(ChartSeries()).empty


def test_chart_payload_shape(raw_records):
    payload = to_chart_payload(build_series(raw_records), PRESIDENCIES)

    assert payload["labels"] == [1960, 1961, 2000, 2001, 2020]
    assert [d["label"] for d in payload["datasets"]] == ["Bread", "Milk"]
    bread, milk = payload["datasets"]
    assert bread["borderColor"] == PALETTE[0]
    assert milk["backgroundColor"] == PALETTE[1]
    assert milk["data"][0] is None
    assert bread["spanGaps"] is False
    assert len(payload["annotations"]) == len(PRESIDENCIES)


def test_chart_payload_style_is_configurable():
    payload = to_chart_payload(ChartSeries(years=[2000], series={"Milk": [1.0]}), style=SeriesStyle(borderWidth=4, tension=0.0))
    dataset = payload["datasets"][0]
    assert dataset["borderWidth"] == 4
    assert dataset["tension"] == 0.0


def test_colors_cycle_through_palette():
    series = {f"Item {i}": [float(i)] for i in range(len(PALETTE) + 1)}
    payload = to_chart_payload(ChartSeries(years=[2000], series=series))
    assert payload["datasets"][-1]["borderColor"] == PALETTE[0]
