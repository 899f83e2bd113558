from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

import pandas as pd

from pricetrends.presidencies import PRESIDENCIES, Presidency, presidency_regions


PALETTE = [
    "#2196f3",  # blue
    "#ff9800",  # orange
    "#4caf50",  # green
    "#f44336",  # red
    "#9c27b0",  # purple
    "#00bcd4",  # cyan
    "#ffeb3b",  # yellow
    "#795548",  # brown
    "#607d8b",  # blue grey
    "#e91e63",  # pink
    "#3f51b5",  # indigo
    "#009688",  # teal
    "#ff5722",  # deep orange
    "#8bc34a",  # light green
    "#673ab7",  # deep purple
    "#03a9f4",  # light blue
    "#cddc39",  # lime
    "#ffc107",  # amber
    "#9e9e9e",  # grey
    "#ff4081",  # accent pink
]


@dataclass(frozen=True)
class SeriesStyle:
    borderWidth: int = 2
    tension: float = 0.1
    spanGaps: bool = False
    pointRadius: int = 3
    pointHoverRadius: int = 5


@dataclass(frozen=True)
class ChartSeries:
    years: List[int] = field(default_factory=list)
    series: Dict[str, List[Optional[float]]] = field(default_factory=dict)

    @property
    def items(self) -> List[str]:
        return list(self.series)

    @property
    def is_empty(self) -> bool:
        return not self.years or not self.series


def color_for(idx: int, palette: Sequence[str] = PALETTE) -> str:
    return palette[idx % len(palette)]


def build_series(records: pd.DataFrame) -> ChartSeries:
    """Pivot records into one year axis and one price list per item.

    Items keep first-seen order. A missing (item, year) pair is a gap (None).
    When the same pair occurs more than once the first record wins.
    """
    if records.empty:
        return ChartSeries()
    years = sorted(int(y) for y in records["year"].unique())
    items = [str(x) for x in pd.unique(records["item"])]
    first = records.drop_duplicates(subset=["item", "year"], keep="first")
    lookup: Dict[Tuple[str, int], float] = {
        (str(item), int(year)): float(price)
        for item, year, price in zip(first["item"], first["year"], first["price"])
    }
    return ChartSeries(
        years=years,
        series={item: [lookup.get((item, year)) for year in years] for item in items},
    )


def series_frame(chart_series: ChartSeries) -> pd.DataFrame:
    """Long-form year/item/price rows; gaps stay as NaN."""
    rows = [
        {"year": year, "item": item, "price": price}
        for item, values in chart_series.series.items()
        for year, price in zip(chart_series.years, values)
    ]
    if not rows:
        return pd.DataFrame(columns=["year", "item", "price"])
    return pd.DataFrame(rows).astype({"year": "int64", "price": "float64"})


def to_chart_payload(
    chart_series: ChartSeries,
    presidencies: Sequence[Presidency] = PRESIDENCIES,
    *,
    style: Optional[SeriesStyle] = None,
) -> Dict[str, Any]:
    style_attrs = asdict(style or SeriesStyle())
    datasets = [
        {
            "label": item,
            "data": list(values),
            "borderColor": color_for(idx),
            "backgroundColor": color_for(idx),
            **style_attrs,
        }
        for idx, (item, values) in enumerate(chart_series.series.items())
    ]
    return {
        "labels": list(chart_series.years),
        "datasets": datasets,
        "annotations": presidency_regions(presidencies),
    }
