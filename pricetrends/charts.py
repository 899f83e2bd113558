from __future__ import annotations

from typing import Any, Dict, Sequence

import altair as alt
import pandas as pd

from pricetrends.presidencies import PRESIDENCIES, Presidency, presidency_regions
from pricetrends.series import ChartSeries, color_for, series_frame

alt.data_transformers.disable_max_rows()

CHART_TITLE = "Household Item Prices Over Time"
GRID_COLOR = "rgba(0, 0, 0, 0.05)"


def to_vega_spec(chart: alt.TopLevelMixin) -> Dict[str, Any]:
    """Convert an Altair chart into a Vega-Lite spec dict (JSON-serializable)."""
    return chart.to_dict()


def _visible_regions(chart_series: ChartSeries, presidencies: Sequence[Presidency]) -> pd.DataFrame:
    regions = pd.DataFrame(presidency_regions(presidencies), columns=["xMin", "xMax", "backgroundColor", "label"])
    if not chart_series.years:
        return regions
    lo, hi = chart_series.years[0], chart_series.years[-1]
    regions = regions[(regions["xMax"] >= lo) & (regions["xMin"] <= hi)].copy()
    regions["xMin"] = regions["xMin"].clip(lower=lo)
    regions["xMax"] = regions["xMax"].clip(upper=hi)
    return regions


def price_chart(
    chart_series: ChartSeries,
    presidencies: Sequence[Presidency] = PRESIDENCIES,
    *,
    inflation_adjusted: bool = False,
    height: int = 480,
) -> alt.LayerChart:
    df = series_frame(chart_series)
    regions = _visible_regions(chart_series, presidencies)
    items = chart_series.items
    title = f"{CHART_TITLE} (inflation-adjusted)" if inflation_adjusted else CHART_TITLE

    # Pan and wheel-zoom along the year axis only.
    zoom = alt.selection_interval(bind="scales", encodings=["x"])

    bands = (
        alt.Chart(regions)
        .mark_rect()
        .encode(
            x=alt.X("xMin:Q"),
            x2="xMax:Q",
            fill=alt.Fill("backgroundColor:N", scale=None),
            tooltip=[alt.Tooltip("label:N", title="Presidency")],
        )
    )
    band_labels = (
        alt.Chart(regions)
        .mark_text(align="left", baseline="top", dx=3, dy=4, color="#666", fontSize=12)
        .encode(x=alt.X("xMin:Q"), y=alt.value(0), text="label:N")
    )
    lines = (
        alt.Chart(df)
        .mark_line(point={"filled": True, "size": 30}, strokeWidth=2)
        .encode(
            x=alt.X("year:Q", title="Year", axis=alt.Axis(format="d", gridColor=GRID_COLOR)),
            y=alt.Y(
                "price:Q",
                title="Price (USD)",
                scale=alt.Scale(zero=True),
                axis=alt.Axis(format="$,.0f", gridColor=GRID_COLOR),
            ),
            color=alt.Color(
                "item:N",
                title="Item",
                sort=items,
                scale=alt.Scale(domain=items, range=[color_for(i) for i in range(len(items))]),
                legend=alt.Legend(orient="right"),
            ),
            tooltip=[
                alt.Tooltip("item:N", title="Item"),
                alt.Tooltip("year:Q", title="Year", format="d"),
                alt.Tooltip("price:Q", title="Price", format="$,.2f"),
            ],
        )
        .add_params(zoom)
    )
    return alt.layer(bands, band_labels, lines).properties(title=title, height=height)
