"""Dashboard selection state and the actions that transform it.

Every action takes an `AppState` and returns a new one; rendering reads the
last *applied* criteria, so editing a control does not redraw the chart until
`apply` runs.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import List, Optional, Sequence, Tuple

import pandas as pd

from pricetrends.filters import FilterCriteria, apply_filters, search_items
from pricetrends.inflation import PriceIndex, adjust_for_inflation
from pricetrends.series import ChartSeries, build_series


@dataclass(frozen=True)
class AppState:
    search_term: str = ""
    selected_items: List[str] = field(default_factory=list)
    selected_presidencies: List[str] = field(default_factory=list)
    year_start: Optional[int] = None
    year_end: Optional[int] = None
    inflation_adjusted: bool = False
    applied: FilterCriteria = field(default_factory=FilterCriteria)
    applied_inflation: bool = False


def initial_state(years: Tuple[int, int]) -> AppState:
    start, end = years
    return AppState(year_start=start or None, year_end=end or None)


def visible_items(state: AppState, all_items: Sequence[str]) -> List[str]:
    return search_items(all_items, state.search_term)


def search(state: AppState, term: str, all_items: Sequence[str]) -> AppState:
    # Narrowing the list drops selections that are no longer shown.
    visible = set(search_items(all_items, term))
    return replace(state, search_term=term, selected_items=[i for i in state.selected_items if i in visible])


def select_items(state: AppState, items: Sequence[str]) -> AppState:
    return replace(state, selected_items=list(items))


def select_all_items(state: AppState, all_items: Sequence[str]) -> AppState:
    return replace(state, selected_items=visible_items(state, all_items))


def clear_items(state: AppState) -> AppState:
    return replace(state, selected_items=[])


def select_presidencies(state: AppState, presidencies: Sequence[str]) -> AppState:
    return replace(state, selected_presidencies=list(presidencies))


def select_all_presidencies(state: AppState, all_presidencies: Sequence[str]) -> AppState:
    return replace(state, selected_presidencies=list(all_presidencies))


def clear_presidencies(state: AppState) -> AppState:
    return replace(state, selected_presidencies=[])


def set_year_range(state: AppState, start: Optional[int], end: Optional[int]) -> AppState:
    return replace(state, year_start=start or None, year_end=end or None)


def set_inflation(state: AppState, enabled: bool) -> AppState:
    return replace(state, inflation_adjusted=bool(enabled))


def criteria_for(state: AppState) -> FilterCriteria:
    return FilterCriteria(
        selected_items=list(state.selected_items),
        selected_presidencies=list(state.selected_presidencies),
        year_start=state.year_start,
        year_end=state.year_end,
    )


def apply(state: AppState) -> AppState:
    return replace(state, applied=criteria_for(state), applied_inflation=state.inflation_adjusted)


def reset(years: Tuple[int, int]) -> AppState:
    """Back to the full dataset: no selections, full year span, nominal prices."""
    return initial_state(years)


def render_pipeline(
    records: pd.DataFrame,
    criteria: Optional[FilterCriteria],
    *,
    inflation_adjusted: bool = False,
    index: Optional[PriceIndex] = None,
) -> ChartSeries:
    filtered = apply_filters(records, criteria)
    if inflation_adjusted:
        filtered = adjust_for_inflation(filtered, index or PriceIndex.default())
    return build_series(filtered)
